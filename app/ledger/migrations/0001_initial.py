"""
Initial ledger schema.

Tables:
    - Ledger: owner, name, one default per user
    - Account: typed money container with cached balance
    - Category: expense/income classification, unique name per ledger and type
    - Transaction: expense, income or transfer with shape check constraints
    - BalanceAdjustment: audited manual balance change
"""

import uuid

import django.db.models.deletion
import django.db.models.functions.text
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Ledger",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="When the row was inserted",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="When the row was last written",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "name",
                    models.CharField(
                        help_text="Display name of the ledger", max_length=100
                    ),
                ),
                (
                    "is_default",
                    models.BooleanField(
                        default=False,
                        help_text="Whether this is the owner's default ledger",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="User who owns this ledger",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="ledgers",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_default", True)),
                        fields=("user",),
                        name="ledger_one_default_per_user",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Account",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="When the row was inserted",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="When the row was last written",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive")],
                        db_index=True,
                        default="active",
                        help_text="Whether this record may receive new references",
                        max_length=16,
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "name",
                    models.CharField(
                        help_text="Display name of the account", max_length=100
                    ),
                ),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("cash", "Cash"),
                            ("bank", "Bank"),
                            ("credit", "Credit"),
                            ("wallet", "Wallet"),
                        ],
                        help_text="Kind of account",
                        max_length=16,
                    ),
                ),
                (
                    "initial_balance",
                    models.BigIntegerField(
                        default=0,
                        help_text="Opening balance in minor units (cents)",
                    ),
                ),
                (
                    "current_balance",
                    models.BigIntegerField(
                        default=0,
                        help_text="Running balance in minor units (cents)",
                    ),
                ),
                (
                    "ledger",
                    models.ForeignKey(
                        help_text="Ledger this account belongs to",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="accounts",
                        to="ledger.ledger",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(
                        fields=["ledger", "status"], name="account_ledger_status_idx"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Category",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="When the row was inserted",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="When the row was last written",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive")],
                        db_index=True,
                        default="active",
                        help_text="Whether this record may receive new references",
                        max_length=16,
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "name",
                    models.CharField(
                        help_text="Display name of the category", max_length=100
                    ),
                ),
                (
                    "type",
                    models.CharField(
                        choices=[("expense", "Expense"), ("income", "Income")],
                        help_text="Transaction type this category classifies",
                        max_length=16,
                    ),
                ),
                (
                    "is_system",
                    models.BooleanField(
                        default=False,
                        help_text="Whether this category was seeded with the ledger",
                    ),
                ),
                (
                    "ledger",
                    models.ForeignKey(
                        help_text="Ledger this category belongs to",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="categories",
                        to="ledger.ledger",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "categories",
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(
                        fields=["ledger", "type"], name="category_ledger_type_idx"
                    )
                ],
                "constraints": [
                    models.UniqueConstraint(
                        django.db.models.functions.text.Lower("name"),
                        models.F("ledger"),
                        models.F("type"),
                        name="category_unique_name_per_ledger_type",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Transaction",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="When the row was inserted",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="When the row was last written",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("expense", "Expense"),
                            ("income", "Income"),
                            ("transfer", "Transfer"),
                        ],
                        help_text="Kind of money movement",
                        max_length=16,
                    ),
                ),
                (
                    "amount",
                    models.BigIntegerField(
                        help_text="Amount in minor units (cents), always positive"
                    ),
                ),
                (
                    "occurred_at",
                    models.BigIntegerField(
                        help_text="When the movement happened, in milliseconds since epoch"
                    ),
                ),
                (
                    "note",
                    models.TextField(blank=True, help_text="Optional note", null=True),
                ),
                (
                    "account",
                    models.ForeignKey(
                        help_text="Affected account, or transfer source",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="ledger.account",
                    ),
                ),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        help_text="Category for expense and income",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="ledger.category",
                    ),
                ),
                (
                    "ledger",
                    models.ForeignKey(
                        help_text="Ledger this transaction belongs to",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="ledger.ledger",
                    ),
                ),
                (
                    "transfer_account",
                    models.ForeignKey(
                        blank=True,
                        help_text="Transfer destination account",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="incoming_transfers",
                        to="ledger.account",
                    ),
                ),
            ],
            options={
                "ordering": ["-occurred_at"],
                "indexes": [
                    models.Index(
                        fields=["ledger", "occurred_at"],
                        name="txn_ledger_occurred_idx",
                    ),
                    models.Index(
                        fields=["ledger", "type", "occurred_at"],
                        name="txn_ledger_type_occurred_idx",
                    ),
                    models.Index(
                        fields=["ledger", "category", "occurred_at"],
                        name="txn_ledger_cat_occurred_idx",
                    ),
                    models.Index(
                        fields=["account", "occurred_at"],
                        name="txn_account_occurred_idx",
                    ),
                    models.Index(
                        fields=["transfer_account", "occurred_at"],
                        name="txn_transfer_occurred_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="transaction_amount_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(
                                ("type__in", ["expense", "income"]),
                                ("category__isnull", False),
                                ("transfer_account__isnull", True),
                            ),
                            models.Q(
                                ("type", "transfer"),
                                ("category__isnull", True),
                                ("transfer_account__isnull", False),
                                models.Q(
                                    ("transfer_account", models.F("account")),
                                    _negated=True,
                                ),
                            ),
                            _connector="OR",
                        ),
                        name="transaction_shape_matches_type",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="BalanceAdjustment",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="When the row was inserted",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="When the row was last written",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "delta",
                    models.BigIntegerField(
                        help_text="Signed change in minor units (cents)"
                    ),
                ),
                (
                    "reason",
                    models.TextField(
                        blank=True,
                        help_text="Optional reason for the adjustment",
                        null=True,
                    ),
                ),
                (
                    "account",
                    models.ForeignKey(
                        help_text="Adjusted account",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="adjustments",
                        to="ledger.account",
                    ),
                ),
                (
                    "actor",
                    models.ForeignKey(
                        help_text="User who made the adjustment",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="balance_adjustments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "ledger",
                    models.ForeignKey(
                        help_text="Ledger this adjustment belongs to",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="adjustments",
                        to="ledger.ledger",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["ledger", "created_at"],
                        name="adjustment_ledger_created_idx",
                    ),
                    models.Index(
                        fields=["account", "created_at"],
                        name="adjustment_account_created_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("delta", 0), _negated=True),
                        name="adjustment_delta_nonzero",
                    )
                ],
            },
        ),
    ]
