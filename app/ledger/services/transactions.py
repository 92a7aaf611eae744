"""
Transaction engine.

Creates, edits, deletes and lists expenses, incomes and transfers while
keeping every account's current_balance equal to its initial balance plus
the signed effects of its transactions and adjustments.

Every mutation follows the same order:
    1. Authorize against the owning ledger
    2. Validate all input (nothing is written if any check fails)
    3. Lock touched account rows in id order
    4. Write the transaction row and the net balance deltas together

Usage:
    from ledger.services import TransactionService
    from ledger.types import TransactionPatch

    txn = TransactionService.create_expense(
        user, ledger.id, account.id, food.id, amount=5000, occurred_at=1700000000000
    )
    TransactionService.update(user, txn.id, TransactionPatch(amount=4000))
    TransactionService.remove(user, txn.id)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db.models import Q

from core.services import BaseService
from ledger.authorization import (
    get_or_none,
    require_ledger_owner,
    require_transaction_owner,
)
from ledger.balances import (
    BalanceDeltas,
    apply_deltas,
    effects_of,
    lock_accounts,
    transaction_effects,
)
from ledger.exceptions import (
    AccountNotFound,
    CategoryNotFound,
    CategoryTypeMismatch,
    CrossLedgerReference,
    InactiveAccount,
    InactiveCategory,
    InvalidArgument,
)
from ledger.models import Account, Category, Transaction, TransactionType
from ledger.types import TransactionFilters, TransactionPatch
from ledger.validation import (
    assert_choice,
    assert_limit,
    assert_non_negative_integer,
    assert_positive_integer_amount,
    assert_time_window,
    assert_timestamp,
    normalize_optional_note,
)

if TYPE_CHECKING:
    import uuid

    from authentication.models import User
    from ledger.models import Ledger


class TransactionService(BaseService):
    """
    Service for the balance-consistent transaction ledger.

    Transaction type is fixed at creation. Expense and income may change
    amount, occurred_at, account, category and note. Transfers may change
    amount, occurred_at, either account leg and note, never category.
    """

    # =========================================================================
    # Reference checks
    # =========================================================================

    @staticmethod
    def _resolve_account(account_id: uuid.UUID, ledger: Ledger) -> Account:
        account = get_or_none(Account.objects.all(), account_id)
        if account is None:
            raise AccountNotFound(
                "Account not found",
                details={"account_id": str(account_id)},
            )
        if account.ledger_id != ledger.id:
            raise CrossLedgerReference(
                "Account does not belong to ledger",
                details={"account_id": str(account.id), "ledger_id": str(ledger.id)},
            )
        return account

    @staticmethod
    def _require_active_account(account: Account) -> None:
        if not account.is_active:
            raise InactiveAccount(
                "Account is inactive",
                details={"account_id": str(account.id)},
            )

    @staticmethod
    def _resolve_category(
        category_id: uuid.UUID,
        ledger: Ledger,
        txn_type: str,
        mismatch_message: str,
    ) -> Category:
        category = get_or_none(Category.objects.all(), category_id)
        if category is None:
            raise CategoryNotFound(
                "Category not found",
                details={"category_id": str(category_id)},
            )
        if category.ledger_id != ledger.id:
            raise CrossLedgerReference(
                "Category does not belong to ledger",
                details={"category_id": str(category.id), "ledger_id": str(ledger.id)},
            )
        if category.type != txn_type:
            raise CategoryTypeMismatch(
                mismatch_message,
                details={
                    "category_id": str(category.id),
                    "expected": txn_type,
                    "actual": category.type,
                },
            )
        if not category.is_active:
            raise InactiveCategory(
                "Category is inactive",
                details={"category_id": str(category.id)},
            )
        return category

    @classmethod
    def _lock_and_recheck(
        cls, accounts: list[Account], require_active: list[Account]
    ) -> None:
        """
        Lock account rows and re-check status against the locked state.

        Status may have changed between the unlocked read and the lock.
        """
        locked = lock_accounts(account.id for account in accounts)
        for account in accounts:
            if account.id not in locked:
                raise AccountNotFound(
                    "Account not found",
                    details={"account_id": str(account.id)},
                )
        for account in require_active:
            cls._require_active_account(locked[account.id])

    # =========================================================================
    # Create
    # =========================================================================

    @classmethod
    def _create_categorized(
        cls,
        user: User,
        txn_type: str,
        ledger_id: uuid.UUID,
        account_id: uuid.UUID,
        category_id: uuid.UUID,
        amount: int,
        occurred_at: int | float,
        note: str | None,
    ) -> Transaction:
        ledger = require_ledger_owner(user, ledger_id)
        assert_positive_integer_amount(amount, "amount")
        assert_timestamp(occurred_at, "occurred_at")
        note = normalize_optional_note(note)

        account = cls._resolve_account(account_id, ledger)
        cls._require_active_account(account)
        category = cls._resolve_category(
            category_id,
            ledger,
            txn_type,
            mismatch_message=f"Category type must be {txn_type}",
        )

        with cls.atomic():
            cls._lock_and_recheck([account], require_active=[account])
            txn = Transaction.objects.create(
                ledger=ledger,
                type=txn_type,
                amount=amount,
                occurred_at=int(occurred_at),
                note=note,
                account=account,
                category=category,
            )
            apply_deltas(effects_of(txn))

        cls.get_logger().info(
            f"Created {txn_type} {txn.id} of {amount} on account {account.id}"
        )
        return txn

    @classmethod
    def create_expense(
        cls,
        user: User,
        ledger_id: uuid.UUID,
        account_id: uuid.UUID,
        category_id: uuid.UUID,
        amount: int,
        occurred_at: int | float,
        note: str | None = None,
    ) -> Transaction:
        """
        Record an expense and debit the account.

        Args:
            user: Current principal
            ledger_id: Owning ledger
            account_id: Active account in the ledger
            category_id: Active expense category in the ledger
            amount: Positive amount in minor units
            occurred_at: Event time in milliseconds since epoch
            note: Optional note, blank notes are dropped

        Returns:
            The created Transaction

        Raises:
            InvalidArgument: Bad amount or timestamp
            AccountNotFound / CategoryNotFound: Unknown references
            CrossLedgerReference: Reference belongs to another ledger
            InactiveAccount / InactiveCategory: Retired references
            CategoryTypeMismatch: Category is not an expense category
        """
        return cls._create_categorized(
            user,
            TransactionType.EXPENSE,
            ledger_id,
            account_id,
            category_id,
            amount,
            occurred_at,
            note,
        )

    @classmethod
    def create_income(
        cls,
        user: User,
        ledger_id: uuid.UUID,
        account_id: uuid.UUID,
        category_id: uuid.UUID,
        amount: int,
        occurred_at: int | float,
        note: str | None = None,
    ) -> Transaction:
        """
        Record an income and credit the account.

        Same arguments and failures as create_expense, with an income
        category.
        """
        return cls._create_categorized(
            user,
            TransactionType.INCOME,
            ledger_id,
            account_id,
            category_id,
            amount,
            occurred_at,
            note,
        )

    @classmethod
    def create_transfer(
        cls,
        user: User,
        ledger_id: uuid.UUID,
        from_account_id: uuid.UUID,
        to_account_id: uuid.UUID,
        amount: int,
        occurred_at: int | float,
        note: str | None = None,
    ) -> Transaction:
        """
        Move money between two accounts of the same ledger.

        The source is debited and the destination credited by the same
        amount, so the sum of balances in the ledger is unchanged.

        Raises:
            InvalidArgument: Bad amount or timestamp, identical accounts
            AccountNotFound: Unknown account
            CrossLedgerReference: Account belongs to another ledger
            InactiveAccount: Either account is retired
        """
        ledger = require_ledger_owner(user, ledger_id)
        assert_positive_integer_amount(amount, "amount")
        assert_timestamp(occurred_at, "occurred_at")
        if str(from_account_id) == str(to_account_id):
            raise InvalidArgument(
                "from_account_id and to_account_id must be different",
                details={"field": "to_account_id", "constraint": "distinct_accounts"},
            )
        note = normalize_optional_note(note)

        source = cls._resolve_account(from_account_id, ledger)
        destination = cls._resolve_account(to_account_id, ledger)
        if not source.is_active or not destination.is_active:
            raise InactiveAccount(
                "Transfer accounts must be active",
                details={
                    "from_account_id": str(source.id),
                    "to_account_id": str(destination.id),
                },
            )

        with cls.atomic():
            cls._lock_and_recheck(
                [source, destination], require_active=[source, destination]
            )
            txn = Transaction.objects.create(
                ledger=ledger,
                type=TransactionType.TRANSFER,
                amount=amount,
                occurred_at=int(occurred_at),
                note=note,
                account=source,
                transfer_account=destination,
            )
            apply_deltas(effects_of(txn))

        cls.get_logger().info(
            f"Created transfer {txn.id} of {amount} "
            f"from {source.id} to {destination.id}"
        )
        return txn

    # =========================================================================
    # Update
    # =========================================================================

    @staticmethod
    def _validate_patch_shape(txn: Transaction, patch: TransactionPatch) -> None:
        """Input checks that need no database access."""
        if patch.amount is not None:
            assert_positive_integer_amount(patch.amount, "amount")
        if patch.occurred_at is not None:
            assert_timestamp(patch.occurred_at, "occurred_at")

        if patch.clear_note and patch.note is not None:
            raise InvalidArgument(
                "note and clear_note cannot be used together",
                details={"field": "note", "constraint": "exclusive_with_clear_note"},
            )
        if patch.note is not None and not patch.note.strip():
            raise InvalidArgument(
                "note cannot be empty",
                details={"field": "note", "constraint": "non_empty"},
            )

        if txn.type == TransactionType.TRANSFER:
            if patch.category_id is not None:
                raise InvalidArgument(
                    "Transfer transaction cannot set category_id",
                    details={"field": "category_id", "constraint": "not_for_transfer"},
                )
        elif patch.transfer_account_id is not None:
            raise InvalidArgument(
                f"{txn.type.capitalize()} transaction cannot set transfer_account_id",
                details={
                    "field": "transfer_account_id",
                    "constraint": "transfer_only",
                },
            )

    @classmethod
    def update(
        cls,
        user: User,
        transaction_id: uuid.UUID,
        patch: TransactionPatch,
    ) -> Transaction:
        """
        Edit a transaction and rebalance the affected accounts.

        The old and new states are each turned into a per-account signed
        effect map. Their difference is applied with one update per account,
        which handles amount changes, account moves and transfer leg swaps
        alike.

        Args:
            user: Current principal
            transaction_id: Transaction to edit
            patch: Fields to change, None means unchanged

        Returns:
            The updated Transaction

        Raises:
            TransactionNotFound: If the transaction does not exist
            InvalidArgument: Malformed values, note/clear_note conflict,
                fields that do not apply to the type, identical transfer legs
            AccountNotFound / CategoryNotFound: Unknown new references
            CrossLedgerReference: New reference belongs to another ledger
            InactiveAccount / InactiveCategory: New reference is retired
            CategoryTypeMismatch: New category type differs
        """
        with cls.atomic():
            txn = require_transaction_owner(user, transaction_id, for_update=True)
            cls._validate_patch_shape(txn, patch)
            ledger = txn.ledger

            old_effects = effects_of(txn)
            current_accounts = {txn.account_id, txn.transfer_account_id} - {None}

            # Newly referenced accounts must be in the ledger and active;
            # accounts the transaction already points at are not re-gated.
            referenced: list[Account] = []
            newly_referenced: list[Account] = []
            next_account_id = txn.account_id
            next_transfer_account_id = txn.transfer_account_id

            if patch.account_id is not None:
                account = cls._resolve_account(patch.account_id, ledger)
                next_account_id = account.id
                referenced.append(account)
                if account.id not in current_accounts:
                    cls._require_active_account(account)
                    newly_referenced.append(account)

            if patch.transfer_account_id is not None:
                account = cls._resolve_account(patch.transfer_account_id, ledger)
                next_transfer_account_id = account.id
                referenced.append(account)
                if account.id not in current_accounts:
                    cls._require_active_account(account)
                    newly_referenced.append(account)

            if (
                txn.type == TransactionType.TRANSFER
                and next_account_id == next_transfer_account_id
            ):
                raise InvalidArgument(
                    "account_id and transfer_account_id must be different",
                    details={
                        "field": "transfer_account_id",
                        "constraint": "distinct_accounts",
                    },
                )

            category = None
            if patch.category_id is not None and str(patch.category_id) != str(
                txn.category_id
            ):
                category = cls._resolve_category(
                    patch.category_id,
                    ledger,
                    txn.type,
                    mismatch_message="Category type mismatch",
                )

            next_amount = patch.amount if patch.amount is not None else txn.amount
            new_effects = transaction_effects(
                txn.type, next_amount, next_account_id, next_transfer_account_id
            )
            net = new_effects - old_effects

            touched_ids = net.account_ids() | {account.id for account in referenced}
            locked = lock_accounts(touched_ids)
            for account_id in touched_ids:
                if account_id not in locked:
                    raise AccountNotFound(
                        "Account not found",
                        details={"account_id": str(account_id)},
                    )
            for account in newly_referenced:
                cls._require_active_account(locked[account.id])

            update_fields = ["updated_at"]
            if patch.amount is not None:
                txn.amount = patch.amount
                update_fields.append("amount")
            if patch.occurred_at is not None:
                txn.occurred_at = int(patch.occurred_at)
                update_fields.append("occurred_at")
            if patch.account_id is not None:
                txn.account_id = next_account_id
                update_fields.append("account")
            if patch.transfer_account_id is not None:
                txn.transfer_account_id = next_transfer_account_id
                update_fields.append("transfer_account")
            if category is not None:
                txn.category = category
                update_fields.append("category")
            if patch.clear_note:
                txn.note = None
                update_fields.append("note")
            elif patch.note is not None:
                txn.note = patch.note.strip()
                update_fields.append("note")

            txn.save(update_fields=update_fields)
            apply_deltas(net)

        cls.get_logger().info(
            f"Updated {txn.type} {txn.id}: {', '.join(update_fields[1:]) or 'no fields'}; "
            f"rebalanced {len(net.account_ids())} account(s)"
        )
        return txn

    # =========================================================================
    # Delete
    # =========================================================================

    @classmethod
    def remove(cls, user: User, transaction_id: uuid.UUID) -> dict[str, str]:
        """
        Delete a transaction and reverse its balance effect.

        Returns:
            {"transaction_id": <id>}

        Raises:
            TransactionNotFound: If the transaction does not exist
        """
        with cls.atomic():
            txn = require_transaction_owner(user, transaction_id, for_update=True)
            reversal = BalanceDeltas() - effects_of(txn)
            lock_accounts(reversal.account_ids())
            txn_id = txn.id
            txn.delete()
            apply_deltas(reversal)

        cls.get_logger().info(f"Removed transaction {txn_id}")
        return {"transaction_id": str(txn_id)}

    # =========================================================================
    # Query
    # =========================================================================

    @classmethod
    def list(
        cls,
        user: User,
        ledger_id: uuid.UUID,
        filters: TransactionFilters | None = None,
    ) -> list[Transaction]:
        """
        List transactions in a ledger, newest occurred_at first.

        Args:
            user: Current principal
            ledger_id: Ledger to list
            filters: Optional TransactionFilters

        Raises:
            InvalidArgument: Bad window, amount range, type or limit
        """
        ledger = require_ledger_owner(user, ledger_id)
        filters = filters or TransactionFilters()

        assert_time_window(filters.occurred_from, filters.occurred_to)
        if filters.min_amount is not None:
            assert_non_negative_integer(filters.min_amount, "min_amount")
        if filters.max_amount is not None:
            assert_non_negative_integer(filters.max_amount, "max_amount")
        if (
            filters.min_amount is not None
            and filters.max_amount is not None
            and filters.min_amount > filters.max_amount
        ):
            raise InvalidArgument(
                "min_amount must be less than or equal to max_amount",
                details={"field": "min_amount", "constraint": "lte_max_amount"},
            )
        limit = assert_limit(
            filters.limit,
            "limit",
            maximum=settings.LEDGER_TRANSACTION_LIST_MAX_LIMIT,
            default=settings.LEDGER_TRANSACTION_LIST_DEFAULT_LIMIT,
        )

        queryset = Transaction.objects.filter(ledger=ledger)
        if filters.type is not None:
            assert_choice(filters.type, TransactionType, "type")
            queryset = queryset.filter(type=filters.type)
        if filters.account_id is not None:
            queryset = queryset.filter(
                Q(account_id=filters.account_id)
                | Q(transfer_account_id=filters.account_id)
            )
        if filters.category_id is not None:
            queryset = queryset.filter(category_id=filters.category_id)
        if filters.occurred_from is not None:
            queryset = queryset.filter(occurred_at__gte=filters.occurred_from)
        if filters.occurred_to is not None:
            queryset = queryset.filter(occurred_at__lte=filters.occurred_to)
        if filters.min_amount is not None:
            queryset = queryset.filter(amount__gte=filters.min_amount)
        if filters.max_amount is not None:
            queryset = queryset.filter(amount__lte=filters.max_amount)
        if filters.search is not None and filters.search.strip():
            queryset = queryset.filter(note__icontains=filters.search.strip())

        return list(queryset.order_by("-occurred_at", "-created_at")[:limit])
