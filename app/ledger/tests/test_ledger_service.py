"""
Tests for LedgerService: listing, default bootstrap and rename.
"""

import uuid

import pytest
from django.contrib.auth.models import AnonymousUser

from core.exceptions import AuthenticationRequiredError
from ledger.constants import DEFAULT_EXPENSE_CATEGORIES, DEFAULT_INCOME_CATEGORIES
from ledger.exceptions import InvalidArgument, LedgerAccessDenied, LedgerNotFound
from ledger.models import Category, CategoryType, Ledger
from ledger.services import LedgerService
from ledger.tests.factories import LedgerFactory


class TestLedgerServiceList:
    def test_lists_only_own_ledgers(self, user, ledger, other_ledger):
        second = LedgerFactory(user=user, name="Travel")

        ledgers = LedgerService.list(user)

        assert [item.id for item in ledgers] == [ledger.id, second.id]

    def test_requires_principal(self, db):
        with pytest.raises(AuthenticationRequiredError):
            LedgerService.list(AnonymousUser())


class TestLedgerServiceEnsureDefault:
    def test_creates_default_ledger_with_seeded_categories(self, user, settings):
        settings.LEDGER_DEFAULT_NAME = "My Money"

        ledger = LedgerService.ensure_default(user)

        assert ledger.is_default is True
        assert ledger.name == "My Money"
        assert ledger.user == user

        expense_names = set(
            Category.objects.filter(
                ledger=ledger, type=CategoryType.EXPENSE
            ).values_list("name", flat=True)
        )
        income_names = set(
            Category.objects.filter(
                ledger=ledger, type=CategoryType.INCOME
            ).values_list("name", flat=True)
        )
        assert expense_names == set(DEFAULT_EXPENSE_CATEGORIES)
        assert income_names == set(DEFAULT_INCOME_CATEGORIES)
        assert not Category.objects.filter(ledger=ledger, is_system=False).exists()

    def test_is_idempotent(self, user):
        """
        Calling twice returns the same ledger and does not reseed.

        Why it matters: clients call this on every app start.
        """
        first = LedgerService.ensure_default(user)
        second = LedgerService.ensure_default(user)

        assert first.id == second.id
        assert Ledger.objects.filter(user=user).count() == 1
        assert Category.objects.filter(ledger=first).count() == len(
            DEFAULT_EXPENSE_CATEGORIES
        ) + len(DEFAULT_INCOME_CATEGORIES)

    def test_returns_existing_default(self, user, ledger):
        assert LedgerService.ensure_default(user) == ledger


class TestLedgerServiceRename:
    def test_renames_with_trimmed_name(self, user, ledger):
        renamed = LedgerService.rename(user, ledger.id, "  Family  ")

        assert renamed.name == "Family"
        ledger.refresh_from_db()
        assert ledger.name == "Family"

    def test_rejects_blank_name(self, user, ledger):
        with pytest.raises(InvalidArgument):
            LedgerService.rename(user, ledger.id, "   ")

    def test_rejects_name_over_max_length(self, user, ledger):
        with pytest.raises(InvalidArgument) as exc_info:
            LedgerService.rename(user, ledger.id, "x" * 101)

        assert exc_info.value.details["constraint"] == "max_length"
        ledger.refresh_from_db()
        assert ledger.name == "Household"

    def test_rejects_other_users_ledger(self, other_user, ledger):
        with pytest.raises(LedgerAccessDenied):
            LedgerService.rename(other_user, ledger.id, "Mine now")

    def test_unknown_ledger(self, user):
        with pytest.raises(LedgerNotFound):
            LedgerService.rename(user, uuid.uuid4(), "Name")
