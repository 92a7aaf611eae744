"""
Test configuration and fixtures for ledger tests.

This module provides:
- User fixtures (ledger owner and a stranger)
- Ledger, account and category fixtures
- API client helpers for authenticated requests

Usage:
    def test_example(ledger, cash_account, user_client):
        response = user_client.get(f"/api/v1/ledgers/{ledger.id}/accounts/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from core.model_mixins import Status
from ledger.models import AccountType, CategoryType
from ledger.tests.factories import AccountFactory, CategoryFactory, LedgerFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Create the user who owns the test ledger."""
    return UserFactory()


@pytest.fixture
def other_user(db):
    """Create a user who owns nothing in the test ledger."""
    return UserFactory()


# =============================================================================
# Ledger Fixtures
# =============================================================================


@pytest.fixture
def ledger(user):
    """Default ledger of the owner, without seeded categories."""
    return LedgerFactory(user=user, name="Household", is_default=True)


@pytest.fixture
def other_ledger(other_user):
    """Ledger owned by other_user."""
    return LedgerFactory(user=other_user, name="Elsewhere", is_default=True)


# =============================================================================
# Account Fixtures
# =============================================================================


@pytest.fixture
def cash_account(ledger):
    """Active cash account starting at 10,000."""
    return AccountFactory(
        ledger=ledger, name="Wallet", type=AccountType.CASH, initial_balance=10_000
    )


@pytest.fixture
def bank_account(ledger):
    """Active bank account starting at 0."""
    return AccountFactory(
        ledger=ledger, name="Checking", type=AccountType.BANK, initial_balance=0
    )


@pytest.fixture
def inactive_account(ledger):
    """Retired account in the owner's ledger."""
    return AccountFactory(
        ledger=ledger, name="Old Card", type=AccountType.CREDIT, status=Status.INACTIVE
    )


@pytest.fixture
def foreign_account(other_ledger):
    """Active account in another user's ledger."""
    return AccountFactory(ledger=other_ledger, name="Foreign", initial_balance=5_000)


# =============================================================================
# Category Fixtures
# =============================================================================


@pytest.fixture
def food_category(ledger):
    """Active expense category."""
    return CategoryFactory(ledger=ledger, name="Food", type=CategoryType.EXPENSE)


@pytest.fixture
def transport_category(ledger):
    """Second active expense category."""
    return CategoryFactory(ledger=ledger, name="Transport", type=CategoryType.EXPENSE)


@pytest.fixture
def salary_category(ledger):
    """Active income category."""
    return CategoryFactory(ledger=ledger, name="Salary", type=CategoryType.INCOME)


@pytest.fixture
def inactive_category(ledger):
    """Retired expense category."""
    return CategoryFactory(
        ledger=ledger,
        name="Retired",
        type=CategoryType.EXPENSE,
        status=Status.INACTIVE,
    )


@pytest.fixture
def foreign_category(other_ledger):
    """Expense category in another user's ledger."""
    return CategoryFactory(
        ledger=other_ledger, name="Foreign Food", type=CategoryType.EXPENSE
    )


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def authenticated_client_factory(db):
    """
    Factory to create authenticated clients for any user.

    Usage:
        def test_example(authenticated_client_factory, some_user):
            client = authenticated_client_factory(some_user)
            response = client.get("/api/v1/ledgers/")
    """

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client


@pytest.fixture
def user_client(authenticated_client_factory, user):
    """API client authenticated as the ledger owner."""
    return authenticated_client_factory(user)


@pytest.fixture
def other_client(authenticated_client_factory, other_user):
    """API client authenticated as other_user."""
    return authenticated_client_factory(other_user)
