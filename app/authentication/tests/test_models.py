"""
Tests for the User model.
"""

from authentication.models import User
from authentication.tests.factories import UserFactory


class TestUserModel:
    """Tests for User model fields and representation."""

    def test_str_returns_email(self, db):
        """String representation is the email address."""
        user = UserFactory(email="str@example.com")

        assert str(user) == "str@example.com"

    def test_email_is_username_field(self):
        """Email is the login identifier and nothing else is required."""
        assert User.USERNAME_FIELD == "email"
        assert User.REQUIRED_FIELDS == []

    def test_timestamps_are_set_on_create(self, db):
        """date_joined and updated_at are populated automatically."""
        user = UserFactory()

        assert user.date_joined is not None
        assert user.updated_at is not None
