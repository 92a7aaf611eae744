"""
User manager for email-based accounts.

Emails are the login identifier for ledger owners. They are stored
normalized (whole address lowercased) and looked up case-insensitively, so
"Owner@Example.com" and "owner@example.com" are the same principal.
"""

from django.contrib.auth.models import BaseUserManager


class UserManager(BaseUserManager):
    """
    Manager for the email-based User model.

    Usage:
        owner = User.objects.create_user(email="owner@example.com", password="...")
        admin = User.objects.create_superuser(email="admin@example.com", password="...")
    """

    use_in_migrations = True

    @classmethod
    def normalize_email(cls, email):
        """Lowercase the whole address, not only the domain."""
        return super().normalize_email(email or "").strip().lower()

    def get_by_natural_key(self, email):
        """Resolve the login identifier regardless of letter case."""
        return self.get(email__iexact=self.normalize_email(email))

    def _create_user(self, email, password, **extra_fields):
        email = self.normalize_email(email)
        if not email:
            raise ValueError("An email address is required")

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            # Token-only principals never log in with a password
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        """
        Create a regular (non-staff) user.

        Raises:
            ValueError: If email is empty
        """
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Create a user with admin site access.

        Raises:
            ValueError: If is_staff or is_superuser is explicitly False
        """
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        for flag in ("is_staff", "is_superuser"):
            if extra_fields[flag] is not True:
                raise ValueError(f"Superuser must have {flag}=True.")
        return self._create_user(email, password, **extra_fields)
