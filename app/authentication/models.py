"""
Authentication models.

Ledgers are owned by a User and balance adjustments record the User who
made them. Nothing else about the principal matters to the ledger, so the
model stays small: an email login plus the flags Django's auth and admin
need.
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager


class User(AbstractBaseUser, PermissionsMixin):
    """
    Email-login user that owns ledgers.

    Fields:
        email: Login identifier, stored lowercased
        is_active: Deactivated users keep their ledgers but cannot get tokens
        is_staff: Admin site access
        date_joined / updated_at: Bookkeeping timestamps
    """

    email = models.EmailField(
        unique=True,
        max_length=254,
        help_text="Login email address, stored lowercased",
    )
    is_active = models.BooleanField(
        default=True,
        help_text="Deactivate instead of deleting; ledger history blocks deletion.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can log into the admin site.",
    )
    date_joined = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def clean(self):
        super().clean()
        self.email = self.__class__.objects.normalize_email(self.email)
