"""
App configuration for authentication (ledger owners and JWT endpoints).
"""

from django.apps import AppConfig


class AuthenticationConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"
    verbose_name = "Ledger owners"
