"""
Project-wide pytest configuration.

Settings overrides for the test run live here. Fixtures belong in each
app's tests/conftest.py.
"""

import os

import django
import pytest

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

# First matching suffix wins; anything unmatched is treated as integration.
MARKER_BY_FILENAME = [
    ("test_integration.py", "e2e"),
    ("_service.py", "integration"),
    ("test_views.py", "integration"),
    ("test_authorization.py", "integration"),
    ("test_exception_handler.py", "integration"),
    ("test_models.py", "unit"),
    ("test_managers.py", "unit"),
    ("test_serializers.py", "unit"),
    ("test_validation.py", "unit"),
    ("test_balances.py", "unit"),
    ("test_exceptions.py", "unit"),
]


def pytest_configure():
    django.setup()

    from django.conf import settings

    # Throttles would trip on the request volume of the view tests
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}

    # PBKDF2 makes every UserFactory call slow
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

    # The test client speaks plain HTTP
    settings.SECURE_SSL_REDIRECT = False


def pytest_collection_modifyitems(items):
    """Mark tests unit, integration or e2e by filename unless marked explicitly."""
    for item in items:
        if {m.name for m in item.iter_markers()} & {"unit", "integration", "e2e"}:
            continue

        filename = os.path.basename(str(item.fspath))
        marker = next(
            (name for suffix, name in MARKER_BY_FILENAME if filename.endswith(suffix)),
            "integration",
        )
        item.add_marker(getattr(pytest.mark, marker))
