"""
Authentication application.

Provides the email-based User that owns ledgers and the JWT token endpoints
used to authenticate API requests.

Key components:
    - User model: Custom email-based user authentication
    - UserManager: Email-based user creation

Usage:
    from authentication.models import User
"""
