"""
OpenAPI schema customizations for drf-spectacular.

This module provides hooks to customize the generated OpenAPI schema,
including summaries for third-party endpoints and tag descriptions for
better documentation organization in ReDoc/Swagger UI.

Tag naming follows the pattern: [App Name] - [Group Name]
Examples:
- Auth (JWT token endpoints)
- Ledger - Accounts (account CRUD and balance adjustments)
- Ledger - Transactions (expense, income, transfer)
"""

# Natural language summaries for simplejwt endpoints
# Maps operation_id to (summary, description)
AUTH_TOKEN_SUMMARIES = {
    "auth_token_create": (
        "Obtain token pair",
        "Authenticate with email and password to receive JWT access and refresh tokens.",
    ),
    "auth_token_refresh_create": (
        "Refresh access token",
        "Exchange a refresh token for a new access token.",
    ),
}

TAG_DESCRIPTIONS = [
    {
        "name": "Auth",
        "description": "JWT token issuance and refresh.",
    },
    {
        "name": "Ledger - Ledgers",
        "description": "Ledger listing, default ledger bootstrap and renaming.",
    },
    {
        "name": "Ledger - Accounts",
        "description": "Accounts, audited balance adjustments and the adjustment log.",
    },
    {
        "name": "Ledger - Categories",
        "description": "Expense and income categories.",
    },
    {
        "name": "Ledger - Transactions",
        "description": "Balance-consistent expenses, incomes and transfers.",
    },
    {
        "name": "Ledger - Reports",
        "description": "Monthly summaries, category breakdowns and trends.",
    },
    {
        "name": "Ledger - Reconciliation",
        "description": "Detect and heal drift between stored balances and history.",
    },
]


def group_auth_endpoints(result, generator, request, public):
    """
    Postprocessing hook to group API endpoints by function.

    Ledger endpoints set their tags via tags= in @extend_schema. This hook
    tags the simplejwt token views, which cannot be decorated in place, and
    adds natural language summaries and tag descriptions.
    """
    paths = result.get("paths", {})

    for path, methods in paths.items():
        for method, operation in methods.items():
            if not isinstance(operation, dict):
                continue

            operation_id = operation.get("operationId", "")

            if operation_id in AUTH_TOKEN_SUMMARIES:
                summary, description = AUTH_TOKEN_SUMMARIES[operation_id]
                operation["summary"] = summary
                operation["description"] = description

            if operation_id.startswith("auth_"):
                operation["tags"] = ["Auth"]

    result["tags"] = TAG_DESCRIPTIONS

    return result
