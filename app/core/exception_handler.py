"""
DRF exception handler for application errors.

Service-layer code raises BaseApplicationError subclasses (see
core.exceptions). This handler renders them with their own HTTP status and
the to_dict() body, and defers everything else to DRF's default handler.

Configured in settings:
    REST_FRAMEWORK = {
        "EXCEPTION_HANDLER": "core.exception_handler.application_exception_handler",
    }
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


def application_exception_handler(
    exc: Exception, context: dict[str, Any]
) -> Response | None:
    """
    Render BaseApplicationError as a structured JSON response.

    Args:
        exc: The raised exception
        context: DRF handler context (view, request, args, kwargs)

    Returns:
        Response for handled exceptions, None to let Django handle it
    """
    if isinstance(exc, BaseApplicationError):
        view = context.get("view")
        logger.info(
            f"{exc.error_code} in {view.__class__.__name__ if view else 'unknown view'}: "
            f"{exc.message}"
        )
        return Response(exc.to_dict(), status=exc.status_code)

    return exception_handler(exc, context)
