"""Application errors and the exception handler enforcing the error envelope."""

import logging
from typing import Any

from django.conf import settings
from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import APIException, AuthenticationFailed, NotAuthenticated
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from .response import error_envelope

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Authentication credentials were not provided or are invalid."
FORBIDDEN_MESSAGE = "Insufficient permissions for this operation."

_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION_ERROR",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


class AppError(APIException):
    """Operational error carrying an HTTP status, a stable code, and optional details."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "An unexpected error occurred."
    default_code = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        detail: str | None = None,
        code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(detail, code)
        self.code = code or self.default_code
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Record not found."
    default_code = "NOT_FOUND"


class RoleInUseError(AppError):
    """Refusal to delete a role that still has active assignments."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Cannot delete role that is assigned to users."
    default_code = "ROLE_IN_USE"


def _flatten(payload: Any) -> Any:
    if isinstance(payload, dict) and set(payload) == {"detail"}:
        return payload["detail"]
    return payload


def custom_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """Wrap every error in `{ "success": false, "error": {...} }`.

    - Authentication failures always map to 401 with a generic message so a
      caller cannot tell token problems from session problems; an expired
      token additionally reports ``TOKEN_EXPIRED`` so clients know to refresh.
    - Permission failures map to 403.
    - Database and unexpected errors are logged and reported without internals.
    """

    view = context.get("view")
    view_name = type(view).__name__ if view is not None else "unknown"

    if isinstance(exc, DatabaseError):
        logger.error("Database error in %s", view_name, exc_info=exc)
        return Response(
            error_envelope("SERVICE_UNAVAILABLE", "Service temporarily unavailable."),
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    if isinstance(exc, AppError):
        if exc.status_code >= 500:
            logger.error("Application error in %s: %s", view_name, exc.code, exc_info=exc)
        else:
            logger.warning("Operational error in %s: %s", view_name, exc.code)
        return Response(error_envelope(exc.code, str(exc.detail), exc.details), status=exc.status_code)

    response = drf_exception_handler(exc, context)

    if response is None:
        logger.error("Unhandled error in %s", view_name, exc_info=exc)
        return Response(
            error_envelope("INTERNAL_SERVER_ERROR", "An unexpected error occurred."),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    # DRF downgrades auth failures to 403 when no WWW-Authenticate header is
    # available; the API contract is 401 for every authentication failure.
    if isinstance(exc, (AuthenticationFailed, NotAuthenticated)):
        response.status_code = status.HTTP_401_UNAUTHORIZED

    code = _STATUS_CODES.get(response.status_code) or str(getattr(exc, "default_code", "error")).upper()
    details = None

    if response.status_code == status.HTTP_401_UNAUTHORIZED:
        message = UNAUTHORIZED_MESSAGE
        if getattr(settings, "DEBUG_AUTH_ERRORS", False):
            message = str(_flatten(response.data))
        if isinstance(exc, APIException) and exc.get_codes() == "token_expired":
            details = {"reason": "TOKEN_EXPIRED"}
    elif response.status_code == status.HTTP_403_FORBIDDEN:
        message = FORBIDDEN_MESSAGE
    elif response.status_code == status.HTTP_400_BAD_REQUEST:
        message = "Validation failed"
        details = {"fields": _flatten(response.data)}
    else:
        message = str(_flatten(response.data))

    response.data = error_envelope(code, message, details)
    return response


__all__ = [
    "AppError",
    "NotFoundError",
    "RoleInUseError",
    "custom_exception_handler",
    "FORBIDDEN_MESSAGE",
    "UNAUTHORIZED_MESSAGE",
]
