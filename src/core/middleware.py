"""Authenticate stage of the request gate: bearer token -> session -> identity."""

import logging

from django.contrib.auth.models import AnonymousUser
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed

from authentication.services import AuthService
from authentication.tokens import TokenExpired, TokenService

from .exceptions import UNAUTHORIZED_MESSAGE
from .response import error_envelope

logger = logging.getLogger(__name__)


class SessionTokenMiddleware(MiddlewareMixin):
    """Verify the access token, resolve its session, and attach ``request.identity``.

    Requests without a token stay anonymous and protected views reject them
    with 401. A present but unusable token is rejected here with 401, unless
    the target view sets ``authentication_optional = True``, in which case
    the request simply continues anonymously. Views that set
    ``authentication_exempt = True`` (login, refresh, register) never look at
    the header, so a stale token cannot block the way back to a fresh one.
    """

    auth_service_class = AuthService

    def __init__(self, get_response=None):
        super().__init__(get_response)
        self.auth_service = self.auth_service_class()

    def process_view(self, request, view_func, view_args, view_kwargs):  # type: ignore[override]
        request.identity = None
        request.user = AnonymousUser()
        if _view_flag(view_func, "authentication_exempt"):
            return None

        token = TokenService.extract_bearer(request.META.get("HTTP_AUTHORIZATION"))
        if token is None:
            return None

        try:
            identity, user = self.auth_service.authenticate_token(token)
        except AuthenticationFailed as exc:
            if _view_flag(view_func, "authentication_optional"):
                logger.debug("Optional authentication skipped: %s", exc.get_codes())
                return None
            logger.warning("Authentication failed for %s: %s", request.path, exc.get_codes())
            return _unauthorized(expired=isinstance(exc, TokenExpired))

        request.identity = identity
        request.user = user
        return None


def _view_flag(view_func, name: str) -> bool:
    view_cls = getattr(view_func, "cls", None) or getattr(view_func, "view_class", None)
    return bool(getattr(view_cls, name, False))


def _unauthorized(expired: bool = False) -> JsonResponse:
    details = {"reason": "TOKEN_EXPIRED"} if expired else None
    return JsonResponse(
        error_envelope("UNAUTHORIZED", UNAUTHORIZED_MESSAGE, details),
        status=status.HTTP_401_UNAUTHORIZED,
    )


__all__ = ["SessionTokenMiddleware"]
