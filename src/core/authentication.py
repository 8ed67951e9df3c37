"""DRF authenticator for identities established by ``SessionTokenMiddleware``.

Bearer tokens and their sessions are verified once, in middleware, before the
view runs. DRF still needs an authentication class so that ``request.user``
and ``request.auth`` are populated and unauthenticated requests fail with 401.
"""

from typing import Any, Optional, Tuple

from rest_framework.authentication import BaseAuthentication


class MiddlewareUserAuthentication(BaseAuthentication):
    """Return ``(user, identity)`` from the underlying Django request.

    No credential parsing happens here. A request counts as authenticated
    only when the middleware attached an ``Identity``.
    """

    def authenticate(self, request) -> Optional[Tuple[Any, Any]]:
        django_request = getattr(request, "_request", request)
        identity = getattr(django_request, "identity", None)
        if identity is None:
            return None

        user = getattr(django_request, "user", None)
        if user is None or not user.is_authenticated:
            return None
        return user, identity

    def authenticate_header(self, request) -> str:
        # A challenge header keeps DRF from downgrading NotAuthenticated to 403.
        return 'Bearer realm="api"'


__all__ = ["MiddlewareUserAuthentication"]
