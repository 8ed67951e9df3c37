"""Service health endpoint."""

from typing import Any

from django.conf import settings
from django.db import connection
from django.utils import timezone

from .response import BaseAPIView, api_response


class HealthView(BaseAPIView):
    """Liveness plus a database round-trip; a bad token is ignored, not rejected."""

    permission_classes: list[Any] = []
    authentication_optional = True

    def get(self, request):
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        identity = getattr(request, "identity", None)
        return api_response(
            {
                "status": "OK",
                "timestamp": timezone.now().isoformat(),
                "version": settings.SPECTACULAR_SETTINGS["VERSION"],
                "database": "connected",
                "authenticated": identity is not None,
            }
        )


__all__ = ["HealthView"]
