"""Success and error envelopes shared by every endpoint."""

from typing import Any

from django.utils import timezone
from rest_framework.response import Response
from rest_framework.views import APIView


def api_response(data: Any = None, status: int = 200, message: str | None = None) -> Response:
    """Build a Response carrying `{ "success": true, "data"?, "message"? }`."""
    return Response(success_envelope(data, message), status=status)


def success_envelope(data: Any = None, message: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body


def error_envelope(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build the `{ "success": false, "error": {...} }` body used for every failure."""

    error: dict[str, Any] = {
        "code": code,
        "message": message,
        "timestamp": timezone.now().isoformat(),
    }
    if details:
        error["details"] = details
    return {"success": False, "error": error}


def _is_enveloped(payload: Any) -> bool:
    return isinstance(payload, dict) and "success" in payload


class EnvelopeMixin:
    """Wrap any un-enveloped 2xx/3xx body in the success envelope."""

    def finalize_response(self, request, response, *args, **kwargs):  # type: ignore[override]
        if hasattr(response, "data") and response.status_code and response.status_code < 400:
            if response.status_code != 204 and not _is_enveloped(response.data):
                response.data = success_envelope(response.data)
        return super().finalize_response(request, response, *args, **kwargs)  # type: ignore[attr-defined]


class BaseAPIView(EnvelopeMixin, APIView):
    """Base for every endpoint; error bodies come from ``custom_exception_handler``."""


__all__ = ["api_response", "error_envelope", "success_envelope", "BaseAPIView"]
