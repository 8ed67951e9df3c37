"""Server-side session store backing bearer-token revocation."""

import logging
import uuid
from datetime import datetime

from django.conf import settings
from django.utils import timezone
from rest_framework.exceptions import AuthenticationFailed

from .models import UserSession

logger = logging.getLogger(__name__)


class SessionInvalid(AuthenticationFailed):
    default_detail = "Session expired or invalid"
    default_code = "session_invalid"


class SessionStore:
    """Create, look up, extend, and revoke ``UserSession`` rows.

    A session is usable iff it exists, has not expired, and belongs to an
    active user. Expiry is checked on read; nothing sweeps expired rows.
    """

    def __init__(self, sessions=None):
        self.sessions = sessions if sessions is not None else UserSession.objects

    def create(self, user, expires_at: datetime | None = None) -> UserSession:
        """Create a session with no token yet; bind one with ``bind_token``."""
        if expires_at is None:
            expires_at = timezone.now() + settings.SESSION_TTL
        return self.sessions.create(user=user, token="", expires_at=expires_at)

    def bind_token(self, session_id, token: str) -> None:
        self.sessions.filter(id=session_id).update(token=token)

    def get(self, session_id) -> UserSession | None:
        try:
            session_uuid = uuid.UUID(str(session_id))
        except (TypeError, ValueError):
            return None
        return self.sessions.select_related("user").filter(id=session_uuid).first()

    def refresh(self, session_id, expires_at: datetime, token: str) -> None:
        """Extend a session and rebind it to a freshly issued access token."""
        self.sessions.filter(id=session_id).update(expires_at=expires_at, token=token)

    def revoke(self, session_id) -> None:
        self.sessions.filter(id=session_id).delete()

    def revoke_all_except(self, user_id, keep_session_id) -> int:
        """Delete every session of ``user_id`` other than ``keep_session_id``."""
        deleted, _ = self.sessions.filter(user_id=user_id).exclude(id=keep_session_id).delete()
        return deleted

    @staticmethod
    def is_usable(session: UserSession | None) -> bool:
        return session is not None and not session.is_expired and session.user.is_active

    def resolve(self, session_id) -> UserSession:
        """Return a usable session or raise ``SessionInvalid``."""
        session = self.get(session_id)
        if not self.is_usable(session):
            raise SessionInvalid()
        return session


__all__ = ["SessionInvalid", "SessionStore"]
