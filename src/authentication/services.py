"""Authentication flows: register, login, refresh, logout, and password change.

Login is an ordered sequence: the session is created first, the token pair
is minted with that session's id, and the access token is then recorded on
the session. All three steps run in one transaction.
"""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework import status

from core.exceptions import AppError, NotFoundError

from .identity import Identity, active_role_names, identity_from_session
from .passwords import check_strength, hash_password, verify_password
from .sessions import SessionStore
from .tokens import ACCESS, REFRESH, TokenError, TokenPair, TokenService

logger = logging.getLogger(__name__)

User = get_user_model()


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credentials"
    default_code = "INVALID_CREDENTIALS"


class InvalidRefreshToken(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid or expired refresh token"
    default_code = "INVALID_REFRESH_TOKEN"


class InvalidCurrentPassword(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Current password is incorrect"
    default_code = "INVALID_CURRENT_PASSWORD"


class WeakPassword(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Password does not meet security requirements"
    default_code = "WEAK_PASSWORD"


class UserExists(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "User with this email or username already exists"
    default_code = "USER_EXISTS"


def _ensure_strong(password: str, message: str | None = None) -> None:
    strength = check_strength(password)
    if not strength.valid:
        raise WeakPassword(message, details={"errors": strength.violations})


class AuthService:
    def __init__(self, sessions: SessionStore | None = None, tokens=TokenService):
        self.sessions = sessions or SessionStore()
        self.tokens = tokens

    def register(self, email: str, username: str, password: str, **profile):
        _ensure_strong(password)
        if User.objects.filter(Q(email__iexact=email) | Q(username=username)).exists():
            raise UserExists()
        user = User.objects.create_user(email=email, username=username, password=password, **profile)
        logger.info("User registered: user_id=%s", user.id)
        return user

    def login(self, email: str, password: str) -> dict:
        """Verify credentials and open a session; returns the user, roles, and token pair."""
        user = User.objects.filter(email__iexact=email).first()
        if user is None or not user.is_active:
            raise InvalidCredentials("Invalid credentials or account inactive")
        if not verify_password(password, user.password_hash):
            raise InvalidCredentials()

        roles = active_role_names(user)
        with transaction.atomic():
            session = self.sessions.create(user)
            tokens = self.tokens.issue_token_pair(
                {"userId": user.id, "email": user.email, "roles": roles, "sessionId": session.id}
            )
            self.sessions.bind_token(session.id, tokens.access_token)

        logger.info("User logged in: user_id=%s session_id=%s", user.id, session.id)
        return {"user": user, "roles": roles, "tokens": tokens, "session_id": str(session.id)}

    def refresh(self, refresh_token: str) -> TokenPair:
        """Mint a new pair for a live session, re-resolving roles and extending the session."""
        try:
            payload = self.tokens.verify(refresh_token, expected_type=REFRESH)
        except TokenError as exc:
            raise InvalidRefreshToken() from exc

        session = self.sessions.get(payload["sessionId"])
        if not self.sessions.is_usable(session) or str(session.user_id) != payload["userId"]:
            raise InvalidRefreshToken()

        user = session.user
        tokens = self.tokens.issue_token_pair(
            {
                "userId": user.id,
                "email": user.email,
                "roles": active_role_names(user),
                "sessionId": session.id,
            }
        )
        self.sessions.refresh(session.id, timezone.now() + settings.SESSION_TTL, tokens.access_token)
        logger.info("Token refreshed: user_id=%s session_id=%s", user.id, session.id)
        return tokens

    def logout(self, identity: Identity) -> None:
        self.sessions.revoke(identity.session_id)
        logger.info("User logged out: user_id=%s session_id=%s", identity.user_id, identity.session_id)

    def change_password(self, identity: Identity, current_password: str, new_password: str) -> int:
        """Replace the password hash and revoke every other session of the user.

        Returns the number of revoked sessions. The calling session survives.
        """
        user = User.objects.filter(id=identity.user_id).first()
        if user is None:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        if not verify_password(current_password, user.password_hash):
            raise InvalidCurrentPassword()
        _ensure_strong(new_password, "New password does not meet security requirements")

        new_hash = hash_password(new_password)
        with transaction.atomic():
            user.password_hash = new_hash
            user.save(update_fields=["password_hash", "updated_at"])
            revoked = self.sessions.revoke_all_except(user.id, identity.session_id)

        logger.info("Password changed: user_id=%s revoked_sessions=%d", user.id, revoked)
        return revoked

    def authenticate_token(self, token: str):
        """Authenticate stage: access token -> live session -> (identity, user).

        Raises an ``AuthenticationFailed`` subclass on any failure.
        """
        payload = self.tokens.verify(token, expected_type=ACCESS)
        session = self.sessions.resolve(payload["sessionId"])
        if str(session.user_id) != payload["userId"]:
            raise TokenError("Token does not match its session")
        return identity_from_session(session), session.user


__all__ = [
    "AuthService",
    "InvalidCredentials",
    "InvalidCurrentPassword",
    "InvalidRefreshToken",
    "UserExists",
    "WeakPassword",
]
