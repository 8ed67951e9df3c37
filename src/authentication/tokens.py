"""Token service for JWT issuance, verification, and bearer header parsing."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, NamedTuple

import jwt
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


class TokenError(AuthenticationFailed):
    """Base class for token verification failures."""


class TokenExpired(TokenError):
    default_detail = "Token expired"
    default_code = "token_expired"


class TokenInvalid(TokenError):
    """Malformed token, bad signature, wrong issuer/audience, or wrong type."""

    default_detail = "Invalid token"
    default_code = "token_invalid"


class TokenVerificationFailed(TokenError):
    default_detail = "Token verification failed"
    default_code = "token_verification_failed"


class TokenPair(NamedTuple):
    access_token: str
    refresh_token: str

    def as_dict(self) -> dict[str, str]:
        return {"accessToken": self.access_token, "refreshToken": self.refresh_token}


class TokenService:
    """Sign and verify access/refresh tokens bound to a session id."""

    REQUIRED_CLAIMS = ("exp", "iat", "iss", "aud", "userId", "sessionId", "type")

    @classmethod
    def issue_access_token(cls, claims: dict[str, Any]) -> str:
        """Sign ``{userId, email, roles, sessionId}`` with the short access TTL."""
        payload = {
            "userId": str(claims["userId"]),
            "email": claims["email"],
            "roles": list(claims.get("roles", [])),
            "sessionId": str(claims["sessionId"]),
        }
        return cls._sign(payload, ACCESS, settings.ACCESS_TOKEN_TTL)

    @classmethod
    def issue_refresh_token(cls, claims: dict[str, Any]) -> str:
        """Sign the identity claims without roles; roles are re-resolved on refresh."""
        payload = {
            "userId": str(claims["userId"]),
            "email": claims["email"],
            "sessionId": str(claims["sessionId"]),
        }
        return cls._sign(payload, REFRESH, settings.REFRESH_TOKEN_TTL)

    @classmethod
    def issue_token_pair(cls, claims: dict[str, Any]) -> TokenPair:
        return TokenPair(cls.issue_access_token(claims), cls.issue_refresh_token(claims))

    @classmethod
    def _sign(cls, payload: dict[str, Any], token_type: str, ttl: timedelta) -> str:
        issued_at = datetime.now(timezone.utc)
        payload = {
            **payload,
            "type": token_type,
            "jti": str(uuid.uuid4()),
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + ttl).timestamp()),
            "iss": settings.JWT_ISSUER,
            "aud": settings.JWT_AUDIENCE,
        }
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    @classmethod
    def verify(cls, token: str, expected_type: str | None = None) -> dict[str, Any]:
        """Decode and validate a token; optionally enforce its type.

        Raises ``TokenExpired`` so callers can tell "refresh and retry" apart
        from ``TokenInvalid`` ("log in again").
        """
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET,
                algorithms=[settings.JWT_ALGORITHM],
                issuer=settings.JWT_ISSUER,
                audience=settings.JWT_AUDIENCE,
                options={"require": list(cls.REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired() from exc
        except jwt.InvalidTokenError as exc:
            raise TokenInvalid() from exc
        except Exception as exc:
            logger.error("Unexpected token verification failure", exc_info=exc)
            raise TokenVerificationFailed() from exc

        if expected_type and payload.get("type") != expected_type:
            raise TokenInvalid("Invalid token type")

        return payload

    @staticmethod
    def extract_bearer(header: str | None) -> str | None:
        """Return the token from ``Bearer <token>``, or None for anything else."""
        if not header:
            return None
        parts = header.split(" ")
        if len(parts) != 2 or parts[0] != "Bearer":
            return None
        return parts[1] or None


__all__ = [
    "ACCESS",
    "REFRESH",
    "TokenError",
    "TokenExpired",
    "TokenInvalid",
    "TokenVerificationFailed",
    "TokenPair",
    "TokenService",
]
