"""Token issuer/verifier: claims, expiry and failure kinds, bearer parsing."""

from __future__ import annotations

import uuid
from datetime import timedelta

import jwt
from django.conf import settings
from django.test import SimpleTestCase, override_settings

from authentication.tokens import (
    ACCESS,
    REFRESH,
    TokenExpired,
    TokenInvalid,
    TokenService,
)


class TokenServiceTests(SimpleTestCase):
    def setUp(self):
        self.claims = {
            "userId": uuid.uuid4(),
            "email": "user@example.com",
            "roles": ["SALES_EXECUTIVE"],
            "sessionId": uuid.uuid4(),
        }

    def test_access_token_claims(self):
        payload = TokenService.verify(TokenService.issue_access_token(self.claims), expected_type=ACCESS)

        self.assertEqual(payload["userId"], str(self.claims["userId"]))
        self.assertEqual(payload["sessionId"], str(self.claims["sessionId"]))
        self.assertEqual(payload["roles"], ["SALES_EXECUTIVE"])
        self.assertEqual(payload["iss"], settings.JWT_ISSUER)
        self.assertEqual(payload["aud"], settings.JWT_AUDIENCE)
        self.assertIn("jti", payload)

    def test_refresh_token_omits_roles(self):
        payload = TokenService.verify(TokenService.issue_refresh_token(self.claims), expected_type=REFRESH)

        self.assertNotIn("roles", payload)
        self.assertEqual(payload["type"], REFRESH)

    def test_pair_tokens_are_distinct(self):
        pair = TokenService.issue_token_pair(self.claims)

        self.assertNotEqual(pair.access_token, pair.refresh_token)
        self.assertEqual(set(pair.as_dict()), {"accessToken", "refreshToken"})

    def test_wrong_type_rejected(self):
        refresh = TokenService.issue_refresh_token(self.claims)

        with self.assertRaises(TokenInvalid):
            TokenService.verify(refresh, expected_type=ACCESS)

    @override_settings(ACCESS_TOKEN_TTL=timedelta(seconds=-10))
    def test_expired_token(self):
        token = TokenService.issue_access_token(self.claims)

        with self.assertRaises(TokenExpired):
            TokenService.verify(token)

    def test_bad_signature(self):
        token = TokenService.issue_access_token(self.claims)

        with override_settings(JWT_SECRET="another-secret-that-is-long-enough-for-hs256"):
            with self.assertRaises(TokenInvalid):
                TokenService.verify(token)

    def test_wrong_audience(self):
        token = TokenService.issue_access_token(self.claims)

        with override_settings(JWT_AUDIENCE="someone-else"):
            with self.assertRaises(TokenInvalid):
                TokenService.verify(token)

    def test_missing_required_claim(self):
        token = jwt.encode(
            {"userId": "x", "iss": settings.JWT_ISSUER, "aud": settings.JWT_AUDIENCE},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )

        with self.assertRaises(TokenInvalid):
            TokenService.verify(token)

    def test_garbage(self):
        with self.assertRaises(TokenInvalid):
            TokenService.verify("not.a.token")

    def test_extract_bearer(self):
        self.assertEqual(TokenService.extract_bearer("Bearer abc"), "abc")
        self.assertIsNone(TokenService.extract_bearer(None))
        self.assertIsNone(TokenService.extract_bearer(""))
        self.assertIsNone(TokenService.extract_bearer("Basic abc"))
        self.assertIsNone(TokenService.extract_bearer("bearer abc"))
        self.assertIsNone(TokenService.extract_bearer("Bearer a b"))
        self.assertIsNone(TokenService.extract_bearer("Bearer"))
