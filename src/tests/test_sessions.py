"""Session store lifecycle: create, bind, refresh, revoke, and usability."""

from __future__ import annotations

from datetime import timedelta

from django.test import TestCase, override_settings
from django.utils import timezone

from authentication.models import UserSession
from authentication.sessions import SessionInvalid, SessionStore
from tests.utils import create_user


@override_settings(BCRYPT_ROUNDS=4)
class SessionStoreTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = create_user("session@example.com")

    def setUp(self):
        self.store = SessionStore()

    def test_create_defaults_to_session_ttl_with_empty_token(self):
        session = self.store.create(self.user)

        self.assertEqual(session.token, "")
        self.assertGreater(session.expires_at, timezone.now() + timedelta(hours=23))

    def test_bind_and_refresh(self):
        session = self.store.create(self.user)
        self.store.bind_token(session.id, "first")
        later = timezone.now() + timedelta(days=2)
        self.store.refresh(session.id, later, "second")

        session.refresh_from_db()
        self.assertEqual(session.token, "second")
        self.assertEqual(session.expires_at, later)

    def test_get_malformed_id_is_none(self):
        self.assertIsNone(self.store.get("not-a-uuid"))
        self.assertIsNone(self.store.get(None))

    def test_resolve_live_session(self):
        session = self.store.create(self.user)

        self.assertEqual(self.store.resolve(str(session.id)).id, session.id)

    def test_expired_session_is_not_usable(self):
        session = self.store.create(self.user, expires_at=timezone.now() - timedelta(seconds=1))

        self.assertFalse(self.store.is_usable(self.store.get(session.id)))
        with self.assertRaises(SessionInvalid):
            self.store.resolve(session.id)

    def test_inactive_user_session_is_not_usable(self):
        user = create_user("inactive@example.com")
        session = self.store.create(user)
        user.is_active = False
        user.save(update_fields=["is_active"])

        with self.assertRaises(SessionInvalid):
            self.store.resolve(session.id)

    def test_revoke_is_idempotent(self):
        session = self.store.create(self.user)
        self.store.revoke(session.id)
        self.store.revoke(session.id)

        self.assertFalse(UserSession.objects.filter(id=session.id).exists())

    def test_revoke_all_except(self):
        keep = self.store.create(self.user)
        self.store.create(self.user)
        self.store.create(self.user)
        other_user = create_user("other@example.com")
        untouched = self.store.create(other_user)

        revoked = self.store.revoke_all_except(self.user.id, keep.id)

        self.assertEqual(revoked, 2)
        self.assertEqual(list(UserSession.objects.filter(user=self.user)), [keep])
        self.assertTrue(UserSession.objects.filter(id=untouched.id).exists())
