"""Shared helpers for tests (users, roles, assignments, authenticated clients)."""

from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from access_control.models import Branch, Role, UserRole
from access_control.services import RoleService
from authentication.services import AuthService

User = get_user_model()

DEFAULT_PASSWORD = "Str0ng!Pass"


def create_user(email: str, password: str = DEFAULT_PASSWORD, **extra):
    """Create a user with a bcrypt-hashed password for tests."""

    username = extra.pop("username", email.split("@")[0])
    return User.objects.create_user(email=email, username=username, password=password, **extra)


def create_role(name: str, permissions: list[str]) -> Role:
    """Create (or replace) a role through the same service the API uses."""

    return RoleService().create_or_update_role(name, f"{name} role", permissions)


def create_branch(code: str, **extra) -> Branch:
    extra.setdefault("name", f"{code} Branch")
    return Branch.objects.create(code=code, **extra)


def assign(user, role: Role, branch: Branch | None = None, is_active: bool = True) -> UserRole:
    return UserRole.objects.create(user=user, role=role, branch=branch, is_active=is_active)


def login(email: str, password: str = DEFAULT_PASSWORD) -> dict:
    """Log in through ``AuthService`` and return its result (tokens, session id)."""

    return AuthService().login(email, password)


def auth_client(user, password: str = DEFAULT_PASSWORD) -> APIClient:
    """Return an APIClient carrying a fresh access token for ``user``."""

    result = login(user.email, password)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {result['tokens'].access_token}")
    return client
