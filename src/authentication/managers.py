"""Custom user manager delegating hashing to the credential verifier."""

import uuid

from django.contrib.auth.base_user import BaseUserManager

from .passwords import hash_password


class UserManager(BaseUserManager):
    """Manager to create users with bcrypt password hashes."""

    use_in_migrations = True

    def create_user(self, email: str, username: str, password: str | None = None, **extra_fields):
        """Create a regular user with a bcrypt-hashed password."""
        if not email:
            raise ValueError("The Email must be set")
        if not username:
            raise ValueError("The Username must be set")
        if password is None:
            raise ValueError("Password must be provided")
        user = self.model(
            id=uuid.uuid4(),
            email=self.normalize_email(email),
            username=username,
            **extra_fields,
        )
        user.password_hash = hash_password(password)
        user.save(using=self._db)
        return user


__all__ = ["UserManager"]
