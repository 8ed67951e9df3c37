"""Request-scoped identity derived from a valid session."""

from dataclasses import dataclass, field


@dataclass
class Identity:
    user_id: str
    email: str
    session_id: str
    roles: frozenset = field(default_factory=frozenset)
    # Filled in by the authorize stage for downstream query filtering.
    accessible_branches: set | None = None

    def has_role(self, name: str) -> bool:
        return name in self.roles


def active_role_names(user) -> list[str]:
    """Names of the roles currently assigned to ``user`` (any branch)."""
    return sorted(
        set(
            user.role_assignments.filter(is_active=True, role__is_active=True).values_list(
                "role__name", flat=True
            )
        )
    )


def identity_from_session(session) -> Identity:
    user = session.user
    return Identity(
        user_id=str(user.id),
        email=user.email,
        session_id=str(session.id),
        roles=frozenset(active_role_names(user)),
    )


__all__ = ["Identity", "active_role_names", "identity_from_session"]
