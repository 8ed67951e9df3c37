"""Branch isolation: which branches a user may see, and the matching query filter."""

from dataclasses import dataclass

from django.conf import settings

from .models import Branch, UserRole


@dataclass(frozen=True)
class BranchFilter:
    """Either unrestricted (``branch_ids is None``) or restricted to a set of branch ids."""

    branch_ids: frozenset | None = None

    @classmethod
    def unrestricted(cls) -> "BranchFilter":
        return cls(None)

    @classmethod
    def restricted_to(cls, branch_ids) -> "BranchFilter":
        return cls(frozenset(branch_ids))

    @property
    def is_restricted(self) -> bool:
        return self.branch_ids is not None

    def apply(self, queryset, field: str = "branch_id"):
        """Constrain ``queryset`` on ``field``; an empty restriction yields no rows."""
        if self.branch_ids is None:
            return queryset
        return queryset.filter(**{f"{field}__in": list(self.branch_ids)})


class BranchResolver:
    def __init__(self, assignments=None, branches=None, super_admin_role: str | None = None):
        self.assignments = assignments if assignments is not None else UserRole.objects
        self.branches = branches if branches is not None else Branch.objects
        self.super_admin_role = super_admin_role

    @property
    def super_admin_name(self) -> str:
        return self.super_admin_role or settings.SUPER_ADMIN_ROLE

    def _active(self, user_id):
        return self.assignments.filter(user_id=user_id, is_active=True)

    def is_super_admin(self, user_id) -> bool:
        return self._active(user_id).filter(role__name=self.super_admin_name, role__is_active=True).exists()

    def accessible_branches(self, user_id) -> set:
        """Active branches the user may access.

        Branch activity is checked here rather than at assignment time, so
        deactivating a branch hides it without touching assignment rows.
        """
        if self.is_super_admin(user_id):
            return set(self.branches.filter(is_active=True).values_list("id", flat=True))
        return set(
            self._active(user_id)
            .filter(role__is_active=True, branch__isnull=False, branch__is_active=True)
            .values_list("branch_id", flat=True)
        )

    def branch_filter(self, user_id, entity_kind: str) -> BranchFilter:
        if self.is_super_admin(user_id):
            return BranchFilter.unrestricted()
        if entity_kind not in settings.BRANCH_SCOPED_ENTITIES:
            return BranchFilter.unrestricted()
        return BranchFilter.restricted_to(self.accessible_branches(user_id))


__all__ = ["BranchFilter", "BranchResolver"]
