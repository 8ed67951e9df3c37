"""View helpers applying branch isolation to querysets."""

from .branches import BranchFilter, BranchResolver
from .permissions import get_identity


class BranchScopedQuerysetMixin:
    """Narrow ``get_queryset`` to the caller's branches for ``branch_entity_kind``.

    ``branch_field`` names the column holding the branch id (``id`` for the
    branch table itself).
    """

    branch_entity_kind: str | None = None
    branch_field = "branch_id"
    resolver_class = BranchResolver

    def get_branch_filter(self) -> BranchFilter:
        identity = get_identity(self.request)
        if identity is None or not self.branch_entity_kind:
            return BranchFilter.restricted_to(())
        return self.resolver_class().branch_filter(identity.user_id, self.branch_entity_kind)

    def scope_queryset(self, queryset):
        return self.get_branch_filter().apply(queryset, field=self.branch_field)


__all__ = ["BranchScopedQuerysetMixin"]
