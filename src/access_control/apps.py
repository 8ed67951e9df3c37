"""Django app for roles, permissions, branches, and request authorization."""

from django.apps import AppConfig


class AccessControlConfig(AppConfig):
    """Access control app holds roles, permissions, branches, and assignments."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "access_control"
    verbose_name = "Access control"

    def ready(self) -> None:
        """Register the RBAC view checks with Django's system check framework."""
        from . import checks  # noqa: F401
