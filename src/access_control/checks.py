"""System checks for RBAC configuration."""

from django.core.checks import Error, register

from access_control.permissions import RBACPermission


def _rbac_views():
    # Imported lazily to avoid circular imports at module load time.
    from access_control import views

    for name in views.__all__:
        yield getattr(views, name)


@register()
def rbac_views_declare_module(app_configs, **kwargs):
    """Ensure views guarded by ``RBACPermission`` name the module they protect.

    Subclasses produced by ``authorize()`` carry their own module and are
    accepted as-is.
    """
    errors: list[Error] = []

    for view_cls in _rbac_views():
        for permission_cls in getattr(view_cls, "permission_classes", []):
            if not (isinstance(permission_cls, type) and issubclass(permission_cls, RBACPermission)):
                continue
            if permission_cls.module or getattr(view_cls, "rbac_module", None):
                continue
            errors.append(
                Error(
                    f"{view_cls.__name__} uses {permission_cls.__name__} but does not define rbac_module.",
                    obj=view_cls,
                    id="access_control.E001",
                )
            )

    return errors
