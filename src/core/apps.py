"""Django app for shared project plumbing: settings, routing, middleware, envelopes."""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Core app wires shared settings, routing, middleware, and envelopes."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
