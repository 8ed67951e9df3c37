"""Django app for users, sessions, and credential/token handling."""

from django.apps import AppConfig


class AuthenticationConfig(AppConfig):
    """Authentication app holds the User and UserSession models."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"
    verbose_name = "Authentication"
