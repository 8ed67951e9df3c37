"""Root URL configuration for the access-control API."""

from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView

from .views import HealthView

urlpatterns = [
    path("auth/", include("authentication.urls")),
    path("rbac/", include("access_control.urls")),
    path("health/", HealthView.as_view(), name="health"),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
]
