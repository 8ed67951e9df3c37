"""Authentication endpoints: register, login, refresh, logout, profile, password change."""

from typing import Any

from rest_framework import status
from rest_framework.permissions import IsAuthenticated

from access_control.permissions import get_identity
from core.response import BaseAPIView, api_response

from .serializers import (
    ChangePasswordSerializer,
    LoginSerializer,
    RefreshSerializer,
    RegisterSerializer,
    user_payload,
)
from .services import AuthService


class AuthView(BaseAPIView):
    permission_classes: list[Any] = []
    authentication_exempt = True
    auth_service_class = AuthService

    @property
    def auth(self) -> AuthService:
        return self.auth_service_class()


class RegisterView(AuthView):
    def post(self, request):
        """Register a new user and return their profile."""
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = self.auth.register(**serializer.to_profile())
        return api_response(
            {"user": user_payload(user, [])},
            status=status.HTTP_201_CREATED,
            message="User registered successfully",
        )


class LoginView(AuthView):
    def post(self, request):
        """Verify credentials, open a session, and issue access + refresh tokens."""
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.auth.login(serializer.validated_data["email"], serializer.validated_data["password"])
        return api_response(
            {"user": user_payload(result["user"], result["roles"]), "tokens": result["tokens"].as_dict()},
            message="Login successful",
        )


class RefreshView(AuthView):
    def post(self, request):
        """Exchange a refresh token for a new pair while its session is alive."""
        serializer = RefreshSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        tokens = self.auth.refresh(serializer.validated_data["refreshToken"])
        return api_response({"tokens": tokens.as_dict()}, message="Token refreshed successfully")


class LogoutView(AuthView):
    permission_classes: list[Any] = [IsAuthenticated]
    authentication_exempt = False

    def post(self, request):
        """Revoke the caller's session; its tokens stop working immediately."""
        self.auth.logout(get_identity(request))
        return api_response(message="Logout successful")


class MeView(AuthView):
    permission_classes: list[Any] = [IsAuthenticated]
    authentication_exempt = False

    def get(self, request):
        identity = get_identity(request)
        return api_response({"user": user_payload(request.user, sorted(identity.roles))})


class ChangePasswordView(AuthView):
    permission_classes: list[Any] = [IsAuthenticated]
    authentication_exempt = False

    def put(self, request):
        """Replace the password and sign out every other session."""
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.auth.change_password(
            get_identity(request),
            serializer.validated_data["currentPassword"],
            serializer.validated_data["newPassword"],
        )
        return api_response(message="Password changed successfully")


__all__ = ["ChangePasswordView", "LoginView", "LogoutView", "MeView", "RefreshView", "RegisterView"]
