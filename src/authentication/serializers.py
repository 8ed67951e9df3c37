"""Serializers for authentication flows (register, login, refresh, profile)."""

from django.contrib.auth import get_user_model
from rest_framework import serializers

User = get_user_model()


class RegisterSerializer(serializers.Serializer):
    """Validate registration input; strength and uniqueness are checked by ``AuthService``."""

    email = serializers.EmailField()
    username = serializers.CharField(min_length=3, max_length=50)
    password = serializers.CharField(write_only=True, max_length=128)
    firstName = serializers.CharField(max_length=50)
    lastName = serializers.CharField(max_length=50)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)

    def to_profile(self) -> dict:
        data = self.validated_data
        return {
            "email": data["email"],
            "username": data["username"],
            "password": data["password"],
            "first_name": data["firstName"],
            "last_name": data["lastName"],
            "phone": data.get("phone", ""),
        }


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class RefreshSerializer(serializers.Serializer):
    refreshToken = serializers.CharField()


class ChangePasswordSerializer(serializers.Serializer):
    currentPassword = serializers.CharField(write_only=True)
    newPassword = serializers.CharField(write_only=True, min_length=8, max_length=128)


class UserDetailSerializer(serializers.ModelSerializer):
    """Read-only user profile payload for responses."""

    firstName = serializers.CharField(source="first_name")
    lastName = serializers.CharField(source="last_name")
    isActive = serializers.BooleanField(source="is_active")
    createdAt = serializers.DateTimeField(source="date_joined")
    updatedAt = serializers.DateTimeField(source="updated_at")

    class Meta:
        """Expose identity fields in camelCase; never the password hash."""

        model = User
        fields = ["id", "email", "username", "firstName", "lastName", "phone", "isActive", "createdAt", "updatedAt"]
        read_only_fields = fields


def user_payload(user, roles) -> dict:
    return {**UserDetailSerializer(user).data, "roles": list(roles)}


__all__ = [
    "ChangePasswordSerializer",
    "LoginSerializer",
    "RefreshSerializer",
    "RegisterSerializer",
    "UserDetailSerializer",
    "user_payload",
]
