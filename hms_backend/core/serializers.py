"""Serializers for the core app.

Contains serializers for User (profile, registration, login) and AuditLog.
Follows the Read/Write serializer pattern: write serializers only validate
input, the workflow services in ``core.services`` do the writing.
"""

from rest_framework import serializers

from hms_backend.core import access
from hms_backend.core.models import AuditLog, User


# -----------------------------------------------------------------------------
# User Serializers
# -----------------------------------------------------------------------------


class UserProfileSerializer(serializers.ModelSerializer):
    """Read-only profile returned by login, register and /auth/me/."""

    permissions = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'full_name',
            'role',
            'is_active',
            'date_joined',
            'last_login',
            'permissions',
        ]
        read_only_fields = fields

    def get_permissions(self, obj):
        """Sorted workflow names the role may invoke (empty for unknown roles)."""
        return sorted(access.permitted_workflows(obj.role))


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    role = serializers.CharField(max_length=64)
    full_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class RefreshSerializer(serializers.Serializer):
    """Validates a refresh token and exposes the new access token."""

    refresh = serializers.CharField(required=True)

    def validate_refresh(self, value):
        from rest_framework_simplejwt.exceptions import TokenError
        from rest_framework_simplejwt.tokens import RefreshToken

        try:
            RefreshToken(value)
        except TokenError as e:
            raise serializers.ValidationError(f'Invalid or expired refresh token: {str(e)}')
        return value


# -----------------------------------------------------------------------------
# AuditLog Serializers
# -----------------------------------------------------------------------------


class AuditLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = AuditLog
        fields = [
            'id',
            'user_name',
            'user_role',
            'action_type',
            'subject',
            'details',
            'action_timestamp',
        ]
        read_only_fields = fields
