"""User DRF serializers for API output."""

from __future__ import annotations

from rest_framework import serializers

from modules.users.models import User


class UserSerializer(serializers.ModelSerializer):
    """Read serializer for the User resource."""

    class Meta:
        model = User
        fields = ["id", "name", "email", "created_at", "updated_at"]
        read_only_fields = fields
