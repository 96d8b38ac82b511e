from rest_framework import serializers

from configurator.catalog.serializers import ShowerTypeSummarySerializer
from configurator.core.validators import validate_phone, validate_postal_code
from .models import UserDesign


class UserDesignSerializer(serializers.ModelSerializer):
    shower_type = ShowerTypeSummarySerializer(read_only=True)
    shower_type_id = serializers.IntegerField(min_value=1)

    class Meta:
        model = UserDesign
        fields = ['id', 'user_full_name', 'user_email', 'user_phone', 'user_postal_code',
                  'design_data', 'shower_type', 'shower_type_id', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_user_full_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Full name is required')
        return value

    def validate_user_email(self, value):
        return value.strip().lower()

    def validate_user_phone(self, value):
        return validate_phone(value)

    def validate_user_postal_code(self, value):
        return validate_postal_code(value)

    def validate_design_data(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError('Design data must be a JSON object')
        return value


class UserDesignUpdateSerializer(UserDesignSerializer):
    """Customer-side update: email and shower type are fixed once saved"""
    shower_type_id = serializers.IntegerField(read_only=True)

    class Meta(UserDesignSerializer.Meta):
        read_only_fields = ['user_email', 'created_at', 'updated_at']
