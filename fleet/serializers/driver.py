from rest_framework import serializers

from accounts.models import ManagementCode
from fleet.models import Driver


class DriverSerializer(serializers.ModelSerializer):
    management_code = serializers.SlugRelatedField(
        slug_field='code', queryset=ManagementCode.objects.all(), required=False
    )
    pin_code = serializers.CharField(max_length=10, write_only=True, required=False, allow_blank=True)

    class Meta:
        model = Driver
        fields = [
            'id', 'name', 'employee_no', 'email', 'pin_code', 'driver_license_number',
            'management_code', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_pin_code(self, value):
        if value and not value.isdigit():
            raise serializers.ValidationError('PIN code must contain digits only.')
        return value
