from rest_framework import serializers

from accounts.models import ManagementCode
from riders.models import Rider, RiderAddress


class RiderAddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = RiderAddress
        fields = ['id', 'rider', 'address_type', 'address', 'is_primary', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class RiderSerializer(serializers.ModelSerializer):
    management_code = serializers.SlugRelatedField(
        slug_field='code', queryset=ManagementCode.objects.all(), required=False
    )
    primary_address = serializers.SerializerMethodField()

    class Meta:
        model = Rider
        fields = [
            'id', 'user_no', 'name', 'phone', 'emergency_contact', 'emergency_phone',
            'wheelchair_user', 'special_notes', 'primary_address', 'management_code',
            'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def get_primary_address(self, obj):
        address = obj.primary_address
        return address.address if address else None


class RiderDetailSerializer(RiderSerializer):
    addresses = RiderAddressSerializer(many=True, read_only=True)

    class Meta(RiderSerializer.Meta):
        fields = RiderSerializer.Meta.fields + ['addresses']
