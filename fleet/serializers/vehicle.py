from rest_framework import serializers

from accounts.models import ManagementCode
from fleet.models import Vehicle
from fleet.services.oil_change import oil_change_summary


class VehicleSerializer(serializers.ModelSerializer):
    management_code = serializers.SlugRelatedField(
        slug_field='code', queryset=ManagementCode.objects.all(), required=False
    )
    oil_change_status = serializers.CharField(read_only=True)

    class Meta:
        model = Vehicle
        fields = [
            'id',
            'vehicle_no',
            'vehicle_name',
            'vehicle_type',
            'capacity',
            'fuel_type',
            'wheelchair_accessible',
            'current_odometer',
            'last_oil_change_odometer',
            'oil_change_status',
            'management_code',
            'is_active',
            'created_at',
            'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']


class VehicleDetailSerializer(VehicleSerializer):
    oil_change = serializers.SerializerMethodField()

    class Meta(VehicleSerializer.Meta):
        fields = VehicleSerializer.Meta.fields + ['oil_change']

    def get_oil_change(self, obj):
        return oil_change_summary(obj)
