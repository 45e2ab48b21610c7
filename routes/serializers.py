from rest_framework import serializers

from accounts.models import ManagementCode
from routes.models import Destination, Route


class DestinationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Destination
        fields = [
            'id', 'route', 'name', 'address', 'destination_type', 'display_order',
            'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']


class RouteSerializer(serializers.ModelSerializer):
    management_code = serializers.SlugRelatedField(
        slug_field='code', queryset=ManagementCode.objects.all(), required=False
    )
    destination_count = serializers.SerializerMethodField()

    class Meta:
        model = Route
        fields = [
            'id', 'route_name', 'route_code', 'start_location', 'end_location', 'estimated_time',
            'distance', 'display_order', 'management_code', 'is_active', 'destination_count',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def get_destination_count(self, obj):
        return obj.destinations.filter(is_active=True).count()


class RouteDetailSerializer(RouteSerializer):
    destinations = serializers.SerializerMethodField()

    class Meta(RouteSerializer.Meta):
        fields = RouteSerializer.Meta.fields + ['destinations']

    def get_destinations(self, obj):
        return DestinationSerializer(obj.active_destinations(), many=True).data
