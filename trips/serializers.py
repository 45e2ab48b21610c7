from rest_framework import serializers

from trips.models import DeliveryDetail, DeliveryRecord, TransportationDetail, TransportationRecord

RECORD_TIMESTAMPS = ['created_at', 'updated_at']


class DeliveryDetailSerializer(serializers.ModelSerializer):
    destination_name = serializers.CharField(source='destination.name', read_only=True, default=None)
    destination_address = serializers.CharField(source='destination.address', read_only=True, default=None)
    stay_minutes = serializers.IntegerField(read_only=True)

    class Meta:
        model = DeliveryDetail
        fields = [
            'id', 'record', 'destination', 'destination_name', 'destination_address', 'sequence',
            'arrival_time', 'departure_time', 'stay_minutes', 'has_invoice', 'time_slot', 'remarks',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['record'] + RECORD_TIMESTAMPS


class TransportationDetailSerializer(serializers.ModelSerializer):
    rider_name = serializers.CharField(source='rider.name', read_only=True)
    wheelchair_user = serializers.BooleanField(source='rider.wheelchair_user', read_only=True)
    destination_name = serializers.CharField(source='destination.name', read_only=True, default=None)
    stay_minutes = serializers.IntegerField(read_only=True)

    class Meta:
        model = TransportationDetail
        fields = [
            'id', 'record', 'rider', 'rider_name', 'wheelchair_user', 'sequence', 'destination',
            'destination_name', 'pickup_address', 'pickup_time', 'arrival_time', 'departure_time',
            'drop_off_time', 'stay_minutes', 'health_condition', 'behavior_notes', 'assistance_required',
            'mobility_aid_used', 'mobility_aid_secured', 'remarks', 'created_at', 'updated_at'
        ]
        read_only_fields = ['record', 'rider'] + RECORD_TIMESTAMPS


class TripRecordSerializer(serializers.ModelSerializer):
    """Fields shared by both record types."""
    driver_name = serializers.CharField(source='driver.name', read_only=True)
    vehicle_no = serializers.CharField(source='vehicle.vehicle_no', read_only=True)
    route_name = serializers.CharField(source='route.route_name', read_only=True, default=None)
    distance = serializers.IntegerField(read_only=True)
    duration_minutes = serializers.IntegerField(read_only=True)

    COMMON_FIELDS = [
        'id', 'driver', 'driver_name', 'vehicle', 'vehicle_no', 'route', 'route_name',
        'start_time', 'end_time', 'start_odometer', 'end_odometer', 'distance',
        'duration_minutes', 'status',
    ]


class DeliveryRecordSerializer(TripRecordSerializer):
    details = DeliveryDetailSerializer(many=True, read_only=True)

    class Meta:
        model = DeliveryRecord
        fields = TripRecordSerializer.COMMON_FIELDS + [
            'delivery_date', 'gas_card_used', 'details', 'created_at', 'updated_at'
        ]
        read_only_fields = ['status'] + RECORD_TIMESTAMPS
        # duplicates are answered with 409 by the view
        validators = []


class TransportationRecordSerializer(TripRecordSerializer):
    details = TransportationDetailSerializer(many=True, read_only=True)

    class Meta:
        model = TransportationRecord
        fields = TripRecordSerializer.COMMON_FIELDS + [
            'transportation_date', 'transportation_type', 'trip_type', 'passenger_count', 'weather',
            'special_notes', 'boarding_check', 'alighting_check', 'wheelchair_security_check',
            'companion_present', 'companion_name', 'companion_relationship', 'details',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['status'] + RECORD_TIMESTAMPS
        validators = []


class FieldUpdateSerializer(serializers.Serializer):
    field = serializers.CharField()
    value = serializers.JSONField(allow_null=True)


class RiderSelectionSerializer(serializers.Serializer):
    """Riders to board on a newly created transportation record, in boarding order."""
    riders = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)


class ReconcileSerializer(serializers.Serializer):
    driver = serializers.IntegerField(required=False)
    vehicle = serializers.IntegerField(required=False)
    route = serializers.IntegerField(required=False, allow_null=True)
    riders = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)
    date = serializers.DateField(required=False, allow_null=True)
    start_time = serializers.TimeField(required=False, allow_null=True)
