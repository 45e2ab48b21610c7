from trips.models import DeliveryDetail, DeliveryRecord
from trips.serializers import DeliveryDetailSerializer, DeliveryRecordSerializer
from trips.services.reconciler import populate_delivery_details, reconcile_delivery_record
from trips.views.base import TripDetailViewSet, TripRecordViewSet


class DeliveryRecordViewSet(TripRecordViewSet):
    """
    API endpoint for delivery records (one route run per driver, vehicle and day).
    """
    queryset = DeliveryRecord.objects.select_related('driver', 'vehicle', 'route').prefetch_related(
        'details__destination'
    )
    serializer_class = DeliveryRecordSerializer
    filterset_fields = ['status', 'driver', 'vehicle', 'route', 'delivery_date']
    search_fields = ['driver__name', 'vehicle__vehicle_no', 'route__route_name']
    ordering = ['-delivery_date', '-created_at']

    def populate_details(self, record, extra):
        populate_delivery_details(record)

    def reconcile(self, request, data):
        return reconcile_delivery_record(
            data['driver'], data['vehicle'], data.get('route'),
            delivery_date=data.get('date'), start_time=data.get('start_time'),
        )


class DeliveryDetailViewSet(TripDetailViewSet):
    queryset = DeliveryDetail.objects.select_related('record', 'destination')
    serializer_class = DeliveryDetailSerializer
    filterset_fields = ['record', 'destination', 'has_invoice', 'time_slot']
    ordering = ['record', 'sequence']
