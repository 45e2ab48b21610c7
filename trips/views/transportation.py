from django.core.exceptions import ValidationError

from accounts.scoping import scope_queryset
from riders.models import Rider
from trips.models import TransportationDetail, TransportationRecord
from trips.serializers import (
    RiderSelectionSerializer,
    TransportationDetailSerializer,
    TransportationRecordSerializer,
)
from trips.services.reconciler import populate_transportation_details, reconcile_transportation_record
from trips.views.base import TripDetailViewSet, TripRecordViewSet


class TransportationRecordViewSet(TripRecordViewSet):
    """
    API endpoint for transportation records (rider trips per driver, vehicle and day).
    """
    queryset = TransportationRecord.objects.select_related('driver', 'vehicle', 'route').prefetch_related(
        'details__rider', 'details__destination'
    )
    serializer_class = TransportationRecordSerializer
    extra_serializer_class = RiderSelectionSerializer
    filterset_fields = ['status', 'driver', 'vehicle', 'route', 'transportation_date', 'transportation_type']
    search_fields = ['driver__name', 'vehicle__vehicle_no', 'special_notes']
    ordering = ['-transportation_date', '-created_at']

    def _riders(self, record, rider_ids):
        if not rider_ids:
            return []
        riders = list(
            scope_queryset(Rider.objects.filter(is_active=True), self.request)
            .filter(pk__in=rider_ids, management_code_id=record.driver.management_code_id)
        )
        by_id = {r.id: r for r in riders}
        # keep the requested boarding order
        return [by_id[i] for i in rider_ids if i in by_id]

    def populate_details(self, record, extra):
        populate_transportation_details(record, self._riders(record, extra.get('riders')))

    def reconcile(self, request, data):
        rider_ids = data.get('riders') or []
        riders = list(
            scope_queryset(Rider.objects.filter(is_active=True), self.request)
            .filter(pk__in=rider_ids, management_code_id=data['driver'].management_code_id)
        )
        if len(riders) != len(set(rider_ids)):
            raise ValidationError('One or more riders were not found.')
        by_id = {r.id: r for r in riders}
        return reconcile_transportation_record(
            data['driver'], data['vehicle'],
            transportation_date=data.get('date'), route=data.get('route'),
            riders=[by_id[i] for i in dict.fromkeys(rider_ids)], start_time=data.get('start_time'),
        )


class TransportationDetailViewSet(TripDetailViewSet):
    queryset = TransportationDetail.objects.select_related('record', 'rider', 'destination')
    serializer_class = TransportationDetailSerializer
    filterset_fields = ['record', 'rider', 'destination']
    ordering = ['record', 'sequence']
