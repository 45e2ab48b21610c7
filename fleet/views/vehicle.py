import logging

from django.core.exceptions import ValidationError
from django.db.models import Count
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import IsAdminOrDriverReadOnly
from accounts.scoping import ManagementCodeScopedMixin, get_driver_session
from fleet.models import Vehicle
from fleet.serializers import VehicleDetailSerializer, VehicleSerializer
from fleet.services.odometer import record_oil_change, update_vehicle_odometer
from fleet.services.oil_change import NORMAL, oil_change_summary

logger = logging.getLogger(__name__)


class VehicleViewSet(ManagementCodeScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for managing vehicles.
    """
    queryset = Vehicle.objects.select_related('management_code')
    serializer_class = VehicleSerializer
    permission_classes = [IsAdminOrDriverReadOnly]
    filterset_fields = ['vehicle_type', 'fuel_type', 'wheelchair_accessible', 'is_active']
    search_fields = ['vehicle_no', 'vehicle_name']
    ordering_fields = ['vehicle_no', 'capacity', 'current_odometer', 'created_at']
    ordering = ['vehicle_no']

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return VehicleDetailSerializer
        return super().get_serializer_class()

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params

        if min_cap := params.get('min_capacity'):
            try:
                queryset = queryset.filter(capacity__gte=int(min_cap))
            except ValueError:
                pass
        # drivers only ever pick from active vehicles
        if get_driver_session(self.request) is not None:
            queryset = queryset.filter(is_active=True)
        return queryset

    @action(detail=False, methods=['get'])
    def oil_change(self, request):
        """
        Oil-change status for every active vehicle in scope.
        GET /api/fleet/vehicles/oil_change/?status=due_soon
        """
        vehicles = self.get_queryset().filter(is_active=True)
        summaries = [oil_change_summary(v) for v in vehicles]

        wanted = request.query_params.get('status')
        if wanted:
            summaries = [s for s in summaries if s['status'] == wanted]

        return Response({
            'count': len(summaries),
            'attention_count': sum(1 for s in summaries if s['status'] != NORMAL),
            'vehicles': summaries,
        })

    @action(detail=True, methods=['post'])
    def record_oil_change(self, request, pk=None):
        """
        Record an oil change at the given odometer.
        POST /api/fleet/vehicles/{id}/record_oil_change/
        {
            "odometer": 45210
        }
        """
        vehicle = self.get_object()
        odometer = request.data.get('odometer')
        if odometer is None:
            return Response({'error': 'odometer is required'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            record_oil_change(vehicle, odometer)
        except ValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        return Response(oil_change_summary(vehicle))

    @action(detail=True, methods=['post'])
    def update_odometer(self, request, pk=None):
        vehicle = self.get_object()
        odometer = request.data.get('odometer')
        if odometer is None:
            return Response({'error': 'odometer is required'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            update_vehicle_odometer(vehicle, odometer)
        except ValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        return Response(VehicleSerializer(vehicle).data)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        queryset = self.get_queryset()
        type_counts = dict(
            queryset.values('vehicle_type').annotate(count=Count('id')).values_list('vehicle_type', 'count')
        )
        for t, _ in Vehicle.VEHICLE_TYPE_CHOICES:
            type_counts.setdefault(t, 0)

        return Response({
            'total_vehicles': queryset.count(),
            'active_vehicles': queryset.filter(is_active=True).count(),
            'wheelchair_accessible': queryset.filter(wheelchair_accessible=True).count(),
            'type_counts': type_counts,
        })
