import logging

from django.db import transaction
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from accounts.permissions import IsAdminOrDriverReadOnly
from accounts.scoping import ManagementCodeScopedMixin, check_in_scope, get_driver_session, scope_queryset
from routes.models import Destination, Route
from routes.serializers import DestinationSerializer, RouteDetailSerializer, RouteSerializer

logger = logging.getLogger(__name__)


class RouteViewSet(ManagementCodeScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for managing routes.
    """
    queryset = Route.objects.select_related('management_code')
    serializer_class = RouteSerializer
    permission_classes = [IsAdminOrDriverReadOnly]
    filterset_fields = ['is_active']
    search_fields = ['route_name', 'route_code', 'start_location', 'end_location']
    ordering_fields = ['display_order', 'route_code', 'route_name', 'created_at']
    ordering = ['display_order', 'route_code']

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return RouteDetailSerializer
        return super().get_serializer_class()

    def get_queryset(self):
        queryset = super().get_queryset()
        if get_driver_session(self.request) is not None:
            queryset = queryset.filter(is_active=True)
        return queryset

    @action(detail=True, methods=['get'])
    def destinations(self, request, pk=None):
        """
        Active destinations of a route in visiting order.
        GET /api/routes/routes/{id}/destinations/
        """
        route = self.get_object()
        return Response(DestinationSerializer(route.active_destinations(), many=True).data)

    @action(detail=True, methods=['post'])
    def reorder(self, request, pk=None):
        """
        Set the visiting order of a route's destinations.
        POST /api/routes/routes/{id}/reorder/
        {
            "destination_ids": [4, 2, 7]
        }
        """
        route = self.get_object()
        ids = request.data.get('destination_ids')
        if not isinstance(ids, list) or not ids:
            return Response({'error': 'destination_ids must be a non-empty list'}, status=status.HTTP_400_BAD_REQUEST)

        destinations = {d.id: d for d in route.destinations.filter(id__in=ids)}
        if len(destinations) != len(set(ids)):
            return Response({'error': 'Unknown destination for this route'}, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            for order, destination_id in enumerate(ids, start=1):
                destination = destinations[destination_id]
                destination.display_order = order
                destination.save(update_fields=['display_order', 'updated_at'])

        logger.info(f"Route {route.route_code}: destinations reordered")
        return Response(DestinationSerializer(route.active_destinations(), many=True).data)


class DestinationViewSet(viewsets.ModelViewSet):
    """
    API endpoint for managing route destinations.
    """
    queryset = Destination.objects.select_related('route')
    serializer_class = DestinationSerializer
    permission_classes = [IsAdminOrDriverReadOnly]
    filterset_fields = ['route', 'destination_type', 'is_active']
    search_fields = ['name', 'address']
    ordering_fields = ['display_order', 'name']
    ordering = ['route', 'display_order']

    def get_queryset(self):
        return scope_queryset(super().get_queryset(), self.request, 'route__management_code')

    def _check_route(self, route):
        if route is not None:
            check_in_scope(self.request, route.management_code_id)

    def perform_create(self, serializer):
        route = serializer.validated_data.get('route')
        if route is None:
            raise PermissionDenied('A route is required.')
        self._check_route(route)
        serializer.save()

    def perform_update(self, serializer):
        self._check_route(serializer.validated_data.get('route'))
        serializer.save()
