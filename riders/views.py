from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from accounts.permissions import IsAdminOrDriverReadOnly
from accounts.scoping import ManagementCodeScopedMixin, check_in_scope, get_driver_session, scope_queryset
from riders.models import Rider, RiderAddress
from riders.serializers import RiderAddressSerializer, RiderDetailSerializer, RiderSerializer


class RiderViewSet(ManagementCodeScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for managing riders.
    """
    queryset = Rider.objects.select_related('management_code').prefetch_related('addresses')
    serializer_class = RiderSerializer
    permission_classes = [IsAdminOrDriverReadOnly]
    filterset_fields = ['wheelchair_user', 'is_active']
    search_fields = ['user_no', 'name', 'phone']
    ordering_fields = ['user_no', 'name', 'created_at']
    ordering = ['user_no']

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return RiderDetailSerializer
        return super().get_serializer_class()

    def get_queryset(self):
        queryset = super().get_queryset()
        if get_driver_session(self.request) is not None:
            queryset = queryset.filter(is_active=True)
        return queryset

    @action(detail=True, methods=['get', 'post'])
    def addresses(self, request, pk=None):
        """
        List or add a rider's addresses.
        POST /api/riders/riders/{id}/addresses/
        {
            "address_type": "school",
            "address": "1-2-3 Chuo",
            "is_primary": false
        }
        """
        rider = self.get_object()
        if request.method == 'GET':
            return Response(RiderAddressSerializer(rider.addresses.all(), many=True).data)

        data = request.data.copy()
        data['rider'] = rider.id
        serializer = RiderAddressSerializer(data=data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)


class RiderAddressViewSet(viewsets.ModelViewSet):
    queryset = RiderAddress.objects.select_related('rider')
    serializer_class = RiderAddressSerializer
    permission_classes = [IsAdminOrDriverReadOnly]
    filterset_fields = ['rider', 'address_type', 'is_primary']

    def get_queryset(self):
        return scope_queryset(super().get_queryset(), self.request, 'rider__management_code')

    def perform_create(self, serializer):
        rider = serializer.validated_data.get('rider')
        if rider is None:
            raise PermissionDenied('A rider is required.')
        check_in_scope(self.request, rider.management_code_id)
        serializer.save()

    def perform_update(self, serializer):
        rider = serializer.validated_data.get('rider')
        if rider is not None:
            check_in_scope(self.request, rider.management_code_id)
        serializer.save()
