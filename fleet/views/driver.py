from rest_framework import viewsets

from accounts.permissions import IsAdminOrDriverReadOnly
from accounts.scoping import ManagementCodeScopedMixin
from fleet.models import Driver
from fleet.serializers import DriverSerializer


class DriverViewSet(ManagementCodeScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for managing drivers.
    """
    queryset = Driver.objects.select_related('management_code')
    serializer_class = DriverSerializer
    permission_classes = [IsAdminOrDriverReadOnly]
    filterset_fields = ['is_active']
    search_fields = ['name', 'employee_no', 'email']
    ordering_fields = ['employee_no', 'name', 'created_at']
    ordering = ['employee_no']
