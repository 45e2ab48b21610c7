import logging

from django.contrib.auth import authenticate, login, logout
from django.core.exceptions import ValidationError
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import ManagementCode
from accounts.permissions import IsAdmin, IsDriver
from accounts.scoping import get_driver_session
from accounts.serializers import (
    AdminLoginSerializer,
    AdminRegistrationSerializer,
    DriverLoginSerializer,
    DriverSessionSerializer,
    DriverSessionUpdateSerializer,
    ManagementCodeSerializer,
    OrganizationSerializer,
)
from accounts.services.sessions import end_driver_session, start_driver_session, update_driver_session

logger = logging.getLogger(__name__)


class DriverLoginView(APIView):
    """
    Open a driver session for a management code, driver and vehicle.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        request_body=DriverLoginSerializer,
        responses={201: DriverSessionSerializer, 400: "Invalid credentials or selection"},
        tags=['Driver Session']
    )
    def post(self, request, format=None):
        serializer = DriverLoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            session = start_driver_session(
                code=data['management_code'],
                employee_no=data['employee_no'],
                pin_code=data.get('pin_code'),
                vehicle_id=data['vehicle'],
                route_id=data.get('route'),
                rider_ids=data.get('riders'),
                start_time=data.get('start_time'),
            )
        except ValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)

        payload = DriverSessionSerializer(session).data
        payload['token'] = session.token
        return Response(payload, status=status.HTTP_201_CREATED)


class DriverSessionView(APIView):
    """
    Read or change the current driver session.
    """
    permission_classes = [IsDriver]

    @swagger_auto_schema(responses={200: DriverSessionSerializer}, tags=['Driver Session'])
    def get(self, request, format=None):
        return Response(DriverSessionSerializer(get_driver_session(request)).data)

    @swagger_auto_schema(
        request_body=DriverSessionUpdateSerializer,
        responses={200: DriverSessionSerializer},
        tags=['Driver Session']
    )
    def patch(self, request, format=None):
        session = get_driver_session(request)
        serializer = DriverSessionUpdateSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            update_driver_session(session, **serializer.validated_data)
        except ValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        return Response(DriverSessionSerializer(session).data)


class DriverLogoutView(APIView):
    permission_classes = [IsDriver]

    def post(self, request, format=None):
        end_driver_session(get_driver_session(request))
        return Response({'status': 'logged out'})


class AdminRegisterView(APIView):
    """
    Register an organization with its first administrator and management code.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    @swagger_auto_schema(request_body=AdminRegistrationSerializer, tags=['Administration'])
    def post(self, request, format=None):
        serializer = AdminRegistrationSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        admin = serializer.save()
        logger.info(f"Registered organization {admin.organization.name!r} with admin {admin.user.username!r}")
        return Response({
            'organization': OrganizationSerializer(admin.organization).data,
            'username': admin.user.username,
            'management_codes': ManagementCodeSerializer(admin.organization.management_codes.all(), many=True).data,
        }, status=status.HTTP_201_CREATED)


class AdminLoginView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(request_body=AdminLoginSerializer, tags=['Administration'])
    def post(self, request, format=None):
        serializer = AdminLoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = authenticate(
            request,
            username=serializer.validated_data['username'],
            password=serializer.validated_data['password'],
        )
        if user is None or not (user.is_superuser or hasattr(user, 'admin_profile')):
            logger.warning(f"Admin login failed for {serializer.validated_data['username']!r}")
            return Response({'error': 'Invalid username or password'}, status=status.HTTP_400_BAD_REQUEST)

        login(request, user)
        organization = getattr(getattr(user, 'admin_profile', None), 'organization', None)
        return Response({
            'username': user.username,
            'is_superuser': user.is_superuser,
            'organization': OrganizationSerializer(organization).data if organization else None,
        })


class AdminLogoutView(APIView):
    permission_classes = [IsAdmin]

    def post(self, request, format=None):
        logout(request)
        return Response({'status': 'logged out'})


class OrganizationView(APIView):
    """
    The calling administrator's organization.
    """
    permission_classes = [IsAdmin]

    def _organization(self, request):
        admin = getattr(request.user, 'admin_profile', None)
        if admin is None:
            raise PermissionDenied('No organization is linked to this account.')
        return admin.organization

    def get(self, request, format=None):
        return Response(OrganizationSerializer(self._organization(request)).data)

    def patch(self, request, format=None):
        organization = self._organization(request)
        serializer = OrganizationSerializer(organization, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer.save()
        return Response(serializer.data)


class ManagementCodeViewSet(viewsets.ModelViewSet):
    """
    API endpoint for an organization's management codes.
    """
    queryset = ManagementCode.objects.select_related('organization')
    serializer_class = ManagementCodeSerializer
    permission_classes = [IsAdmin]
    filterset_fields = ['is_active']
    search_fields = ['code', 'name']
    ordering_fields = ['created_at', 'code']
    http_method_names = ['get', 'post', 'patch', 'head', 'options']

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.request.user.is_superuser:
            return queryset
        return queryset.filter(organization=self.request.user.admin_profile.organization)

    def perform_create(self, serializer):
        if self.request.user.is_superuser and serializer.validated_data.get('organization'):
            code = serializer.save()
        else:
            admin = getattr(self.request.user, 'admin_profile', None)
            if admin is None:
                raise PermissionDenied('An organization is required.')
            code = serializer.save(organization=admin.organization)
        logger.info(f"Management code {code.code} created for {code.organization.name!r}")

    def perform_update(self, serializer):
        # codes cannot move between organizations
        serializer.validated_data.pop('organization', None)
        serializer.save()

    @action(detail=True, methods=['post'])
    def toggle(self, request, pk=None):
        """
        Flip a code between active and inactive.
        POST /api/accounts/management-codes/{id}/toggle/
        """
        code = self.get_object()
        code.toggle_active()
        return Response(ManagementCodeSerializer(code).data)
