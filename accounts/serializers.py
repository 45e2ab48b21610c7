from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import serializers

from accounts.models import Admin, DriverSession, ManagementCode, Organization
from riders.models import Rider
from routes.models import Route

MIN_PASSWORD_LENGTH = 6


class OrganizationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Organization
        fields = [
            'id', 'name', 'address', 'phone', 'email', 'representative_name',
            'license_number', 'business_type', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']


class ManagementCodeSerializer(serializers.ModelSerializer):
    organization = serializers.PrimaryKeyRelatedField(queryset=Organization.objects.all(), required=False)

    class Meta:
        model = ManagementCode
        fields = ['id', 'organization', 'code', 'name', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['code', 'created_at', 'updated_at']


class AdminRegistrationSerializer(serializers.Serializer):
    organization_name = serializers.CharField(max_length=200)
    organization_email = serializers.EmailField()
    organization_address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    organization_phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    representative_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    business_type = serializers.CharField(max_length=100, required=False, allow_blank=True)
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True)
    password_confirm = serializers.CharField(write_only=True)
    code_name = serializers.CharField(max_length=100, required=False, default='Default')

    def validate_username(self, value):
        if get_user_model().objects.filter(username=value).exists():
            raise serializers.ValidationError('This username is already taken.')
        return value

    def validate_password(self, value):
        if len(value) < MIN_PASSWORD_LENGTH:
            raise serializers.ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters.')
        return value

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({'password_confirm': 'Passwords do not match.'})
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        organization = Organization.objects.create(
            name=validated_data['organization_name'],
            email=validated_data['organization_email'],
            address=validated_data.get('organization_address', ''),
            phone=validated_data.get('organization_phone', ''),
            representative_name=validated_data.get('representative_name', ''),
            business_type=validated_data.get('business_type', ''),
        )
        user = get_user_model().objects.create_user(
            username=validated_data['username'],
            email=validated_data['organization_email'],
            password=validated_data['password'],
        )
        admin = Admin.objects.create(user=user, organization=organization)
        ManagementCode.objects.create(organization=organization, name=validated_data['code_name'])
        return admin


class AdminLoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)


class DriverLoginSerializer(serializers.Serializer):
    management_code = serializers.CharField(max_length=6)
    employee_no = serializers.CharField(max_length=20)
    pin_code = serializers.CharField(max_length=10, required=False, allow_blank=True, default='')
    vehicle = serializers.IntegerField()
    route = serializers.IntegerField(required=False, allow_null=True)
    riders = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)
    start_time = serializers.TimeField(required=False, allow_null=True)

    def validate_management_code(self, value):
        return value.strip().upper()


class DriverSessionSerializer(serializers.ModelSerializer):
    driver_name = serializers.CharField(source='driver.name', read_only=True)
    vehicle_no = serializers.CharField(source='vehicle.vehicle_no', read_only=True)
    route_name = serializers.CharField(source='route.route_name', read_only=True, default=None)
    management_code = serializers.CharField(source='management_code.code', read_only=True)

    class Meta:
        model = DriverSession
        fields = [
            'id', 'driver', 'driver_name', 'vehicle', 'vehicle_no', 'route', 'route_name',
            'riders', 'start_time', 'start_odometer', 'management_code', 'created_at', 'ended_at'
        ]
        read_only_fields = fields


class DriverSessionUpdateSerializer(serializers.Serializer):
    route = serializers.PrimaryKeyRelatedField(queryset=Route.objects.filter(is_active=True), required=False)
    riders = serializers.PrimaryKeyRelatedField(queryset=Rider.objects.filter(is_active=True), many=True, required=False)
    start_time = serializers.TimeField(required=False)
