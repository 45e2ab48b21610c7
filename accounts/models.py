from django.conf import settings
from django.db import models
from django.utils import timezone


class Organization(models.Model):
    """
    Care provider operating the transport service.
    """
    name = models.CharField(max_length=200)
    address = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    email = models.EmailField(blank=True)
    representative_name = models.CharField(max_length=100, blank=True)
    license_number = models.CharField(max_length=50, blank=True)
    business_type = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'organizations'
        ordering = ['name']

    def __str__(self):
        return self.name


class ManagementCode(models.Model):
    """
    Tenant scope. Drivers, vehicles, riders and routes belong to exactly one
    code and are only visible to sessions holding that code.
    """
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='management_codes')
    code = models.CharField(max_length=6, unique=True, editable=False)
    name = models.CharField(max_length=100)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'management_codes'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.code} ({self.name})"

    def save(self, *args, **kwargs):
        if not self.code:
            from accounts.services.codes import generate_management_code
            self.code = generate_management_code()
        super().save(*args, **kwargs)

    def toggle_active(self):
        self.is_active = not self.is_active
        self.save(update_fields=['is_active', 'updated_at'])


class Admin(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='admin_profile')
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='admins')

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'admins'

    def __str__(self):
        return f"{self.user.get_username()} @ {self.organization.name}"


class DriverSession(models.Model):
    """
    Server-side driver session: who is driving which vehicle, on which route,
    carrying which riders, scoped to one management code.
    """
    token = models.CharField(max_length=64, unique=True, editable=False)
    driver = models.ForeignKey('fleet.Driver', on_delete=models.CASCADE, related_name='sessions')
    vehicle = models.ForeignKey('fleet.Vehicle', on_delete=models.CASCADE, related_name='driver_sessions')
    route = models.ForeignKey('routes.Route', on_delete=models.SET_NULL, null=True, blank=True,
                              related_name='driver_sessions')
    riders = models.ManyToManyField('riders.Rider', blank=True, related_name='driver_sessions')
    management_code = models.ForeignKey(ManagementCode, on_delete=models.CASCADE, related_name='driver_sessions')

    start_time = models.TimeField(null=True, blank=True)
    start_odometer = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    ended_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'driver_sessions'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.driver.name} / {self.vehicle.vehicle_no} ({'ended' if self.ended_at else 'active'})"

    @property
    def is_active(self):
        return self.ended_at is None

    def end(self):
        """Close the session; the token stops authenticating."""
        if self.ended_at is None:
            self.ended_at = timezone.now()
            self.save(update_fields=['ended_at', 'updated_at'])
