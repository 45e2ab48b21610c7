from django.db import models


class Vehicle(models.Model):
    """
    Model representing a vehicle used for care transport.
    """
    VEHICLE_TYPE_CHOICES = [
        ('sedan', 'Sedan'),
        ('van', 'Van'),
        ('wagon', 'Wagon'),
        ('wheelchair_van', 'Wheelchair Van'),
        ('microbus', 'Microbus'),
        ('other', 'Other')
    ]

    FUEL_TYPE_CHOICES = [
        ('gasoline', 'Gasoline'),
        ('diesel', 'Diesel'),
        ('hybrid', 'Hybrid'),
        ('electric', 'Electric'),
        ('lpg', 'LPG')
    ]

    vehicle_no = models.CharField(max_length=20, unique=True)
    vehicle_name = models.CharField(max_length=100, blank=True)
    vehicle_type = models.CharField(max_length=20, choices=VEHICLE_TYPE_CHOICES, default='van')
    capacity = models.PositiveIntegerField(default=0, help_text="Passenger seats")
    fuel_type = models.CharField(max_length=20, choices=FUEL_TYPE_CHOICES, default='gasoline')
    wheelchair_accessible = models.BooleanField(default=False)

    # Odometer readings in km
    current_odometer = models.PositiveIntegerField(null=True, blank=True)
    last_oil_change_odometer = models.PositiveIntegerField(null=True, blank=True)

    management_code = models.ForeignKey(
        'accounts.ManagementCode', on_delete=models.CASCADE, related_name='vehicles'
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.vehicle_no} {self.vehicle_name}".strip()

    @property
    def oil_change_status(self):
        from fleet.services.oil_change import oil_change_status
        return oil_change_status(self.current_odometer, self.last_oil_change_odometer)

    class Meta:
        db_table = 'vehicles'
        ordering = ['vehicle_no']
        indexes = [
            models.Index(fields=['management_code', 'is_active']),
        ]


class Driver(models.Model):
    """
    A driver who logs in with a management code, employee number and PIN.

    Driver sessions authenticate as the Driver itself, so it carries the
    attributes DRF expects from ``request.user``.
    """
    is_authenticated = True
    is_anonymous = False

    name = models.CharField(max_length=100)
    employee_no = models.CharField(max_length=20, unique=True)
    email = models.EmailField(blank=True)
    pin_code = models.CharField(max_length=10, blank=True)
    driver_license_number = models.CharField(max_length=30, blank=True)

    management_code = models.ForeignKey(
        'accounts.ManagementCode', on_delete=models.CASCADE, related_name='drivers'
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.employee_no} ({self.name})"

    class Meta:
        db_table = 'drivers'
        ordering = ['employee_no']
        indexes = [
            models.Index(fields=['management_code', 'is_active']),
        ]
