from django.db import models


class Route(models.Model):
    """
    A named delivery/transport route with an ordered list of destinations.
    """
    route_name = models.CharField(max_length=100)
    route_code = models.CharField(max_length=20, unique=True)
    start_location = models.CharField(max_length=255, blank=True)
    end_location = models.CharField(max_length=255, blank=True)
    estimated_time = models.PositiveIntegerField(null=True, blank=True, help_text="Estimated time in minutes")
    distance = models.DecimalField(max_digits=7, decimal_places=1, null=True, blank=True, help_text="Distance in km")
    display_order = models.PositiveIntegerField(default=0)

    management_code = models.ForeignKey(
        'accounts.ManagementCode', on_delete=models.CASCADE, related_name='routes'
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'routes'
        ordering = ['display_order', 'route_code']

    def __str__(self):
        return f"{self.route_code} {self.route_name}"

    def active_destinations(self):
        return self.destinations.filter(is_active=True).order_by('display_order', 'id')


class Destination(models.Model):
    DESTINATION_TYPE_CHOICES = [
        ('home', 'Home'),
        ('facility', 'Facility'),
        ('medical', 'Medical'),
        ('other', 'Other')
    ]

    route = models.ForeignKey(Route, on_delete=models.CASCADE, related_name='destinations')
    name = models.CharField(max_length=100)
    address = models.CharField(max_length=255, blank=True)
    destination_type = models.CharField(max_length=20, choices=DESTINATION_TYPE_CHOICES, default='other')
    display_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'destinations'
        ordering = ['route', 'display_order', 'id']

    def __str__(self):
        return f"{self.route.route_code} #{self.display_order} {self.name}"
