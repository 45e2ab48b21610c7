from django.db import models
from django.db.models import Q

from trips.models.base import CANCELLED, TripDetailBase, TripRecordBase

CHECK_CHOICES = [
    ('no_problem', 'No problem'),
    ('problem', 'Problem'),
]


class TransportationRecord(TripRecordBase):
    """
    A driver's rider transport for one vehicle and day.
    """
    DATE_FIELD = 'transportation_date'
    RECORD_TYPE = 'transportation'
    NATURAL_KEY = ('driver', 'vehicle', 'transportation_date')

    TRANSPORTATION_TYPE_CHOICES = [
        ('regular', 'Regular'),
        ('medical', 'Medical'),
        ('emergency', 'Emergency'),
        ('outing', 'Outing'),
        ('individual', 'Individual'),
    ]
    TRIP_TYPE_CHOICES = [
        ('one_way', 'One way'),
        ('round_trip', 'Round trip'),
    ]

    driver = models.ForeignKey('fleet.Driver', on_delete=models.PROTECT, related_name='transportation_records')
    vehicle = models.ForeignKey('fleet.Vehicle', on_delete=models.PROTECT, related_name='transportation_records')
    route = models.ForeignKey(
        'routes.Route', on_delete=models.SET_NULL, null=True, blank=True, related_name='transportation_records'
    )
    transportation_date = models.DateField()
    transportation_type = models.CharField(max_length=20, choices=TRANSPORTATION_TYPE_CHOICES, default='regular')
    trip_type = models.CharField(max_length=20, choices=TRIP_TYPE_CHOICES, default='one_way')
    passenger_count = models.PositiveIntegerField(default=0)
    weather = models.CharField(max_length=50, blank=True)
    special_notes = models.TextField(blank=True)

    # Safety checks
    boarding_check = models.CharField(max_length=20, choices=CHECK_CHOICES, blank=True)
    alighting_check = models.CharField(max_length=20, choices=CHECK_CHOICES, blank=True)
    wheelchair_security_check = models.CharField(max_length=20, choices=CHECK_CHOICES, blank=True)

    companion_present = models.BooleanField(default=False)
    companion_name = models.CharField(max_length=100, blank=True)
    companion_relationship = models.CharField(max_length=50, blank=True)

    class Meta:
        db_table = 'transportation_records'
        ordering = ['-transportation_date', '-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['driver', 'vehicle', 'transportation_date'],
                condition=~Q(status=CANCELLED),
                name='unique_active_transportation_record',
            ),
        ]
        indexes = [
            models.Index(fields=['transportation_date', 'status']),
        ]

    def __str__(self):
        return f"Transportation {self.transportation_date} {self.driver_id}/{self.vehicle_id} ({self.status})"


class TransportationDetail(TripDetailBase):
    record = models.ForeignKey(TransportationRecord, on_delete=models.CASCADE, related_name='details')
    rider = models.ForeignKey('riders.Rider', on_delete=models.PROTECT, related_name='transportation_details')
    destination = models.ForeignKey(
        'routes.Destination', on_delete=models.SET_NULL, null=True, blank=True, related_name='transportation_details'
    )
    pickup_address = models.CharField(max_length=255, blank=True)
    pickup_time = models.TimeField(null=True, blank=True)
    drop_off_time = models.TimeField(null=True, blank=True)

    health_condition = models.CharField(max_length=100, blank=True)
    behavior_notes = models.TextField(blank=True)
    assistance_required = models.TextField(blank=True)
    mobility_aid_used = models.BooleanField(default=False)
    mobility_aid_secured = models.BooleanField(default=False)

    class Meta:
        db_table = 'transportation_details'
        ordering = ['record', 'sequence', 'id']
        constraints = [
            models.UniqueConstraint(fields=['record', 'rider'], name='unique_transportation_detail_rider'),
        ]

    def __str__(self):
        return f"{self.record_id} #{self.sequence} {self.rider_id}"
