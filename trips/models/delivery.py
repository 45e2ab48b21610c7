from django.core.validators import MaxValueValidator
from django.db import models
from django.db.models import Q

from trips.models.base import CANCELLED, TripDetailBase, TripRecordBase


class DeliveryRecord(TripRecordBase):
    """
    One route run by a driver and vehicle on a given day.
    """
    DATE_FIELD = 'delivery_date'
    RECORD_TYPE = 'delivery'
    NATURAL_KEY = ('driver', 'vehicle', 'route', 'delivery_date')

    driver = models.ForeignKey('fleet.Driver', on_delete=models.PROTECT, related_name='delivery_records')
    vehicle = models.ForeignKey('fleet.Vehicle', on_delete=models.PROTECT, related_name='delivery_records')
    route = models.ForeignKey('routes.Route', on_delete=models.PROTECT, related_name='delivery_records')
    delivery_date = models.DateField()
    gas_card_used = models.BooleanField(default=False)

    class Meta:
        db_table = 'delivery_records'
        ordering = ['-delivery_date', '-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['driver', 'vehicle', 'route', 'delivery_date'],
                condition=~Q(status=CANCELLED),
                name='unique_active_delivery_record',
            ),
        ]
        indexes = [
            models.Index(fields=['delivery_date', 'status']),
        ]

    def __str__(self):
        return f"Delivery {self.delivery_date} {self.route_id}/{self.driver_id} ({self.status})"


class DeliveryDetail(TripDetailBase):
    record = models.ForeignKey(DeliveryRecord, on_delete=models.CASCADE, related_name='details')
    destination = models.ForeignKey(
        'routes.Destination', on_delete=models.SET_NULL, null=True, blank=True, related_name='delivery_details'
    )
    has_invoice = models.BooleanField(default=False)
    time_slot = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MaxValueValidator(9)], help_text="Delivery time slot 0-9"
    )

    class Meta:
        db_table = 'delivery_details'
        ordering = ['record', 'sequence', 'id']
        constraints = [
            models.UniqueConstraint(fields=['record', 'destination'], name='unique_delivery_detail_destination'),
        ]

    def __str__(self):
        return f"{self.record_id} #{self.sequence}"
