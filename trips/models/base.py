from django.core.exceptions import ValidationError
from django.db import models

from trips.services.timeutils import minutes_between

PENDING = 'pending'
IN_PROGRESS = 'in_progress'
COMPLETED = 'completed'
CANCELLED = 'cancelled'


class TripRecordBase(models.Model):
    """
    Shared columns and status transitions of delivery and transportation
    records.

    Subclasses declare ``DATE_FIELD`` (the trip date column), ``RECORD_TYPE``
    and ``NATURAL_KEY`` (the columns that identify one active record).
    """
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (IN_PROGRESS, 'In Progress'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    ]

    DATE_FIELD = None
    RECORD_TYPE = None
    NATURAL_KEY = ()

    start_time = models.TimeField(null=True, blank=True)
    end_time = models.TimeField(null=True, blank=True)
    start_odometer = models.PositiveIntegerField(null=True, blank=True)
    end_odometer = models.PositiveIntegerField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    @property
    def trip_date(self):
        return getattr(self, self.DATE_FIELD)

    @property
    def distance(self):
        """Kilometres driven, or None until both odometer readings exist."""
        if self.start_odometer is None or self.end_odometer is None:
            return None
        return self.end_odometer - self.start_odometer

    @property
    def duration_minutes(self):
        return minutes_between(self.start_time, self.end_time)

    @property
    def is_active(self):
        return self.status != CANCELLED

    def mark_in_progress(self, start_time=None, start_odometer=None):
        if self.status != PENDING:
            raise ValidationError("Can only start a record that is pending.")
        self.status = IN_PROGRESS
        if start_time is not None:
            self.start_time = start_time
        if start_odometer is not None:
            self.start_odometer = start_odometer
        self.save(update_fields=['status', 'start_time', 'start_odometer', 'updated_at'])

    def mark_completed(self, end_time=None, end_odometer=None):
        if self.status != IN_PROGRESS:
            raise ValidationError("Can only complete a record that is in progress.")
        if end_time is not None:
            self.end_time = end_time
        if end_odometer is not None:
            self.end_odometer = end_odometer
        if self.start_odometer is not None and self.end_odometer is not None \
                and self.end_odometer < self.start_odometer:
            raise ValidationError("End odometer must not be less than start odometer.")
        self.status = COMPLETED
        self.save(update_fields=['status', 'end_time', 'end_odometer', 'updated_at'])

    def mark_cancelled(self):
        if self.status not in [PENDING, IN_PROGRESS]:
            raise ValidationError("Only pending or in-progress records can be cancelled.")
        self.status = CANCELLED
        self.save(update_fields=['status', 'updated_at'])


class TripDetailBase(models.Model):
    """An ordered stop of a record with its arrival and departure clock times."""
    sequence = models.PositiveIntegerField(default=1)
    arrival_time = models.TimeField(null=True, blank=True)
    departure_time = models.TimeField(null=True, blank=True)
    remarks = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    @property
    def stay_minutes(self):
        return minutes_between(self.arrival_time, self.departure_time)

    @property
    def is_filled(self):
        return self.arrival_time is not None and self.departure_time is not None
