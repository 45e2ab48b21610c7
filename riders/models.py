from django.db import models, transaction


class Rider(models.Model):
    """
    A person using the transport service (stored in the ``users`` table).
    """
    user_no = models.CharField(max_length=20, unique=True)
    name = models.CharField(max_length=100)
    phone = models.CharField(max_length=30, blank=True)
    emergency_contact = models.CharField(max_length=100, blank=True)
    emergency_phone = models.CharField(max_length=30, blank=True)
    wheelchair_user = models.BooleanField(default=False)
    special_notes = models.TextField(blank=True, help_text="Medical or assistance notes")

    management_code = models.ForeignKey(
        'accounts.ManagementCode', on_delete=models.CASCADE, related_name='riders'
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        ordering = ['user_no']

    def __str__(self):
        return f"{self.user_no} ({self.name})"

    @property
    def primary_address(self):
        return self.addresses.filter(is_primary=True).first()


class RiderAddress(models.Model):
    ADDRESS_TYPE_CHOICES = [
        ('home', 'Home'),
        ('school', 'School'),
        ('work', 'Work'),
        ('other', 'Other')
    ]

    rider = models.ForeignKey(Rider, on_delete=models.CASCADE, related_name='addresses')
    address_type = models.CharField(max_length=20, choices=ADDRESS_TYPE_CHOICES, default='home')
    address = models.CharField(max_length=255)
    is_primary = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user_addresses'
        ordering = ['-is_primary', 'id']
        verbose_name_plural = "Rider Addresses"

    def __str__(self):
        return f"{self.rider.name}: {self.address} ({self.address_type})"

    def save(self, *args, **kwargs):
        # At most one primary address per rider; the first address becomes primary
        with transaction.atomic():
            if not self.is_primary and not RiderAddress.objects.filter(rider_id=self.rider_id).exclude(pk=self.pk).exists():
                self.is_primary = True
            if self.is_primary:
                RiderAddress.objects.filter(rider_id=self.rider_id, is_primary=True).exclude(pk=self.pk).update(
                    is_primary=False
                )
            super().save(*args, **kwargs)
