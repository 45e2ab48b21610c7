from django.contrib import admin

from .models import DeliveryDetail, DeliveryRecord, TransportationDetail, TransportationRecord


class DeliveryDetailInline(admin.TabularInline):
    model = DeliveryDetail
    extra = 0
    fields = ('sequence', 'destination', 'arrival_time', 'departure_time', 'has_invoice', 'time_slot', 'remarks')


class TransportationDetailInline(admin.TabularInline):
    model = TransportationDetail
    extra = 0
    fields = ('sequence', 'rider', 'pickup_time', 'arrival_time', 'departure_time', 'drop_off_time', 'remarks')
    raw_id_fields = ('rider',)


@admin.register(DeliveryRecord)
class DeliveryRecordAdmin(admin.ModelAdmin):
    list_display = (
        'delivery_date', 'driver', 'vehicle', 'route', 'start_time', 'end_time',
        'start_odometer', 'end_odometer', 'status'
    )
    list_filter = ('status', 'delivery_date', 'gas_card_used')
    search_fields = ('driver__name', 'vehicle__vehicle_no', 'route__route_name')
    readonly_fields = ('created_at', 'updated_at')
    date_hierarchy = 'delivery_date'
    inlines = [DeliveryDetailInline]


@admin.register(TransportationRecord)
class TransportationRecordAdmin(admin.ModelAdmin):
    list_display = (
        'transportation_date', 'driver', 'vehicle', 'transportation_type', 'passenger_count',
        'start_time', 'end_time', 'status'
    )
    list_filter = ('status', 'transportation_type', 'trip_type')
    search_fields = ('driver__name', 'vehicle__vehicle_no', 'special_notes')
    readonly_fields = ('created_at', 'updated_at')
    date_hierarchy = 'transportation_date'
    inlines = [TransportationDetailInline]
