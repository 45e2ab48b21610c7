from django.contrib import admin

from .models import Driver, Vehicle


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = (
        'vehicle_no', 'vehicle_name', 'vehicle_type', 'capacity', 'wheelchair_accessible',
        'current_odometer', 'last_oil_change_odometer', 'oil_change_status', 'is_active'
    )
    list_filter = ('vehicle_type', 'fuel_type', 'wheelchair_accessible', 'is_active')
    search_fields = ('vehicle_no', 'vehicle_name')
    readonly_fields = ('created_at', 'updated_at')

    fieldsets = (
        ('Basic Information', {
            'fields': ('vehicle_no', 'vehicle_name', 'vehicle_type', 'management_code', 'is_active')
        }),
        ('Specifications', {
            'fields': ('capacity', 'fuel_type', 'wheelchair_accessible')
        }),
        ('Odometer', {
            'fields': ('current_odometer', 'last_oil_change_odometer')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(Driver)
class DriverAdmin(admin.ModelAdmin):
    list_display = ('employee_no', 'name', 'email', 'management_code', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('employee_no', 'name', 'email')
    readonly_fields = ('created_at', 'updated_at')
