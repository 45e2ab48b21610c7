from django.contrib import admin

from .models import Admin, DriverSession, ManagementCode, Organization


class ManagementCodeInline(admin.TabularInline):
    model = ManagementCode
    extra = 0
    readonly_fields = ('code', 'created_at')


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ('name', 'representative_name', 'phone', 'email', 'created_at')
    search_fields = ('name', 'representative_name', 'license_number')
    readonly_fields = ('created_at', 'updated_at')
    inlines = [ManagementCodeInline]


@admin.register(ManagementCode)
class ManagementCodeAdmin(admin.ModelAdmin):
    list_display = ('code', 'name', 'organization', 'is_active', 'created_at')
    list_filter = ('is_active',)
    search_fields = ('code', 'name', 'organization__name')
    readonly_fields = ('code', 'created_at', 'updated_at')


@admin.register(Admin)
class AdminProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'organization', 'created_at')
    search_fields = ('user__username', 'organization__name')
    raw_id_fields = ('user',)


@admin.register(DriverSession)
class DriverSessionAdmin(admin.ModelAdmin):
    list_display = ('driver', 'vehicle', 'route', 'management_code', 'created_at', 'ended_at')
    list_filter = ('ended_at',)
    search_fields = ('driver__name', 'driver__employee_no', 'vehicle__vehicle_no')
    readonly_fields = ('token', 'created_at', 'updated_at')
    raw_id_fields = ('driver', 'vehicle', 'route')
    date_hierarchy = 'created_at'
