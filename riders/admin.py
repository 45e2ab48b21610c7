from django.contrib import admin

from .models import Rider, RiderAddress


class RiderAddressInline(admin.TabularInline):
    model = RiderAddress
    extra = 0


@admin.register(Rider)
class RiderAdmin(admin.ModelAdmin):
    list_display = ('user_no', 'name', 'phone', 'wheelchair_user', 'management_code', 'is_active')
    list_filter = ('wheelchair_user', 'is_active')
    search_fields = ('user_no', 'name', 'phone', 'emergency_contact')
    readonly_fields = ('created_at', 'updated_at')
    inlines = [RiderAddressInline]
