from django.contrib import admin

from .models import Destination, Route


class DestinationInline(admin.TabularInline):
    model = Destination
    extra = 0
    fields = ('display_order', 'name', 'address', 'destination_type', 'is_active')


@admin.register(Route)
class RouteAdmin(admin.ModelAdmin):
    list_display = ('route_code', 'route_name', 'start_location', 'end_location', 'estimated_time', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('route_code', 'route_name')
    readonly_fields = ('created_at', 'updated_at')
    inlines = [DestinationInline]


@admin.register(Destination)
class DestinationAdmin(admin.ModelAdmin):
    list_display = ('name', 'route', 'display_order', 'destination_type', 'is_active')
    list_filter = ('destination_type', 'is_active')
    search_fields = ('name', 'address', 'route__route_name')
