"""
URL configuration for the care transport service.
"""
from django.contrib import admin
from django.urls import include, path
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

from reports.views import health_check

schema_view = get_schema_view(
    openapi.Info(
        title="Care Transport API",
        default_version='v1',
        description="Drivers, vehicles, routes, riders, trip records and reports for care transport services",
    ),
    public=True,
    permission_classes=[permissions.AllowAny],
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/health/', health_check, name='health_check_get'),
    path('api/accounts/', include('accounts.urls')),
    path('api/fleet/', include('fleet.urls')),
    path('api/routes/', include('routes.urls')),
    path('api/riders/', include('riders.urls')),
    path('api/trips/', include('trips.urls')),
    path('api/reports/', include('reports.urls')),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('swagger.json', schema_view.without_ui(cache_timeout=0), name='schema-json'),
]
