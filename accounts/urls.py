from django.urls import include, path
from rest_framework.routers import DefaultRouter

from accounts.views import (
    AdminLoginView,
    AdminLogoutView,
    AdminRegisterView,
    DriverLoginView,
    DriverLogoutView,
    DriverSessionView,
    ManagementCodeViewSet,
    OrganizationView,
)

router = DefaultRouter()
router.register(r'management-codes', ManagementCodeViewSet)

urlpatterns = [
    path('driver/login/', DriverLoginView.as_view(), name='driver_login'),
    path('driver/session/', DriverSessionView.as_view(), name='driver_session'),
    path('driver/logout/', DriverLogoutView.as_view(), name='driver_logout'),
    path('admin/register/', AdminRegisterView.as_view(), name='admin_register'),
    path('admin/login/', AdminLoginView.as_view(), name='admin_login'),
    path('admin/logout/', AdminLogoutView.as_view(), name='admin_logout'),
    path('organization/', OrganizationView.as_view(), name='organization'),
    path('', include(router.urls)),
]
