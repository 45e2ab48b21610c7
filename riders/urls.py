from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import RiderAddressViewSet, RiderViewSet

router = DefaultRouter()
router.register(r'riders', RiderViewSet)
router.register(r'addresses', RiderAddressViewSet)

urlpatterns = [
    path('', include(router.urls)),
]
