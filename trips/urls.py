from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    DeliveryDetailViewSet,
    DeliveryRecordViewSet,
    TransportationDetailViewSet,
    TransportationRecordViewSet,
)

router = DefaultRouter()
router.register(r'delivery-records', DeliveryRecordViewSet)
router.register(r'delivery-details', DeliveryDetailViewSet)
router.register(r'transportation-records', TransportationRecordViewSet)
router.register(r'transportation-details', TransportationDetailViewSet)

urlpatterns = [
    path('', include(router.urls)),
]
