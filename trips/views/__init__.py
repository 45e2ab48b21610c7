from .delivery import DeliveryDetailViewSet, DeliveryRecordViewSet
from .transportation import TransportationDetailViewSet, TransportationRecordViewSet
