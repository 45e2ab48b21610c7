from .base import CANCELLED, COMPLETED, IN_PROGRESS, PENDING
from .delivery import DeliveryDetail, DeliveryRecord
from .transportation import TransportationDetail, TransportationRecord

RECORD_MODELS = {
    DeliveryRecord.RECORD_TYPE: DeliveryRecord,
    TransportationRecord.RECORD_TYPE: TransportationRecord,
}
