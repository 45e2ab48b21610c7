from .driver import DriverViewSet
from .vehicle import VehicleViewSet
