from .driver import DriverSerializer
from .vehicle import VehicleDetailSerializer, VehicleSerializer
