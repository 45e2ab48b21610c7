from .core import Driver, Vehicle
