"""
Import all models here so that:
1. Base.metadata.create_all() sees every table
2. Relationships between models resolve correctly

Order matters — import parent tables before child tables.
"""

from roombook.models.device import Device
from roombook.models.auditory import Auditory
from roombook.models.booking import Booking

__all__ = [
    "Device",
    "Auditory",
    "Booking",
]
