"""Top‑level package for the parking lot service.

The slot allocation engine lives in :mod:`parking_lot.lot` and has no
dependency on the web stack; the FastAPI application in
:mod:`parking_lot.app` is only imported on demand.
"""

from .errors import ErrorKind, ParkingError
from .lot import Car, LotEvent, ParkingLot, QueryMode, Slot, SlotStatus

__all__ = [
    "Car",
    "ErrorKind",
    "LotEvent",
    "ParkingError",
    "ParkingLot",
    "QueryMode",
    "Slot",
    "SlotStatus",
]
