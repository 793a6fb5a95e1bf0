"""
Error taxonomy for the parking lot.

Every failure raised by :class:`~parking_lot.lot.ParkingLot` is a
``ParkingError`` tagged with an ``ErrorKind``.  The kind decides how the
transport layer reports it: validation-class kinds map to HTTP 400 and
not-found-class kinds map to HTTP 404.  All of them are caller-correctable;
none is retried.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Kinds of failure a lot operation can report.

    Each member carries a display label and the HTTP status code used when
    the error is surfaced through the API.
    """

    INVALID_SLOT_COUNT = ("InvalidSlotCount", 400)
    INVALID_INPUT = ("InvalidInput", 400)
    ALREADY_PARKED = ("AlreadyParked", 400)
    LOT_FULL = ("LotFull", 400)
    SLOT_ALREADY_EMPTY = ("SlotAlreadyEmpty", 400)
    MISSING_IDENTIFIER = ("MissingIdentifier", 400)
    SLOT_NOT_FOUND = ("SlotNotFound", 404)
    CAR_NOT_FOUND = ("CarNotFound", 404)
    NOT_FOUND = ("NotFound", 404)
    EMPTY_LOT = ("EmptyLot", 404)

    def __init__(self, label: str, status_code: int) -> None:
        self.label = label
        self.status_code = status_code


class ParkingError(Exception):
    """Raised when a lot operation is rejected.

    Parameters
    ----------
    kind : ErrorKind
        Category of the failure.
    message : str
        Human readable explanation, returned verbatim to API callers.
    """

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def __repr__(self) -> str:
        return f"ParkingError({self.kind.label}, {self.message!r})"
