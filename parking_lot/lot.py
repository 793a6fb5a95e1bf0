"""
Slot allocation and query engine for a single parking lot.

This module holds the in-memory model of the lot and every operation that
reads or changes it.  A lot is a linear sequence of numbered slots; slot
numbers start at 1 and are assigned in creation order, so they never change
once handed out, even when the lot is expanded later on.

Notes
-----
* Allocation always picks the *nearest* free slot, i.e. the one with the
  lowest slot number.  Freed slots keep their number and are handed out
  again before any higher-numbered slot.
* Queries that come back empty (``query_by_color``, ``status``) raise a
  ``ParkingError`` instead of returning an empty list.  API clients rely on
  the 404 this produces.
* No operation mutates state before all of its checks have passed, so a
  rejected call always leaves the lot exactly as it was.

The two central classes are ``Slot`` and ``ParkingLot``.  A ``Slot`` is a
single numbered space which may hold a ``Car``; the ``ParkingLot`` owns the
ordered slot collection and guards it with a single lock so that it can be
shared by the worker threads of the API server.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple, Union

from .errors import ErrorKind, ParkingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Car:
    """A car identified by its registration number.

    Attributes
    ----------
    registration_number : str
        Unique identifier of the car (e.g. "KA-01-HH-1234").
    color : str
        Colour of the car, compared case-insensitively in queries.
    """

    registration_number: str
    color: str


@dataclass
class Slot:
    """A single numbered parking space.

    ``occupied`` is derived from ``car`` so the two can never disagree.
    """

    slot_number: int
    car: Optional[Car] = None

    @property
    def occupied(self) -> bool:
        return self.car is not None


class SlotStatus(NamedTuple):
    """One row of the lot status report."""

    slot_number: int
    registration_number: str
    color: str


class QueryMode(str, Enum):
    """What ``ParkingLot.query_by_color`` should return for each match."""

    REGISTRATION_NUMBERS = "registration numbers"
    SLOT_NUMBERS = "slot numbers"


@dataclass(frozen=True)
class LotEvent:
    """Notification passed to the optional observer of a ``ParkingLot``."""

    name: str
    details: Dict[str, Any]


Observer = Callable[[LotEvent], None]


class ParkingLot:
    """Own the slots of one parking lot and serve every operation on them.

    A new lot is empty (``total_slots == 0``); call ``initialize`` or
    ``expand`` before parking cars.  All public methods are synchronous and
    run under one re-entrant lock, which makes the check-then-mark sequence
    of ``allocate`` atomic when the lot is shared between threads.
    """

    def __init__(self, observer: Optional[Observer] = None) -> None:
        """Create an empty lot.

        Parameters
        ----------
        observer : callable, optional
            Called with a ``LotEvent`` after every successful operation.  It
            is a side channel only (e.g. for audit trails) and has no effect
            on the result of the operation.
        """
        self._slots: List[Slot] = []
        self._total_slots = 0
        self._observer = observer
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def total_slots(self) -> int:
        return self._total_slots

    @property
    def slots(self) -> Tuple[Slot, ...]:
        """Snapshot of all slots in slot-number order.

        The slots are copies; changing them does not affect the lot.
        """
        with self._lock:
            return tuple(replace(slot) for slot in self._slots)

    @property
    def available_slots(self) -> int:
        with self._lock:
            return sum(1 for slot in self._slots if not slot.occupied)

    def __len__(self) -> int:
        return self._total_slots

    # ------------------------------------------------------------------
    # Sizing
    # ------------------------------------------------------------------
    def initialize(self, n: int) -> int:
        """Reset the lot to ``n`` empty slots numbered ``1..n``.

        Any car parked before the call is discarded.

        Parameters
        ----------
        n : int
            Number of slots.  Must be greater than zero.

        Returns
        -------
        int
            The new total slot count.
        """
        logger.info("Initializing parking lot with %s slots", n)
        if n <= 0:
            logger.error("Invalid number of slots: %s", n)
            raise ParkingError(ErrorKind.INVALID_SLOT_COUNT, "Number of slots must be greater than 0")
        with self._lock:
            self._slots = [Slot(slot_number=i + 1) for i in range(n)]
            self._total_slots = n
            total = self._total_slots
        logger.info("Successfully initialized parking lot with %s slots", total)
        self._notify("initialized", total_slots=total)
        return total

    def expand(self, m: int) -> int:
        """Append ``m`` empty slots after the existing ones.

        Existing slots and the cars in them are left untouched.  Expanding an
        empty lot is the same as initializing it.

        Parameters
        ----------
        m : int
            Number of slots to add.  Must be greater than zero.

        Returns
        -------
        int
            The new total slot count.
        """
        logger.info("Expanding parking lot by %s slots", m)
        if m <= 0:
            logger.error("Invalid increment slots: %s", m)
            raise ParkingError(ErrorKind.INVALID_SLOT_COUNT, "Increment slots must be greater than 0")
        with self._lock:
            start = self._total_slots
            self._slots.extend(Slot(slot_number=start + i + 1) for i in range(m))
            self._total_slots = start + m
            total = self._total_slots
        logger.info("Successfully expanded parking lot. New total: %s slots", total)
        self._notify("expanded", increment=m, total_slots=total)
        return total

    # ------------------------------------------------------------------
    # Allocation and release
    # ------------------------------------------------------------------
    def allocate(self, car: Car) -> int:
        """Park ``car`` in the nearest free slot.

        Parameters
        ----------
        car : Car
            Car to park.  Both the registration number and the colour must be
            non-empty.

        Returns
        -------
        int
            Number of the allocated slot.

        Raises
        ------
        ParkingError
            ``INVALID_INPUT`` for a missing field, ``ALREADY_PARKED`` if a car
            with the same registration number is in the lot, ``LOT_FULL`` if
            no slot is free.
        """
        if not car.registration_number or not car.color:
            logger.error("Rejected car without registration number or color: %r", car)
            raise ParkingError(ErrorKind.INVALID_INPUT, "Car registration number and color are required")
        with self._lock:
            if self._find_occupied_by(car.registration_number) is not None:
                logger.warning("Car %s is already parked", car.registration_number)
                raise ParkingError(ErrorKind.ALREADY_PARKED, "Car already parked")
            slot = next((s for s in self._slots if not s.occupied), None)
            if slot is None:
                logger.warning("No free slot for car %s", car.registration_number)
                raise ParkingError(ErrorKind.LOT_FULL, "Parking lot is full")
            slot.car = car
            slot_number = slot.slot_number
        logger.info(
            "Car with registration number %s parked in slot %s", car.registration_number, slot_number
        )
        self._notify("allocated", slot_number=slot_number, registration_number=car.registration_number)
        return slot_number

    def release(
        self,
        slot_number: Optional[int] = None,
        registration_number: Optional[str] = None,
    ) -> int:
        """Free a slot, identified by number or by the car parked in it.

        ``slot_number`` takes priority when both are given.

        Parameters
        ----------
        slot_number : int, optional
            Number of the slot to free.
        registration_number : str, optional
            Registration number of the car to remove.

        Returns
        -------
        int
            Number of the freed slot.
        """
        with self._lock:
            if slot_number is not None:
                slot = self._slot_at(slot_number)
                if slot is None:
                    logger.warning("Slot number %s not found", slot_number)
                    raise ParkingError(ErrorKind.SLOT_NOT_FOUND, f"Slot number {slot_number} not found")
                if not slot.occupied:
                    logger.warning("Slot number %s is already empty", slot_number)
                    raise ParkingError(
                        ErrorKind.SLOT_ALREADY_EMPTY, f"Slot number {slot_number} is already empty"
                    )
            elif registration_number:
                slot = self._find_occupied_by(registration_number)
                if slot is None:
                    logger.warning("Car with registration number %s not found", registration_number)
                    raise ParkingError(
                        ErrorKind.CAR_NOT_FOUND,
                        f"Car with registration number {registration_number} not found",
                    )
            else:
                logger.error("Release requested without slot number or registration number")
                raise ParkingError(
                    ErrorKind.MISSING_IDENTIFIER,
                    "Either slot number or car registration number is required",
                )
            released = slot.car
            slot.car = None
            freed = slot.slot_number
        logger.info("Slot %s freed (car %s)", freed, released.registration_number)
        self._notify("released", slot_number=freed, registration_number=released.registration_number)
        return freed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def query_by_color(self, color: str, mode: Union[QueryMode, str]) -> List[str]:
        """List the cars of a given colour.

        Parameters
        ----------
        color : str
            Colour to look for; matched case-insensitively.
        mode : QueryMode or str
            ``"registration numbers"`` to get the registration numbers of the
            matching cars, ``"slot numbers"`` to get their slot numbers (as
            strings).

        Returns
        -------
        list of str
            Matches in ascending slot-number order.  Never empty: no match
            raises ``ParkingError`` with kind ``NOT_FOUND``.
        """
        mode = QueryMode(mode)
        wanted = color.lower()
        with self._lock:
            matches = [s for s in self._slots if s.occupied and s.car.color.lower() == wanted]
            if mode is QueryMode.REGISTRATION_NUMBERS:
                result = [s.car.registration_number for s in matches]
            else:
                result = [str(s.slot_number) for s in matches]
        if not result:
            if mode is QueryMode.REGISTRATION_NUMBERS:
                message = f"No cars found with color {color}"
            else:
                message = f"No slots found with cars of color {color}"
            logger.warning("%s", message)
            raise ParkingError(ErrorKind.NOT_FOUND, message)
        logger.info("Found %s %s with color %s", len(result), mode.value, color)
        self._notify("queried", color=color, mode=mode.value, count=len(result))
        return result

    def find_slot_by_car(self, registration_number: str) -> int:
        """Return the slot number holding the car with ``registration_number``."""
        with self._lock:
            slot = self._find_occupied_by(registration_number)
            slot_number = slot.slot_number if slot is not None else None
        if slot_number is None:
            logger.warning("Car with registration number %s not found", registration_number)
            raise ParkingError(
                ErrorKind.CAR_NOT_FOUND,
                f"Car with registration number {registration_number} not found",
            )
        logger.info(
            "Found slot %s for car with registration number %s", slot_number, registration_number
        )
        self._notify("found", slot_number=slot_number, registration_number=registration_number)
        return slot_number

    def status(self) -> List[SlotStatus]:
        """Report every occupied slot in ascending order.

        Raises ``ParkingError`` with kind ``EMPTY_LOT`` when no car is parked.
        """
        with self._lock:
            rows = [
                SlotStatus(s.slot_number, s.car.registration_number, s.car.color)
                for s in self._slots
                if s.occupied
            ]
        if not rows:
            logger.warning("No cars are currently parked")
            raise ParkingError(ErrorKind.EMPTY_LOT, "No cars are currently parked")
        logger.info("Status requested: %s of %s slots occupied", len(rows), self._total_slots)
        self._notify("status", occupied=len(rows))
        return rows

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _slot_at(self, slot_number: int) -> Optional[Slot]:
        # Numbers are contiguous from 1, so the position is the number - 1.
        if 1 <= slot_number <= len(self._slots):
            return self._slots[slot_number - 1]
        return None

    def _find_occupied_by(self, registration_number: str) -> Optional[Slot]:
        for slot in self._slots:
            if slot.occupied and slot.car.registration_number == registration_number:
                return slot
        return None

    def _notify(self, name: str, **details: Any) -> None:
        if self._observer is None:
            return
        try:
            self._observer(LotEvent(name=name, details=details))
        except Exception:
            # The operation has already been applied; report and carry on.
            logger.exception("Observer failed for %s event", name)
