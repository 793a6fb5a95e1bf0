"""
REST API for the parking lot.

This module exposes the slot allocation engine of :mod:`parking_lot.lot`
over HTTP using FastAPI.  The API endpoints are documented using OpenAPI
automatically by FastAPI.  To run the API server, install the package and
execute ``python -m parking_lot`` or start uvicorn directly.

Example
-------
```
pip install -e .
uvicorn parking_lot.app:app --reload
```

Endpoints
---------
* ``POST /parking/parking_lot``: Create the lot with ``no_of_slot`` slots.
* ``PATCH /parking/parking_lot``: Add ``increment_slot`` slots to the lot.
* ``POST /parking/park``: Park a car in the nearest free slot.
* ``GET /parking/registration_numbers/{color}``: Registration numbers of the
  cars with a given colour.
* ``GET /parking/slot_numbers/{color}``: Slot numbers of the cars with a given
  colour.
* ``GET /parking/slots/{registration_number}``: Slot of a given car.
* ``POST /parking/clear``: Free a slot by number or by registration number.
* ``GET /parking/status``: All occupied slots.
* ``GET /health``: Liveness probe.

Every rejected operation is answered with the status code of its error kind
(400 or 404) and a body of the form ``{"detail": ..., "error": ...}``.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.requests import Request

from .config import Settings, configure_logging, get_settings
from .errors import ParkingError
from .lot import Car, ParkingLot, QueryMode

logger = logging.getLogger(__name__)


# Request models
class InitializeRequest(BaseModel):
    no_of_slot: int


class ExpandRequest(BaseModel):
    increment_slot: int


class ParkRequest(BaseModel):
    # Optional so that a missing field is reported by the lot as InvalidInput
    car_reg_no: Optional[str] = None
    car_color: Optional[str] = None


class ClearRequest(BaseModel):
    slot_number: Optional[int] = None
    car_registration_no: Optional[str] = None


# Response models
class TotalSlotResponse(BaseModel):
    total_slot: int


class AllocationResponse(BaseModel):
    allocated_slot_number: int


class SlotNumberResponse(BaseModel):
    slot_number: int


class FreedSlotResponse(BaseModel):
    freed_slot_number: int


class StatusEntry(BaseModel):
    slot_no: int
    registration_no: str
    color: str


class HealthResponse(BaseModel):
    status: str
    total_slots: int
    available_slots: int


def get_lot(request: Request) -> ParkingLot:
    """Return the lot owned by the application serving ``request``."""
    return request.app.state.lot


router = APIRouter(prefix="/parking", tags=["parking"])


@router.post("/parking_lot", status_code=201, response_model=TotalSlotResponse)
def initialize_parking_lot(body: InitializeRequest, lot: ParkingLot = Depends(get_lot)) -> TotalSlotResponse:
    return TotalSlotResponse(total_slot=lot.initialize(body.no_of_slot))


@router.patch("/parking_lot", response_model=TotalSlotResponse)
def expand_parking_lot(body: ExpandRequest, lot: ParkingLot = Depends(get_lot)) -> TotalSlotResponse:
    return TotalSlotResponse(total_slot=lot.expand(body.increment_slot))


@router.post("/park", status_code=201, response_model=AllocationResponse)
def park_car(body: ParkRequest, lot: ParkingLot = Depends(get_lot)) -> AllocationResponse:
    """Park a car in the lowest-numbered free slot."""
    car = Car(registration_number=body.car_reg_no or "", color=body.car_color or "")
    return AllocationResponse(allocated_slot_number=lot.allocate(car))


@router.get("/registration_numbers/{color}", response_model=List[str])
def registration_numbers_by_color(color: str, lot: ParkingLot = Depends(get_lot)) -> List[str]:
    return lot.query_by_color(color, QueryMode.REGISTRATION_NUMBERS)


@router.get("/slot_numbers/{color}", response_model=List[str])
def slot_numbers_by_color(color: str, lot: ParkingLot = Depends(get_lot)) -> List[str]:
    return lot.query_by_color(color, QueryMode.SLOT_NUMBERS)


@router.get("/slots/{registration_number}", response_model=SlotNumberResponse)
def slot_by_registration_number(
    registration_number: str, lot: ParkingLot = Depends(get_lot)
) -> SlotNumberResponse:
    return SlotNumberResponse(slot_number=lot.find_slot_by_car(registration_number))


@router.post("/clear", response_model=FreedSlotResponse)
def clear_slot(body: ClearRequest, lot: ParkingLot = Depends(get_lot)) -> FreedSlotResponse:
    """Free a slot.

    ``slot_number`` wins over ``car_registration_no`` when both are sent.
    """
    freed = lot.release(slot_number=body.slot_number, registration_number=body.car_registration_no)
    return FreedSlotResponse(freed_slot_number=freed)


@router.get("/status", response_model=List[StatusEntry])
def parking_status(lot: ParkingLot = Depends(get_lot)) -> List[StatusEntry]:
    return [
        StatusEntry(slot_no=row.slot_number, registration_no=row.registration_number, color=row.color)
        for row in lot.status()
    ]


async def parking_error_handler(request: Request, exc: ParkingError) -> JSONResponse:
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind.label},
    )


def create_app(settings: Optional[Settings] = None, lot: Optional[ParkingLot] = None) -> FastAPI:
    """Build a FastAPI application serving one parking lot.

    Parameters
    ----------
    settings : Settings, optional
        Application settings.  Defaults to ``get_settings()``.
    lot : ParkingLot, optional
        Lot to serve.  A new empty lot is created if omitted; it is
        initialized with ``settings.initial_slots`` slots when that is
        positive.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    if lot is None:
        lot = ParkingLot()
        if settings.initial_slots > 0:
            lot.initialize(settings.initial_slots)

    app = FastAPI(title=settings.app_title, version=settings.app_version)
    app.state.lot = lot
    app.include_router(router)
    app.add_exception_handler(ParkingError, parking_error_handler)

    @app.get("/health", response_model=HealthResponse)
    def health(lot: ParkingLot = Depends(get_lot)) -> HealthResponse:
        return HealthResponse(status="ok", total_slots=lot.total_slots, available_slots=lot.available_slots)

    logger.info("%s %s ready with %s slots", settings.app_title, settings.app_version, lot.total_slots)
    return app


app = create_app()
