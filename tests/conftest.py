"""Pytest fixtures for the parking lot tests."""

import pytest
from fastapi.testclient import TestClient

from parking_lot.app import create_app
from parking_lot.config import Settings
from parking_lot.lot import Car, ParkingLot


@pytest.fixture
def lot():
    """A fresh, empty lot for each test."""
    return ParkingLot()


@pytest.fixture
def three_slot_lot(lot):
    lot.initialize(3)
    return lot


@pytest.fixture
def red_car():
    return Car(registration_number="KA-01-HH-1234", color="Red")


@pytest.fixture
def client():
    """Test client over an app with its own empty lot."""
    app = create_app(settings=Settings(initial_slots=0), lot=ParkingLot())
    with TestClient(app) as client:
        yield client
