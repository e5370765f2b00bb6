"""
Mock vehicle and driver directory.

In production, this would call the backend's ``/vehicles`` and
``/drivers/company`` endpoints. Records are kept in the backend's wire
shape and validated into ``Vehicle`` / ``Driver`` models on the way out.
"""

import copy
import logging
from typing import Any, Optional

from carrental.schemas.resource_schema import Driver, Vehicle

logger = logging.getLogger(__name__)

_SEED_VEHICLES: list[dict[str, Any]] = [
    {
        "_id": "veh-corolla-01",
        "company": {"_id": "co-lahore-rides"},
        "manufacturer": "Toyota",
        "model": "Corolla",
        "numberPlate": "LEA-1234",
        "rent": 3000,
        "availability": {
            "days": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
            "startTime": "08:00",
            "endTime": "20:00",
        },
        "blackoutPeriods": [{"from": "2024-06-20", "to": "2024-06-22"}],
    },
    {
        "_id": "veh-civic-02",
        "company": {"_id": "co-lahore-rides"},
        "manufacturer": "Honda",
        "model": "Civic",
        "numberPlate": "LEB-5678",
        "rent": 4500,
    },
]

_SEED_DRIVERS: list[dict[str, Any]] = [
    {
        "_id": "drv-ali-01",
        "company": "co-lahore-rides",
        "name": "Ali Raza",
        "baseDailyRate": 2000,
        "baseHourlyRate": 150,
        "availability": {
            "days": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"],
            "startTime": "07:00",
            "endTime": "22:00",
        },
        "blackoutDates": [],
    },
    {
        "_id": "drv-sana-02",
        "company": "co-lahore-rides",
        "name": "Sana Malik",
        "baseDailyRate": 2200,
        "baseHourlyRate": 180,
        "availability": {
            "days": ["Saturday", "Sunday"],
            "startTime": "09:00",
            "endTime": "18:00",
        },
    },
    {
        "_id": "drv-usman-03",
        "company": "co-lahore-rides",
        "name": "Usman Tariq",
        "baseDailyRate": 1800,
        "baseHourlyRate": 120,
        "blackoutDates": ["2024-06-11"],
    },
]

_vehicles: dict[str, dict[str, Any]] = {}
_drivers: dict[str, dict[str, Any]] = {}


def add_vehicle(raw: dict[str, Any]) -> Vehicle:
    """Validate and store a vehicle record."""
    vehicle = Vehicle.model_validate(raw)
    _vehicles[vehicle.id] = copy.deepcopy(raw)
    logger.debug("Vehicle registered: %s", vehicle.id)
    return vehicle


def add_driver(raw: dict[str, Any]) -> Driver:
    """Validate and store a driver record."""
    driver = Driver.model_validate(raw)
    _drivers[driver.id] = copy.deepcopy(raw)
    logger.debug("Driver registered: %s", driver.id)
    return driver


def get_vehicle(vehicle_id: str) -> Optional[Vehicle]:
    """Look up a vehicle by id. Returns None if not found."""
    raw = _vehicles.get(vehicle_id)
    return Vehicle.model_validate(raw) if raw is not None else None


def get_driver(driver_id: str) -> Optional[Driver]:
    """Look up a driver by id. Returns None if not found."""
    raw = _drivers.get(driver_id)
    return Driver.model_validate(raw) if raw is not None else None


def list_company_drivers(company_id: str) -> list[Driver]:
    """All drivers belonging to a rental company, in registration order."""
    drivers = [Driver.model_validate(raw) for raw in _drivers.values()]
    return [d for d in drivers if d.company_id == company_id]


def reset() -> None:
    """Restore the seeded directory. Used by test fixtures for isolation."""
    _vehicles.clear()
    _drivers.clear()
    for raw in _SEED_VEHICLES:
        add_vehicle(raw)
    for raw in _SEED_DRIVERS:
        add_driver(raw)


reset()
