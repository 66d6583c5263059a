import logging
import os
from datetime import datetime
from pathlib import Path

import pytest

from efecos.core_types import Budget, Driver, FuelLog, Trip, Vehicle
from efecos.utils.logging import EfecosLogger, LogLevel, SimpleFormatter

ASSETS = Path(__file__).parent / "_assets"


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo verbosity changes and console handlers left by setup_logging."""
    os.environ.pop("EFECOS_EFFECTIVE_LOG_LEVEL", None)
    yield
    os.environ.pop("EFECOS_EFFECTIVE_LOG_LEVEL", None)
    EfecosLogger.set_level(LogLevel.NORMAL)
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler.formatter, SimpleFormatter):
            root.removeHandler(handler)


@pytest.fixture
def assets_dir() -> Path:
    return ASSETS


@pytest.fixture
def now() -> datetime:
    """Pinned reference time for window filtering."""
    return datetime(2026, 10, 19, 12, 0, 0)


@pytest.fixture
def vehicle() -> Vehicle:
    return Vehicle(
        id="v1",
        name="Toyota Hilux",
        average_consumption=10.0,
        efficiency_score=85.0,
        monthly_budget=500.0,
        department="Operations",
    )


@pytest.fixture
def driver() -> Driver:
    return Driver(id="d1", name="Sipho Dlamini", efficiency_score=90.0)


@pytest.fixture
def make_log(now):
    """Factory for fuel logs with sensible defaults."""

    def _make(**overrides) -> FuelLog:
        fields = dict(
            id="f1",
            vehicle_id="v1",
            driver_id="d1",
            date=now,
            liters=12.0,
            cost=18.0,
            trip_distance=100.0,
            efficiency=12.0,
            is_anomalous=False,
        )
        fields.update(overrides)
        return FuelLog(**fields)

    return _make


@pytest.fixture
def make_trip(now):
    def _make(**overrides) -> Trip:
        fields = dict(
            id="t1",
            vehicle_id="v1",
            driver_id="d1",
            start_time=now,
            route="Mbabane - Manzini",
            predicted_fuel=14.0,
            actual_fuel=12.0,
            efficiency=12.0,
        )
        fields.update(overrides)
        return Trip(**fields)

    return _make


@pytest.fixture
def budget() -> Budget:
    return Budget(
        id="b1",
        name="Operations Fuel",
        department="Operations",
        monthly_limit=20.0,
        vehicle_ids=("v1",),
    )
