"""Loading fleet record collections from exported files.

Two layouts are understood:

* a JSON document with ``vehicles``, ``drivers``, ``fuelLogs``, ``trips`` and
  ``budgets`` arrays, as produced by exporting the Firestore collections;
* a directory of CSV files named ``vehicles.csv``, ``drivers.csv``,
  ``fuel_logs.csv``, ``trips.csv`` and ``budgets.csv``.

Missing collections load as empty lists.
"""

import json
from pathlib import Path
from typing import Any, Callable

import pandas as pd

from efecos.core_types import Budget, Driver, FleetData, FuelLog, Trip, Vehicle
from efecos.utils.logging import EfecosLogger

logger = EfecosLogger.get_logger(__name__)

# attribute -> (JSON keys, CSV file name, record parser)
COLLECTIONS: dict[str, tuple[tuple[str, ...], str, Callable[[dict], Any]]] = {
    "vehicles": (("vehicles",), "vehicles.csv", Vehicle.from_dict),
    "drivers": (("drivers",), "drivers.csv", Driver.from_dict),
    "fuel_logs": (("fuelLogs", "fuel_logs"), "fuel_logs.csv", FuelLog.from_dict),
    "trips": (("trips",), "trips.csv", Trip.from_dict),
    "budgets": (("budgets",), "budgets.csv", Budget.from_dict),
}


def data_dir() -> Path:
    """Directory holding the bundled sample dataset."""
    return Path(__file__).resolve().parent.parent / "data"


def _parse_records(name: str, rows: list[dict], parser) -> list:
    records = []
    for index, row in enumerate(rows):
        try:
            records.append(parser(row))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid {name} record at index {index}: {exc}") from exc
    return records


def _load_json(path: Path) -> FleetData:
    try:
        with path.open(encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Error parsing fleet data {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Fleet data {path} must be a JSON object of collections")

    collections = {}
    for attr, (keys, _, parser) in COLLECTIONS.items():
        rows = next((raw[k] for k in keys if k in raw), [])
        collections[attr] = _parse_records(attr, rows or [], parser)
    return FleetData(**collections)


def _load_csv_dir(directory: Path) -> FleetData:
    collections = {}
    for attr, (_, filename, parser) in COLLECTIONS.items():
        csv_path = directory / filename
        if not csv_path.exists():
            collections[attr] = []
            continue
        # Keep ids as strings; pandas would otherwise turn "007" into 7
        df = pd.read_csv(
            csv_path,
            dtype={
                "id": str,
                "vehicle_id": str,
                "driver_id": str,
                "vehicleId": str,
                "driverId": str,
                "vehicle_ids": str,
                "vehicleIds": str,
            },
        )
        collections[attr] = _parse_records(attr, df.to_dict(orient="records"), parser)
    return FleetData(**collections)


def load_fleet_data(path: str | Path) -> FleetData:
    """Load every record collection from a JSON file or a CSV directory."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Fleet data not found: {path}")

    data = _load_csv_dir(path) if path.is_dir() else _load_json(path)
    logger.debug(
        "Loaded %d vehicles, %d drivers, %d fuel logs, %d trips, %d budgets from %s",
        len(data.vehicles),
        len(data.drivers),
        len(data.fuel_logs),
        len(data.trips),
        len(data.budgets),
        path,
    )
    return data

