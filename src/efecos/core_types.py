from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

import pandas as pd


class TrendView(Enum):
    """Grouping granularity for fuel and cost trends."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: "str | TrendView") -> "TrendView":
        """Map a UI string onto a view; anything unrecognised groups monthly."""
        if isinstance(value, TrendView):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MONTHLY


class BudgetLevel(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


def parse_datetime(value: Any) -> Optional[datetime]:
    """Coerce ISO strings, pandas timestamps and datetimes to ``datetime``."""
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        return pd.Timestamp(value).to_pydatetime()
    if pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, datetime):
        return value
    return pd.Timestamp(value).to_pydatetime()


def _get(row: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First non-missing value among ``keys`` (snake_case or camelCase)."""
    for key in keys:
        if key in row:
            value = row[key]
            if value is None:
                continue
            if isinstance(value, float) and pd.isna(value):
                continue
            return value
    return default


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "y"}
    return bool(value)


def _as_id_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        # CSV cells hold ids separated by ';' or '|'
        parts = value.replace("|", ";").split(";")
        return [p.strip() for p in parts if p.strip()]
    if isinstance(value, (list, tuple, set)):
        return [str(v) for v in value]
    # a single numeric id
    return [str(value)]


# ---------------------------------------------------------------------------
# Domain records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Vehicle:
    """A fleet vehicle as stored by the persistence layer."""

    id: str
    name: str
    average_consumption: float = 0.0  # L/100km baseline
    efficiency_score: float = 0.0  # 0-100
    monthly_budget: float = 0.0
    current_spend: float = 0.0
    department: str = ""
    status: str = "active"  # active | maintenance | inactive
    make: str = ""
    model: str = ""
    license_plate: str = ""
    fuel_type: str = ""

    @staticmethod
    def from_dict(row: Dict[str, Any]) -> "Vehicle":
        return Vehicle(
            id=str(_get(row, "id")),
            name=str(_get(row, "name", default="")),
            average_consumption=float(
                _get(row, "average_consumption", "averageConsumption", default=0.0)
            ),
            efficiency_score=float(
                _get(row, "efficiency_score", "efficiencyScore", default=0.0)
            ),
            monthly_budget=float(
                _get(row, "monthly_budget", "monthlyBudget", default=0.0)
            ),
            current_spend=float(_get(row, "current_spend", "currentSpend", default=0.0)),
            department=str(_get(row, "department", default="")),
            status=str(_get(row, "status", default="active")),
            make=str(_get(row, "make", default="")),
            model=str(_get(row, "model", default="")),
            license_plate=str(_get(row, "license_plate", "licensePlate", default="")),
            fuel_type=str(_get(row, "fuel_type", "fuelType", default="")),
        )


@dataclass(frozen=True)
class Driver:
    id: str
    name: str
    efficiency_score: float = 0.0
    total_trips: int = 0
    total_distance: float = 0.0
    total_fuel_used: float = 0.0
    department: str = ""

    @staticmethod
    def from_dict(row: Dict[str, Any]) -> "Driver":
        return Driver(
            id=str(_get(row, "id")),
            name=str(_get(row, "name", default="")),
            efficiency_score=float(
                _get(row, "efficiency_score", "efficiencyScore", default=0.0)
            ),
            total_trips=int(_get(row, "total_trips", "totalTrips", default=0)),
            total_distance=float(
                _get(row, "total_distance", "totalDistance", default=0.0)
            ),
            total_fuel_used=float(
                _get(row, "total_fuel_used", "totalFuelUsed", default=0.0)
            ),
            department=str(_get(row, "department", default="")),
        )


@dataclass(frozen=True)
class FuelLog:
    """One fueling event; ``efficiency`` is the L/100km observed for it."""

    id: str
    vehicle_id: str
    driver_id: str
    date: datetime
    liters: float
    cost: float
    trip_distance: float = 0.0
    efficiency: float = 0.0
    is_anomalous: bool = False
    anomaly_reason: Optional[str] = None
    tag: Optional[str] = None
    station: Optional[str] = None
    route: Optional[str] = None

    @staticmethod
    def from_dict(row: Dict[str, Any]) -> "FuelLog":
        return FuelLog(
            id=str(_get(row, "id", default="")),
            vehicle_id=str(_get(row, "vehicle_id", "vehicleId", default="")),
            driver_id=str(_get(row, "driver_id", "driverId", default="")),
            date=parse_datetime(_get(row, "date")),
            liters=float(_get(row, "liters", default=0.0)),
            cost=float(_get(row, "cost", "totalCost", default=0.0)),
            trip_distance=float(
                _get(row, "trip_distance", "tripDistance", default=0.0)
            ),
            efficiency=float(_get(row, "efficiency", default=0.0)),
            is_anomalous=_as_bool(
                _get(row, "is_anomalous", "isAnomalous", default=False)
            ),
            anomaly_reason=_get(row, "anomaly_reason", "anomalyReason"),
            tag=_get(row, "tag"),
            station=_get(row, "station"),
            route=_get(row, "route"),
        )

    @staticmethod
    def from_dataframe(df: pd.DataFrame) -> List["FuelLog"]:
        """Convert DataFrame rows to FuelLog objects."""
        return [FuelLog.from_dict(row) for row in df.to_dict(orient="records")]

    @staticmethod
    def to_dataframe(logs: List["FuelLog"]) -> pd.DataFrame:
        """Convert FuelLog objects to a DataFrame with one column per field."""
        columns = [f for f in FuelLog.__dataclass_fields__]
        if len(logs) == 0:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame([asdict(log) for log in logs], columns=columns)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat() if self.date else None
        return data


@dataclass(frozen=True)
class Trip:
    id: str
    vehicle_id: str
    driver_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    distance: float = 0.0
    fuel_used: float = 0.0
    cost: float = 0.0
    status: str = "Completed"
    predicted_fuel: float = 0.0
    actual_fuel: float = 0.0
    route: str = ""
    tag: Optional[str] = None
    efficiency: float = 0.0

    @staticmethod
    def from_dict(row: Dict[str, Any]) -> "Trip":
        return Trip(
            id=str(_get(row, "id", default="")),
            vehicle_id=str(_get(row, "vehicle_id", "vehicleId", default="")),
            driver_id=str(_get(row, "driver_id", "driverId", default="")),
            start_time=parse_datetime(_get(row, "start_time", "startTime")),
            end_time=parse_datetime(_get(row, "end_time", "endTime")),
            distance=float(_get(row, "distance", default=0.0)),
            fuel_used=float(_get(row, "fuel_used", "fuelUsed", default=0.0)),
            cost=float(_get(row, "cost", default=0.0)),
            status=str(_get(row, "status", default="Completed")),
            predicted_fuel=float(
                _get(row, "predicted_fuel", "predictedFuel", default=0.0)
            ),
            actual_fuel=float(_get(row, "actual_fuel", "actualFuel", default=0.0)),
            route=str(_get(row, "route", default="")),
            tag=_get(row, "tag"),
            efficiency=float(_get(row, "efficiency", default=0.0)),
        )


@dataclass(frozen=True)
class Budget:
    id: str
    name: str
    department: str
    period: str = "monthly"  # monthly | weekly
    monthly_limit: float = 0.0
    weekly_limit: Optional[float] = None
    current_spend: float = 0.0
    vehicle_ids: tuple = ()
    alert_threshold: float = 80.0

    @staticmethod
    def from_dict(row: Dict[str, Any]) -> "Budget":
        weekly = _get(row, "weekly_limit", "weeklyLimit")
        return Budget(
            id=str(_get(row, "id", default="")),
            name=str(_get(row, "name", default="")),
            department=str(_get(row, "department", default="")),
            period=str(_get(row, "period", default="monthly")),
            monthly_limit=float(
                _get(row, "monthly_limit", "monthlyLimit", default=0.0)
            ),
            weekly_limit=float(weekly) if weekly is not None else None,
            current_spend=float(_get(row, "current_spend", "currentSpend", default=0.0)),
            vehicle_ids=tuple(
                _as_id_list(_get(row, "vehicle_ids", "vehicleIds", default=[]))
            ),
            alert_threshold=float(
                _get(row, "alert_threshold", "alertThreshold", default=80.0)
            ),
        )


@dataclass
class FleetData:
    """The record collections supplied by the persistence layer."""

    vehicles: List[Vehicle] = field(default_factory=list)
    drivers: List[Driver] = field(default_factory=list)
    fuel_logs: List[FuelLog] = field(default_factory=list)
    trips: List[Trip] = field(default_factory=list)
    budgets: List[Budget] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Derived records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BudgetStatus:
    status: BudgetLevel
    percentage: float
    remaining: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "percentage": self.percentage,
            "remaining": self.remaining,
        }


@dataclass(frozen=True)
class TrendPoint:
    period: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"period": self.period, "value": self.value}


@dataclass(frozen=True)
class VehiclePerformance:
    vehicle_id: str
    name: str
    fuel_used: float
    cost: float
    efficiency: float
    trips: int
    status: str
    avg_cost_per_trip: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DriverPerformance:
    driver_id: str
    name: str
    fuel_used: float
    cost: float
    efficiency: float
    trips: int
    avg_cost_per_trip: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DepartmentStat:
    department: str
    fuel_used: float
    vehicle_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BudgetReport:
    budget_id: str
    name: str
    department: str
    current_spend: float
    limit: float
    percentage: float
    status: BudgetLevel
    remaining: float

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass(frozen=True)
class AnomalyRecord:
    """A fuel log enriched with the names of its vehicle and driver."""

    log: FuelLog
    vehicle_name: str
    driver_name: str

    def to_dict(self) -> Dict[str, Any]:
        data = self.log.to_dict()
        data["vehicle_name"] = self.vehicle_name
        data["driver_name"] = self.driver_name
        return data


SUMMARY_FIELDS = (
    "total_fuel_used",
    "total_cost",
    "average_efficiency",
    "total_trips",
    "anomalies_count",
)


@dataclass(frozen=True)
class AnalyticsData:
    total_fuel_used: float = 0.0
    total_cost: float = 0.0
    average_efficiency: float = 0.0
    total_trips: int = 0
    anomalies_count: int = 0
    fuel_trends: List[TrendPoint] = field(default_factory=list)
    cost_trends: List[TrendPoint] = field(default_factory=list)
    vehicle_performance: List[VehiclePerformance] = field(default_factory=list)
    driver_performance: List[DriverPerformance] = field(default_factory=list)
    department_stats: List[DepartmentStat] = field(default_factory=list)
    budget_status: List[BudgetReport] = field(default_factory=list)
    recent_anomalies: List[AnomalyRecord] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "AnalyticsData":
        return cls()

    def summary(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in SUMMARY_FIELDS}

    def to_dict(self) -> Dict[str, Any]:
        data = self.summary()
        data.update(
            {
                "fuel_trends": [p.to_dict() for p in self.fuel_trends],
                "cost_trends": [p.to_dict() for p in self.cost_trends],
                "vehicle_performance": [v.to_dict() for v in self.vehicle_performance],
                "driver_performance": [d.to_dict() for d in self.driver_performance],
                "department_stats": [d.to_dict() for d in self.department_stats],
                "budget_status": [b.to_dict() for b in self.budget_status],
                "recent_anomalies": [a.to_dict() for a in self.recent_anomalies],
            }
        )
        return data


@dataclass(frozen=True)
class EfficiencyMetrics:
    total_vehicles: int
    active_vehicles: int
    utilization_rate: float
    total_fuel_used: float
    total_cost: float
    average_efficiency: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SavingsMetrics:
    total_savings: float
    total_liters_saved: float
    average_savings_per_trip: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DashboardKPIs:
    monthly_fuel_used: float
    projected_spend: float
    liters_saved: float
    cost_savings: float
    average_efficiency: float
    total_vehicles: int
    active_trips: int
    anomalies_detected: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RouteSuggestion:
    route: str
    average_efficiency: float
    trip_count: int
    potential_savings: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AnalyticsOverview:
    """Everything the analytics screen shows for one time window."""

    analytics: AnalyticsData
    efficiency: EfficiencyMetrics
    savings: SavingsMetrics
    top_vehicles: List[VehiclePerformance]
    top_drivers: List[DriverPerformance]
    budget_alerts: List[BudgetReport]
    recent_activity: List[AnomalyRecord]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "analytics": self.analytics.to_dict(),
            "efficiency": self.efficiency.to_dict(),
            "savings": self.savings.to_dict(),
            "top_vehicles": [v.to_dict() for v in self.top_vehicles],
            "top_drivers": [d.to_dict() for d in self.top_drivers],
            "budget_alerts": [b.to_dict() for b in self.budget_alerts],
            "recent_activity": [a.to_dict() for a in self.recent_activity],
        }


@dataclass(frozen=True)
class ExportOptions:
    """How an AnalyticsData value is serialised."""

    format: str = "json"  # csv | json | html | report | xlsx
    time_range: str = "30"
    include_details: bool = False
    include_charts: bool = False
    currency: str = "E"
