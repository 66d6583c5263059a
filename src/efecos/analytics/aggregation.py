"""
Aggregation engine: turns raw fuel-log, trip and roster collections into the
per-period, per-entity and per-budget figures behind the analytics screens.

The engine is pure.  "Now" is injected through ``reference_time`` so that the
time window is reproducible; when omitted the wall clock is read once per call.
"""

from collections import Counter
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

import pandas as pd

from efecos.config.params import AnalyticsParams
from efecos.core_types import (
    AnalyticsData,
    AnomalyRecord,
    Budget,
    BudgetReport,
    DepartmentStat,
    Driver,
    DriverPerformance,
    EfficiencyMetrics,
    FuelLog,
    SavingsMetrics,
    TrendPoint,
    TrendView,
    Trip,
    Vehicle,
    VehiclePerformance,
)
from efecos.metrics.calculations import (
    DEFAULT_FUEL_PRICE,
    detect_fuel_anomalies,
    expected_fuel,
    get_budget_status,
)
from efecos.utils.logging import EfecosLogger

logger = EfecosLogger.get_logger(__name__)

UNKNOWN_VEHICLE = "Unknown Vehicle"
UNKNOWN_DRIVER = "Unknown Driver"


# ---------------------------------------------------------------------------
# Time handling
# ---------------------------------------------------------------------------


def _align(moment: datetime, reference: datetime) -> datetime:
    """Express ``moment`` in the frame of ``reference``.

    Naive record dates are wall-clock times in the reference's zone. Aware
    record dates are converted into that zone, where a naive reference means
    local time.
    """
    if moment.tzinfo is None:
        return moment.replace(tzinfo=reference.tzinfo)
    if reference.tzinfo is None:
        return moment.astimezone().replace(tzinfo=None)
    return moment.astimezone(reference.tzinfo)


def _timestamp(moment: Optional[datetime]) -> float:
    return moment.timestamp() if moment is not None else float("-inf")


def window_start(reference_time: datetime, time_range: "str | int") -> datetime:
    """Start of the analysis window, ``time_range`` whole days before now."""
    days = int(time_range)
    return reference_time - timedelta(days=days)


def filter_fuel_logs(
    fuel_logs: Iterable[FuelLog], start: datetime
) -> list[FuelLog]:
    return [
        log
        for log in fuel_logs
        if log.date is not None and _align(log.date, start) >= start
    ]


def filter_trips(trips: Iterable[Trip], start: datetime) -> list[Trip]:
    return [
        trip
        for trip in trips
        if trip.start_time is not None and _align(trip.start_time, start) >= start
    ]


# ---------------------------------------------------------------------------
# Trends
# ---------------------------------------------------------------------------


def _us_date(day: date) -> str:
    return f"{day.month}/{day.day}/{day.year}"


def period_of(moment: datetime, view: TrendView) -> tuple[date, str]:
    """Return ``(period_start, label)`` for the period containing ``moment``.

    Weeks start on Sunday.
    """
    day = moment.date()
    if view is TrendView.DAILY:
        return day, _us_date(day)
    if view is TrendView.WEEKLY:
        week_start = day - timedelta(days=(day.weekday() + 1) % 7)
        return week_start, f"Week {_us_date(week_start)}"
    return date(day.year, day.month, 1), f"{day.year}-{day.month}"


def _generate_trend(
    fuel_logs: list[FuelLog],
    view: "str | TrendView",
    value_field: str,
    chronological: bool,
    reference_time: Optional[datetime],
) -> list[TrendPoint]:
    view = TrendView.parse(view)
    dated = [log for log in fuel_logs if log.date is not None]
    if not dated:
        return []

    rows = []
    for log in dated:
        moment = _align(log.date, reference_time) if reference_time else log.date
        start, label = period_of(moment, view)
        rows.append(
            {"period_start": start, "period": label, "value": getattr(log, value_field)}
        )

    frame = pd.DataFrame(rows)
    # sort=False keeps groups in first-encounter order
    grouped = frame.groupby(["period_start", "period"], sort=chronological)["value"].sum()
    return [
        TrendPoint(period=label, value=float(total))
        for (_, label), total in grouped.items()
    ]


def generate_fuel_trends(
    fuel_logs: list[FuelLog],
    view: "str | TrendView",
    chronological: bool = True,
    reference_time: Optional[datetime] = None,
) -> list[TrendPoint]:
    """Litres per period."""
    return _generate_trend(fuel_logs, view, "liters", chronological, reference_time)


def generate_cost_trends(
    fuel_logs: list[FuelLog],
    view: "str | TrendView",
    chronological: bool = True,
    reference_time: Optional[datetime] = None,
) -> list[TrendPoint]:
    """Fuel spend per period."""
    return _generate_trend(fuel_logs, view, "cost", chronological, reference_time)


# ---------------------------------------------------------------------------
# Roll-ups
# ---------------------------------------------------------------------------


def _first_by_id(records: Iterable) -> dict:
    """Id lookup that, like a linear search, keeps the first record per id."""
    lookup = {}
    for record in records:
        lookup.setdefault(record.id, record)
    return lookup


def _rollup(logs_df: pd.DataFrame, key: str) -> dict[str, dict[str, float]]:
    """Sum litres and cost, and average efficiency, per ``key``."""
    if logs_df.empty:
        return {}
    grouped = logs_df.groupby(key, sort=False).agg(
        fuel_used=("liters", "sum"),
        cost=("cost", "sum"),
        efficiency=("efficiency", "mean"),
    )
    return grouped.to_dict(orient="index")


def calculate_vehicle_performance(
    vehicles: list[Vehicle],
    logs_df: pd.DataFrame,
    trips: list[Trip],
) -> list[VehiclePerformance]:
    """Per-vehicle totals, heaviest fuel users first."""
    by_vehicle = _rollup(logs_df, "vehicle_id")
    trip_counts = Counter(trip.vehicle_id for trip in trips)

    performance = []
    for vehicle in vehicles:
        stats = by_vehicle.get(vehicle.id)
        trip_count = trip_counts.get(vehicle.id, 0)
        cost = float(stats["cost"]) if stats else 0.0
        performance.append(
            VehiclePerformance(
                vehicle_id=vehicle.id,
                name=vehicle.name,
                fuel_used=float(stats["fuel_used"]) if stats else 0.0,
                cost=cost,
                efficiency=(
                    float(stats["efficiency"]) if stats else vehicle.efficiency_score
                ),
                trips=trip_count,
                status=vehicle.status,
                avg_cost_per_trip=cost / trip_count if trip_count > 0 else 0.0,
            )
        )
    return sorted(performance, key=lambda p: p.fuel_used, reverse=True)


def calculate_driver_performance(
    drivers: list[Driver],
    logs_df: pd.DataFrame,
    trips: list[Trip],
) -> list[DriverPerformance]:
    """Per-driver totals, highest efficiency figure first."""
    by_driver = _rollup(logs_df, "driver_id")
    trip_counts = Counter(trip.driver_id for trip in trips)

    performance = []
    for driver in drivers:
        stats = by_driver.get(driver.id)
        trip_count = trip_counts.get(driver.id, 0)
        cost = float(stats["cost"]) if stats else 0.0
        performance.append(
            DriverPerformance(
                driver_id=driver.id,
                name=driver.name,
                fuel_used=float(stats["fuel_used"]) if stats else 0.0,
                cost=cost,
                efficiency=(
                    float(stats["efficiency"]) if stats else driver.efficiency_score
                ),
                trips=trip_count,
                avg_cost_per_trip=cost / trip_count if trip_count > 0 else 0.0,
            )
        )
    return sorted(performance, key=lambda p: p.efficiency, reverse=True)


def calculate_department_stats(
    vehicles: list[Vehicle], fuel_logs: list[FuelLog]
) -> list[DepartmentStat]:
    """Litres per department, for every department that owns a vehicle."""
    fuel_used: dict[str, float] = {}
    vehicle_count: dict[str, int] = {}
    for vehicle in vehicles:
        fuel_used.setdefault(vehicle.department, 0.0)
        vehicle_count[vehicle.department] = vehicle_count.get(vehicle.department, 0) + 1

    vehicles_by_id = _first_by_id(vehicles)
    for log in fuel_logs:
        vehicle = vehicles_by_id.get(log.vehicle_id)
        if vehicle is not None:
            fuel_used[vehicle.department] += log.liters

    return [
        DepartmentStat(
            department=department,
            fuel_used=fuel_used[department],
            vehicle_count=vehicle_count[department],
        )
        for department in fuel_used
    ]


def calculate_budget_reports(
    budgets: list[Budget],
    vehicles: list[Vehicle],
    logs_df: pd.DataFrame,
    threshold: float,
) -> list[BudgetReport]:
    """Spend in the window against each budget's monthly limit."""
    roster = {vehicle.id for vehicle in vehicles}
    reports = []
    for budget in budgets:
        budget_vehicles = roster.intersection(budget.vehicle_ids)
        if logs_df.empty or not budget_vehicles:
            current_spend = 0.0
        else:
            current_spend = float(
                logs_df.loc[logs_df["vehicle_id"].isin(budget_vehicles), "cost"].sum()
            )
        status = get_budget_status(current_spend, budget.monthly_limit, threshold)
        reports.append(
            BudgetReport(
                budget_id=budget.id,
                name=budget.name,
                department=budget.department,
                current_spend=current_spend,
                limit=budget.monthly_limit,
                percentage=status.percentage,
                status=status.status,
                remaining=status.remaining,
            )
        )
    return reports


def enrich_logs(
    fuel_logs: Iterable[FuelLog],
    vehicles: list[Vehicle],
    drivers: list[Driver],
) -> list[AnomalyRecord]:
    """Attach vehicle and driver names, falling back to "Unknown" labels."""
    vehicles_by_id = _first_by_id(vehicles)
    drivers_by_id = _first_by_id(drivers)
    records = []
    for log in fuel_logs:
        vehicle = vehicles_by_id.get(log.vehicle_id)
        driver = drivers_by_id.get(log.driver_id)
        records.append(
            AnomalyRecord(
                log=log,
                vehicle_name=vehicle.name if vehicle and vehicle.name else UNKNOWN_VEHICLE,
                driver_name=driver.name if driver and driver.name else UNKNOWN_DRIVER,
            )
        )
    return records


def newest_first(fuel_logs: Iterable[FuelLog]) -> list[FuelLog]:
    return sorted(fuel_logs, key=lambda log: _timestamp(log.date), reverse=True)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def calculate_analytics_data(
    fuel_logs: list[FuelLog],
    vehicles: list[Vehicle],
    drivers: list[Driver],
    trips: list[Trip],
    budgets: list[Budget],
    time_range: "str | int",
    selected_view: "str | TrendView",
    reference_time: Optional[datetime] = None,
    params: Optional[AnalyticsParams] = None,
) -> AnalyticsData:
    """Compute every analytics figure for the last ``time_range`` days.

    Returns an empty result when there are no fuel logs, vehicles or drivers.
    Rosters and budgets are never time-filtered; fuel logs are filtered on
    ``date`` and trips on ``start_time``.
    """
    if not fuel_logs or not vehicles or not drivers:
        logger.debug("No fuel logs, vehicles or drivers; returning empty analytics")
        return AnalyticsData.empty()

    params = params or AnalyticsParams()
    view = TrendView.parse(selected_view)
    now = reference_time if reference_time is not None else datetime.now()
    start = window_start(now, time_range)

    window_logs = filter_fuel_logs(fuel_logs, start)
    window_trips = filter_trips(trips, start)
    logger.debug(
        "Analytics window starts %s: %d/%d fuel logs, %d/%d trips",
        start,
        len(window_logs),
        len(fuel_logs),
        len(window_trips),
        len(trips),
    )

    logs_df = FuelLog.to_dataframe(window_logs)

    total_fuel_used = float(sum(log.liters for log in window_logs))
    total_cost = float(sum(log.cost for log in window_logs))
    anomalies = [log for log in window_logs if log.is_anomalous is True]
    average_efficiency = (
        sum(log.efficiency for log in window_logs) / len(window_logs)
        if window_logs
        else 0.0
    )

    recent = newest_first(anomalies)[: params.recent_anomaly_limit]

    return AnalyticsData(
        total_fuel_used=total_fuel_used,
        total_cost=total_cost,
        average_efficiency=float(average_efficiency),
        total_trips=len(window_trips),
        anomalies_count=len(anomalies),
        fuel_trends=generate_fuel_trends(
            window_logs, view, params.chronological_trends, now
        ),
        cost_trends=generate_cost_trends(
            window_logs, view, params.chronological_trends, now
        ),
        vehicle_performance=calculate_vehicle_performance(
            vehicles, logs_df, window_trips
        ),
        driver_performance=calculate_driver_performance(
            drivers, logs_df, window_trips
        ),
        department_stats=calculate_department_stats(vehicles, window_logs),
        budget_status=calculate_budget_reports(
            budgets, vehicles, logs_df, params.budget_alert_threshold
        ),
        recent_anomalies=enrich_logs(recent, vehicles, drivers),
    )


def calculate_efficiency_metrics(
    vehicles: list[Vehicle], fuel_logs: list[FuelLog]
) -> EfficiencyMetrics:
    """Fleet-wide figures over all logs; efficiency is the configured score."""
    total_vehicles = len(vehicles)
    active_vehicles = sum(1 for v in vehicles if v.status == "active")
    average_efficiency = (
        sum(v.efficiency_score for v in vehicles) / total_vehicles
        if total_vehicles > 0
        else 0.0
    )
    return EfficiencyMetrics(
        total_vehicles=total_vehicles,
        active_vehicles=active_vehicles,
        utilization_rate=(
            (active_vehicles / total_vehicles) * 100 if total_vehicles > 0 else 0.0
        ),
        total_fuel_used=float(sum(log.liters for log in fuel_logs)),
        total_cost=float(sum(log.cost for log in fuel_logs)),
        average_efficiency=float(average_efficiency),
    )


def calculate_savings_metrics(
    fuel_logs: list[FuelLog],
    vehicles: list[Vehicle],
    fuel_price: float = DEFAULT_FUEL_PRICE,
) -> SavingsMetrics:
    """Litres and money saved against each vehicle's baseline consumption.

    Logs that used more than expected count as zero savings, not as a loss.
    Logs whose vehicle is unknown are skipped but still count as trips.
    """
    vehicles_by_id = _first_by_id(vehicles)
    total_savings = 0.0
    total_liters_saved = 0.0
    for log in fuel_logs:
        vehicle = vehicles_by_id.get(log.vehicle_id)
        if vehicle is None:
            continue
        saved = max(
            0.0,
            expected_fuel(log.trip_distance, vehicle.average_consumption) - log.liters,
        )
        total_liters_saved += saved
        total_savings += saved * fuel_price

    return SavingsMetrics(
        total_savings=total_savings,
        total_liters_saved=total_liters_saved,
        average_savings_per_trip=(
            total_savings / len(fuel_logs) if fuel_logs else 0.0
        ),
    )


def flag_fuel_anomalies(
    fuel_logs: list[FuelLog],
    vehicles: list[Vehicle],
    params: Optional[AnalyticsParams] = None,
) -> list[FuelLog]:
    """Re-score every log against its vehicle's baseline consumption.

    Returns new logs; a log already flagged keeps its flag and reason.  Logs
    whose vehicle is unknown are returned unchanged.
    """
    params = params or AnalyticsParams()
    vehicles_by_id = _first_by_id(vehicles)
    flagged = []
    for log in fuel_logs:
        vehicle = vehicles_by_id.get(log.vehicle_id)
        if vehicle is None or log.is_anomalous:
            flagged.append(log)
            continue
        if detect_fuel_anomalies(
            log,
            vehicle,
            params.anomaly_over_threshold,
            params.anomaly_under_threshold,
        ):
            expected = expected_fuel(log.trip_distance, vehicle.average_consumption)
            variance = (log.liters - expected) / expected * 100
            direction = "above" if variance > 0 else "below"
            log = replace(
                log,
                is_anomalous=True,
                anomaly_reason=f"Consumption {abs(variance):.0f}% {direction} expected",
            )
        flagged.append(log)

    newly = sum(1 for before, after in zip(fuel_logs, flagged) if before is not after)
    logger.debug("Flagged %d new fuel anomalies out of %d logs", newly, len(fuel_logs))
    return flagged
