"""
Metric primitives: single-record formulas shared by the aggregation engine,
the dashboard and the reports.

All functions are pure.  Degenerate denominators (zero distance, non-positive
budgets) return neutral values instead of raising, because every caller
renders the result directly.
"""

import math
from collections import defaultdict

from efecos.core_types import (
    BudgetLevel,
    BudgetStatus,
    Driver,
    FuelLog,
    RouteSuggestion,
    Trip,
    Vehicle,
)

DEFAULT_FUEL_PRICE = 1.50  # per litre, Emalangeni
DEFAULT_BUDGET_ALERT_THRESHOLD = 80.0  # percent
ANOMALY_OVER_THRESHOLD = 0.30
ANOMALY_UNDER_THRESHOLD = 0.20


def calculate_efficiency_score(
    actual_consumption: float, vehicle_average: float
) -> float:
    """Score 0-100 of observed consumption against the vehicle baseline.

    Consuming at the baseline scores 100, consuming twice the baseline scores 50.
    Zero consumption counts as perfect efficiency.
    """
    if actual_consumption == 0:
        return 100.0
    efficiency = (vehicle_average / actual_consumption) * 100
    return min(max(efficiency, 0.0), 100.0)


def expected_fuel(trip_distance: float, average_consumption: float) -> float:
    """Litres a vehicle should need for ``trip_distance`` km."""
    return (trip_distance / 100) * average_consumption


def detect_fuel_anomalies(
    fuel_log: FuelLog,
    vehicle: Vehicle,
    over_threshold: float = ANOMALY_OVER_THRESHOLD,
    under_threshold: float = ANOMALY_UNDER_THRESHOLD,
) -> bool:
    """Flag a fuel log whose litres stray too far from the expected amount.

    Under-use is held to the stricter ``under_threshold``: buying much less fuel
    than the distance needs usually means a data-entry error or unreported
    fuel.
    """
    expected = expected_fuel(fuel_log.trip_distance, vehicle.average_consumption)
    if expected <= 0:
        return False

    variance = abs(fuel_log.liters - expected) / expected
    return variance > over_threshold or (
        fuel_log.liters < expected and variance > under_threshold
    )


def calculate_fuel_savings(
    predicted_fuel: float, actual_fuel: float, fuel_price: float = DEFAULT_FUEL_PRICE
) -> float:
    """Money saved against a prediction; negative when more fuel was used."""
    liters_saved = predicted_fuel - actual_fuel
    return liters_saved * fuel_price


def predict_fuel_consumption(
    distance: float, vehicle_consumption: float, driver_efficiency: float
) -> float:
    """Linear derating model: ``base * (2 - efficiency / 100)``.

    Efficiency 100 predicts the vehicle baseline, efficiency 0 doubles it.
    """
    base_fuel = (distance / 100) * vehicle_consumption
    efficiency_multiplier = driver_efficiency / 100
    return base_fuel * (2 - efficiency_multiplier)


def get_budget_status(
    current_spend: float,
    budget: float | None,
    threshold: float = DEFAULT_BUDGET_ALERT_THRESHOLD,
) -> BudgetStatus:
    """Classify spend against a budget limit."""
    if not budget or budget <= 0:
        return BudgetStatus(status=BudgetLevel.GOOD, percentage=0.0, remaining=0.0)

    percentage = (current_spend / budget) * 100
    remaining = budget - current_spend

    status = BudgetLevel.GOOD
    if percentage >= 100:
        status = BudgetLevel.CRITICAL
    elif percentage >= threshold:
        status = BudgetLevel.WARNING

    return BudgetStatus(
        status=status,
        percentage=0.0 if math.isnan(percentage) else percentage,
        remaining=0.0 if math.isnan(remaining) else remaining,
    )


def calculate_driver_ranking(drivers: list[Driver]) -> list[Driver]:
    return sorted(drivers, key=lambda d: d.efficiency_score, reverse=True)


def calculate_vehicle_ranking(vehicles: list[Vehicle]) -> list[Vehicle]:
    return sorted(vehicles, key=lambda v: v.efficiency_score, reverse=True)


def get_route_optimization_suggestions(
    trips: list[Trip], fuel_price: float = DEFAULT_FUEL_PRICE
) -> list[RouteSuggestion]:
    """Rank routes by the fuel money their trips saved against prediction."""
    stats: dict[str, dict[str, float]] = defaultdict(
        lambda: {"total_efficiency": 0.0, "count": 0, "total_savings": 0.0}
    )
    for trip in trips:
        route = stats[trip.route or ""]
        route["total_efficiency"] += trip.efficiency
        route["count"] += 1
        route["total_savings"] += calculate_fuel_savings(
            trip.predicted_fuel, trip.actual_fuel, fuel_price
        )

    suggestions = [
        RouteSuggestion(
            route=route,
            average_efficiency=s["total_efficiency"] / s["count"],
            trip_count=int(s["count"]),
            potential_savings=s["total_savings"],
        )
        for route, s in stats.items()
    ]
    return sorted(suggestions, key=lambda s: s.potential_savings, reverse=True)
