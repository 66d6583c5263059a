"""Metric primitives for fuel efficiency, anomalies, savings and budgets."""

from .calculations import (
    DEFAULT_BUDGET_ALERT_THRESHOLD,
    DEFAULT_FUEL_PRICE,
    calculate_driver_ranking,
    calculate_efficiency_score,
    calculate_fuel_savings,
    calculate_vehicle_ranking,
    detect_fuel_anomalies,
    expected_fuel,
    get_budget_status,
    get_route_optimization_suggestions,
    predict_fuel_consumption,
)

__all__ = [
    "DEFAULT_FUEL_PRICE",
    "DEFAULT_BUDGET_ALERT_THRESHOLD",
    "calculate_efficiency_score",
    "detect_fuel_anomalies",
    "expected_fuel",
    "calculate_fuel_savings",
    "predict_fuel_consumption",
    "get_budget_status",
    "calculate_driver_ranking",
    "calculate_vehicle_ranking",
    "get_route_optimization_suggestions",
]
