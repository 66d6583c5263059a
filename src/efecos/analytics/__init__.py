"""Fleet analytics aggregation engine."""

from .aggregation import (
    calculate_analytics_data,
    calculate_budget_reports,
    calculate_department_stats,
    calculate_driver_performance,
    calculate_efficiency_metrics,
    calculate_savings_metrics,
    calculate_vehicle_performance,
    filter_fuel_logs,
    filter_trips,
    flag_fuel_anomalies,
    generate_cost_trends,
    generate_fuel_trends,
    period_of,
    window_start,
)
from .dashboard import build_analytics_overview, calculate_dashboard_kpis

__all__ = [
    "calculate_analytics_data",
    "calculate_efficiency_metrics",
    "calculate_savings_metrics",
    "calculate_vehicle_performance",
    "calculate_driver_performance",
    "calculate_department_stats",
    "calculate_budget_reports",
    "generate_fuel_trends",
    "generate_cost_trends",
    "filter_fuel_logs",
    "filter_trips",
    "flag_fuel_anomalies",
    "period_of",
    "window_start",
    "build_analytics_overview",
    "calculate_dashboard_kpis",
]
