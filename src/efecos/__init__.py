"""E-FECOS: Eswatini Fuel Efficiency and Cost Saving System analytics engine."""

__version__ = "0.1.0"

# Main API
from .analytics import (
    build_analytics_overview,
    calculate_analytics_data,
    calculate_dashboard_kpis,
    calculate_efficiency_metrics,
    calculate_savings_metrics,
    generate_cost_trends,
    generate_fuel_trends,
)
from .api import analyze

# Core types
from .config.params import EfecosParams
from .core_types import (
    AnalyticsData,
    AnalyticsOverview,
    Budget,
    Driver,
    ExportOptions,
    FleetData,
    FuelLog,
    Trip,
    TrendView,
    Vehicle,
)
from .interfaces import Exporter

# Metric primitives
from .metrics import (
    calculate_efficiency_score,
    calculate_fuel_savings,
    detect_fuel_anomalies,
    get_budget_status,
    get_route_optimization_suggestions,
    predict_fuel_consumption,
)

# Extension system
from .registry import get_exporter, register_exporter
from .reporting import export_analytics, save_analytics_report
from .utils.data_processing import load_fleet_data

__all__ = [
    # Version
    "__version__",
    # Main API
    "analyze",
    "load_fleet_data",
    "calculate_analytics_data",
    "build_analytics_overview",
    "calculate_dashboard_kpis",
    "calculate_efficiency_metrics",
    "calculate_savings_metrics",
    "generate_fuel_trends",
    "generate_cost_trends",
    "export_analytics",
    "save_analytics_report",
    # Metrics
    "calculate_efficiency_score",
    "detect_fuel_anomalies",
    "calculate_fuel_savings",
    "predict_fuel_consumption",
    "get_budget_status",
    "get_route_optimization_suggestions",
    # Types
    "EfecosParams",
    "AnalyticsData",
    "AnalyticsOverview",
    "ExportOptions",
    "FleetData",
    "Vehicle",
    "Driver",
    "FuelLog",
    "Trip",
    "Budget",
    "TrendView",
    # Extensions
    "Exporter",
    "register_exporter",
    "get_exporter",
]
