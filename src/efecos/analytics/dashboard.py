"""Dashboard-level views built on top of the aggregation engine."""

from datetime import datetime
from typing import Optional

from efecos.config.params import AnalyticsParams
from efecos.core_types import (
    AnalyticsOverview,
    Budget,
    BudgetLevel,
    DashboardKPIs,
    Driver,
    FuelLog,
    Trip,
    Vehicle,
)
from efecos.utils.logging import EfecosLogger

from .aggregation import (
    calculate_analytics_data,
    calculate_efficiency_metrics,
    calculate_savings_metrics,
    enrich_logs,
    newest_first,
)

logger = EfecosLogger.get_logger(__name__)

# Placeholder projections shown on the dashboard cards
PROJECTED_SPEND_FACTOR = 1.2
LITERS_SAVED_FACTOR = 0.15
COST_SAVINGS_FACTOR = 0.12

RECENT_ACTIVITY_LIMIT = 5


def calculate_dashboard_kpis(
    vehicles: list[Vehicle], fuel_logs: list[FuelLog], trips: list[Trip]
) -> DashboardKPIs:
    """Headline numbers for the dashboard cards (all logs, no time window)."""
    fuel_used = float(sum(log.liters for log in fuel_logs))
    total_cost = float(sum(log.cost for log in fuel_logs))
    average_efficiency = (
        sum(v.efficiency_score for v in vehicles) / len(vehicles) if vehicles else 0.0
    )
    return DashboardKPIs(
        monthly_fuel_used=fuel_used,
        projected_spend=total_cost * PROJECTED_SPEND_FACTOR,
        liters_saved=max(0.0, fuel_used * LITERS_SAVED_FACTOR),
        cost_savings=max(0.0, total_cost * COST_SAVINGS_FACTOR),
        average_efficiency=float(average_efficiency),
        total_vehicles=len(vehicles),
        active_trips=sum(1 for trip in trips if trip.status == "In Progress"),
        anomalies_detected=sum(1 for log in fuel_logs if log.is_anomalous),
    )


def build_analytics_overview(
    fuel_logs: list[FuelLog],
    vehicles: list[Vehicle],
    drivers: list[Driver],
    trips: list[Trip],
    budgets: list[Budget],
    time_range: "str | int" = "30",
    selected_view: str = "daily",
    reference_time: Optional[datetime] = None,
    params: Optional[AnalyticsParams] = None,
) -> AnalyticsOverview:
    """Analytics data plus the derived panels of the analytics screen.

    Efficiency, savings and recent activity use every log, not just the window.
    """
    params = params or AnalyticsParams()
    analytics = calculate_analytics_data(
        fuel_logs,
        vehicles,
        drivers,
        trips,
        budgets,
        time_range,
        selected_view,
        reference_time=reference_time,
        params=params,
    )

    budget_alerts = [
        report
        for report in analytics.budget_status
        if report.status in (BudgetLevel.WARNING, BudgetLevel.CRITICAL)
    ]
    if budget_alerts:
        logger.info("%d budget(s) over the alert threshold", len(budget_alerts))

    limit = params.top_performer_limit
    return AnalyticsOverview(
        analytics=analytics,
        efficiency=calculate_efficiency_metrics(vehicles, fuel_logs),
        savings=calculate_savings_metrics(fuel_logs, vehicles, params.fuel_price),
        top_vehicles=analytics.vehicle_performance[:limit],
        top_drivers=analytics.driver_performance[:limit],
        budget_alerts=budget_alerts,
        recent_activity=enrich_logs(
            newest_first(fuel_logs)[:RECENT_ACTIVITY_LIMIT], vehicles, drivers
        ),
    )
