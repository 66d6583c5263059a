"""
API facade for E-FECOS - provides a single entry point for programmatic usage.
"""

import dataclasses
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from efecos.analytics import build_analytics_overview, flag_fuel_anomalies
from efecos.config import load_efecos_params
from efecos.config.params import EfecosParams
from efecos.core_types import AnalyticsOverview, ExportOptions, FleetData
from efecos.reporting import save_analytics_report
from efecos.utils.data_processing import load_fleet_data
from efecos.utils.logging import EfecosLogger, log_warning

logger = EfecosLogger.get_logger("efecos.api")


def _resolve_params(config: Union[str, Path, EfecosParams, None]) -> EfecosParams:
    if isinstance(config, EfecosParams):
        return config
    return load_efecos_params(config)


def analyze(
    data: Union[FleetData, str, Path],
    config: Union[str, Path, EfecosParams, None] = None,
    time_range: Optional[Union[str, int]] = None,
    view: Optional[str] = None,
    reference_time: Optional[datetime] = None,
    output_dir: Optional[Union[str, Path]] = None,
    format: Optional[str] = None,
    include_details: Optional[bool] = None,
    detect_anomalies: bool = False,
) -> AnalyticsOverview:
    """
    Compute fleet analytics for one time window.

    Args:
        data: A ``FleetData`` instance, or a path to a JSON export / CSV directory.
        config: Path to a YAML config, an ``EfecosParams`` instance, or None for
            the packaged defaults.
        time_range: Window length in days; overrides the config.
        view: ``daily``, ``weekly`` or ``monthly``; overrides the config.
        reference_time: "Now" for the window; defaults to the current time.
        output_dir: When given, an export is written there.
        format: Export format (csv, json, html, report, xlsx); overrides the config.
        include_details: Include per-vehicle and per-driver tables in the export.
        detect_anomalies: Re-score fuel logs against vehicle baselines before
            aggregating, using the configured anomaly thresholds.

    Returns:
        AnalyticsOverview with the analytics data and derived panels.

    Raises:
        FileNotFoundError: If the data or config path does not exist.
        ValueError: If the data or configuration is invalid.
    """
    params = _resolve_params(config)

    overrides = {}
    if time_range is not None:
        overrides["time_range"] = str(time_range)
    if view is not None:
        overrides["view"] = view
    if format is not None:
        overrides["format"] = format
    if include_details is not None:
        overrides["include_details"] = include_details
    if output_dir is not None:
        overrides["results_dir"] = Path(output_dir)
    if overrides:
        params = dataclasses.replace(
            params, report=dataclasses.replace(params.report, **overrides)
        )

    fleet = data if isinstance(data, FleetData) else load_fleet_data(data)
    if not fleet.fuel_logs:
        log_warning("No fuel logs supplied; analytics will be empty")

    fuel_logs = fleet.fuel_logs
    if detect_anomalies:
        fuel_logs = flag_fuel_anomalies(fuel_logs, fleet.vehicles, params.analytics)

    overview = build_analytics_overview(
        fuel_logs,
        fleet.vehicles,
        fleet.drivers,
        fleet.trips,
        fleet.budgets,
        time_range=params.report.time_range,
        selected_view=params.report.view,
        reference_time=reference_time,
        params=params.analytics,
    )
    logger.info(
        "Analytics over %s days: %.1f L, %.2f cost, %d anomalies",
        params.report.time_range,
        overview.analytics.total_fuel_used,
        overview.analytics.total_cost,
        overview.analytics.anomalies_count,
    )

    if output_dir is not None:
        options = ExportOptions(
            format=params.report.format,
            time_range=params.report.time_range,
            include_details=params.report.include_details,
            currency=params.analytics.currency,
        )
        save_analytics_report(overview.analytics, options, params.report.results_dir)

    return overview
