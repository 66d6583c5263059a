"""
export.py – serialisation of analytics results

This module is the single exit point for anything that leaves the engine as a
file: CSV and JSON exports, the printable HTML report, the insights summary and
the spreadsheet workbook.  Everything except `save_analytics_report` returns the
content and leaves delivery (download, print dialog, disk) to the caller.
"""

import io
import json
from dataclasses import asdict
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np
import pandas as pd
from jinja2 import Environment, FileSystemLoader, select_autoescape

from efecos.core_types import AnalyticsData, ExportOptions
from efecos.registry import get_exporter, register_exporter
from efecos.utils.formatters import plain_number
from efecos.utils.logging import EfecosLogger

logger = EfecosLogger.get_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

CSV_HEADERS = ["Metric", "Value", "Unit", "Time Range"]

# Insight thresholds
HIGH_CONSUMPTION_THRESHOLD = 15.0  # L/100km
HIGH_COST_THRESHOLD = 10000.0


class AnalyticsEncoder(json.JSONEncoder):
    """JSON encoder aware of numpy scalars, datetimes and enums."""

    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _camelize(value: Any) -> Any:
    """Rename dict keys to the camelCase used by the dashboard front end."""
    if isinstance(value, dict):
        return {_camel(str(k)): _camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_camelize(v) for v in value]
    return value


def _summary(data: AnalyticsData) -> dict[str, Any]:
    return _camelize(data.summary())


def _us_date(moment: datetime) -> str:
    return f"{moment.month}/{moment.day}/{moment.year}"


def _grouped(value: float) -> str:
    """Thousands separators and at most three decimals."""
    text = f"{float(value):,.3f}".rstrip("0").rstrip(".")
    return text or "0"


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------


def generate_csv_content(data: AnalyticsData, options: ExportOptions) -> str:
    """Metric/value table; with details, one fuel row per vehicle and driver.

    Fields containing commas, quotes or newlines are quoted.
    """
    window = f"{options.time_range} days"
    rows = [
        ["Total Fuel Used", plain_number(data.total_fuel_used), "L", window],
        ["Total Cost", plain_number(data.total_cost), options.currency, window],
        [
            "Average Efficiency",
            f"{data.average_efficiency:.2f}",
            "L/100km",
            window,
        ],
        ["Total Trips", str(data.total_trips), "trips", window],
        ["Anomalies Detected", str(data.anomalies_count), "count", window],
    ]

    if options.include_details:
        for vehicle in data.vehicle_performance:
            rows.append(
                [f"Vehicle - {vehicle.name}", plain_number(vehicle.fuel_used), "L", window]
            )
        for driver in data.driver_performance:
            rows.append(
                [f"Driver - {driver.name}", plain_number(driver.fuel_used), "L", window]
            )

    return pd.DataFrame(rows, columns=CSV_HEADERS).to_csv(
        index=False, lineterminator="\n"
    )


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def generate_json_content(
    data: AnalyticsData,
    options: ExportOptions,
    exported_at: Optional[datetime] = None,
) -> str:
    """Metadata, summary scalars and, optionally, the detail tables."""
    exported_at = exported_at or datetime.now()
    export_data: dict[str, Any] = {
        "metadata": {
            "exportDate": exported_at.isoformat(),
            "timeRange": options.time_range,
            "format": "json",
        },
        "summary": _summary(data),
    }
    if options.include_details:
        export_data["details"] = _camelize(
            {
                "vehicle_performance": [v.to_dict() for v in data.vehicle_performance],
                "driver_performance": [d.to_dict() for d in data.driver_performance],
                "department_stats": [d.to_dict() for d in data.department_stats],
                "budget_status": [b.to_dict() for b in data.budget_status],
                "recent_anomalies": [a.to_dict() for a in data.recent_anomalies],
            }
        )
    return json.dumps(export_data, cls=AnalyticsEncoder, indent=2)


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------


def _template_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["fixed"] = lambda value, digits=1: f"{float(value):.{digits}f}"
    env.filters["grouped"] = _grouped
    return env


def generate_report_html(
    data: AnalyticsData,
    options: ExportOptions,
    generated_at: Optional[datetime] = None,
) -> str:
    """Printable HTML report; names are HTML-escaped."""
    generated_at = generated_at or datetime.now()
    template = _template_environment().get_template("analytics_report.html")
    return template.render(
        data=data,
        generated_on=_us_date(generated_at),
        time_range=options.time_range,
        currency=options.currency,
        include_details=options.include_details,
        sections=[
            ("Vehicle Performance", "Vehicle", data.vehicle_performance),
            ("Driver Performance", "Driver", data.driver_performance),
        ],
    )


# ---------------------------------------------------------------------------
# Insights report
# ---------------------------------------------------------------------------


def generate_insights(data: AnalyticsData) -> list[str]:
    insights = []
    if data.average_efficiency > HIGH_CONSUMPTION_THRESHOLD:
        insights.append(
            "Fleet efficiency is above optimal levels. Consider driver training programs."
        )
    if data.anomalies_count > 0:
        insights.append(
            f"{data.anomalies_count} fuel anomalies detected. "
            "Review recent trips for unusual patterns."
        )
    if data.total_cost > HIGH_COST_THRESHOLD:
        insights.append(
            "High fuel costs detected. Consider route optimization and fuel "
            "efficiency improvements."
        )
    return insights


def generate_recommendations(data: AnalyticsData) -> list[str]:
    recommendations = []
    if data.average_efficiency > HIGH_CONSUMPTION_THRESHOLD:
        recommendations.append("Implement driver efficiency training programs")
        recommendations.append(
            "Consider vehicle maintenance to improve fuel efficiency"
        )
    if data.anomalies_count > 0:
        recommendations.append("Investigate fuel anomalies to prevent future issues")
        recommendations.append("Review driver behavior and route planning")
    recommendations.append("Monitor fuel consumption trends regularly")
    recommendations.append("Set up automated alerts for budget thresholds")
    return recommendations


def generate_analytics_report(
    data: AnalyticsData,
    options: ExportOptions,
    generated_at: Optional[datetime] = None,
) -> str:
    """JSON summary with rule-based insights and recommendations."""
    generated_at = generated_at or datetime.now()
    report = {
        "title": "Analytics Report",
        "generatedAt": generated_at.isoformat(),
        "timeRange": options.time_range,
        "summary": _summary(data),
        "insights": generate_insights(data),
        "recommendations": generate_recommendations(data),
    }
    return json.dumps(report, cls=AnalyticsEncoder, indent=2)


# ---------------------------------------------------------------------------
# Spreadsheet
# ---------------------------------------------------------------------------


def generate_xlsx_report(data: AnalyticsData, options: ExportOptions) -> bytes:
    """Workbook with a summary sheet and one sheet per detail table."""
    summary = pd.DataFrame(
        [
            ("Total Fuel Used (L)", data.total_fuel_used),
            (f"Total Cost ({options.currency})", data.total_cost),
            ("Average Efficiency (L/100km)", data.average_efficiency),
            ("Total Trips", data.total_trips),
            ("Anomalies Detected", data.anomalies_count),
            ("Time Range (days)", options.time_range),
        ],
        columns=["Metric", "Value"],
    )

    sheets = {
        "Summary": summary,
        "Fuel Trends": pd.DataFrame([asdict(p) for p in data.fuel_trends]),
        "Cost Trends": pd.DataFrame([asdict(p) for p in data.cost_trends]),
    }
    if options.include_details:
        sheets.update(
            {
                "Vehicle Performance": pd.DataFrame(
                    [v.to_dict() for v in data.vehicle_performance]
                ),
                "Driver Performance": pd.DataFrame(
                    [d.to_dict() for d in data.driver_performance]
                ),
                "Departments": pd.DataFrame(
                    [d.to_dict() for d in data.department_stats]
                ),
                "Budgets": pd.DataFrame([b.to_dict() for b in data.budget_status]),
            }
        )

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for sheet_name, frame in sheets.items():
            frame.to_excel(writer, sheet_name=sheet_name, index=False)
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Exporter plugins
# ---------------------------------------------------------------------------


@register_exporter("csv")
class CsvExporter:
    extension = "csv"

    def export(self, data: AnalyticsData, options: ExportOptions) -> str:
        return generate_csv_content(data, options)


@register_exporter("json")
class JsonExporter:
    extension = "json"

    def export(self, data: AnalyticsData, options: ExportOptions) -> str:
        return generate_json_content(data, options)


@register_exporter("html")
class HtmlExporter:
    extension = "html"

    def export(self, data: AnalyticsData, options: ExportOptions) -> str:
        return generate_report_html(data, options)


@register_exporter("report")
class InsightsReportExporter:
    extension = "summary.json"

    def export(self, data: AnalyticsData, options: ExportOptions) -> str:
        return generate_analytics_report(data, options)


@register_exporter("xlsx")
class XlsxExporter:
    extension = "xlsx"

    def export(self, data: AnalyticsData, options: ExportOptions) -> bytes:
        return generate_xlsx_report(data, options)


def export_analytics(
    data: AnalyticsData, options: ExportOptions
) -> Union[str, bytes]:
    """Serialise ``data`` in ``options.format``."""
    return get_exporter(options.format).export(data, options)


def save_analytics_report(
    data: AnalyticsData,
    options: ExportOptions,
    results_dir: Union[str, Path] = "results",
    filename: Optional[Union[str, Path]] = None,
) -> Path:
    """Write the export to disk and return its path.

    Without ``filename`` the file is named ``analytics_report_YYYY-MM-DD``.
    """
    exporter = get_exporter(options.format)
    if filename is None:
        stamp = datetime.now().strftime("%Y-%m-%d")
        output_path = Path(results_dir) / f"analytics_report_{stamp}.{exporter.extension}"
    else:
        output_path = Path(filename)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    content = exporter.export(data, options)
    if isinstance(content, bytes):
        output_path.write_bytes(content)
    else:
        output_path.write_text(content, encoding="utf-8")

    logger.info("Analytics %s export written to %s", options.format, output_path)
    return output_path
