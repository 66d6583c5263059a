"""Report and export formatting for analytics results."""

from .export import (
    CSV_HEADERS,
    export_analytics,
    generate_analytics_report,
    generate_csv_content,
    generate_insights,
    generate_json_content,
    generate_recommendations,
    generate_report_html,
    generate_xlsx_report,
    save_analytics_report,
)

__all__ = [
    "CSV_HEADERS",
    "export_analytics",
    "save_analytics_report",
    "generate_csv_content",
    "generate_json_content",
    "generate_report_html",
    "generate_analytics_report",
    "generate_insights",
    "generate_recommendations",
    "generate_xlsx_report",
]
