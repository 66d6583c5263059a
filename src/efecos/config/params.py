from __future__ import annotations

"""Parameter container dataclasses for the E-FECOS configuration system.

Analytics constants, report settings and runtime toggles live in separate
dataclasses.  The first two are immutable and validated on construction; the
small mutable `RuntimeParams` bucket is never serialised to YAML.
"""

from dataclasses import dataclass, field
from pathlib import Path

__all__ = [
    "AnalyticsParams",
    "ReportParams",
    "RuntimeParams",
    "EfecosParams",
    "EXPORT_FORMATS",
]

EXPORT_FORMATS = ("csv", "json", "html", "report", "xlsx")


# ---------------------------------------------------------------------------
# Analytics parameters – constants used by the metric primitives
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AnalyticsParams:
    """Numeric assumptions behind savings, budget and anomaly figures."""

    fuel_price: float = 1.50
    currency: str = "E"
    budget_alert_threshold: float = 80.0
    anomaly_over_threshold: float = 0.30
    anomaly_under_threshold: float = 0.20
    recent_anomaly_limit: int = 5
    top_performer_limit: int = 3
    chronological_trends: bool = True

    def __post_init__(self):  # type: ignore[override]
        if self.fuel_price < 0:
            raise ValueError("AnalyticsParams.fuel_price must be non-negative.")

        if not 0 < self.budget_alert_threshold <= 100:
            raise ValueError(
                "AnalyticsParams.budget_alert_threshold must be in (0, 100]."
            )

        for field_name in ("anomaly_over_threshold", "anomaly_under_threshold"):
            value = getattr(self, field_name)
            if value <= 0:
                raise ValueError(f"AnalyticsParams.{field_name} must be positive.")

        for field_name in ("recent_anomaly_limit", "top_performer_limit"):
            value = getattr(self, field_name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(
                    f"AnalyticsParams.{field_name} must be a non-negative integer."
                )


# ---------------------------------------------------------------------------
# Report parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ReportParams:
    """Default time window and export settings."""

    time_range: str = "30"
    view: str = "daily"
    format: str = "json"
    include_details: bool = True
    results_dir: Path = field(default_factory=lambda: Path("results"))

    def __post_init__(self):  # type: ignore[override]
        try:
            days = int(self.time_range)
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"ReportParams.time_range must be a whole number of days, got {self.time_range!r}"
            ) from exc
        if days < 0:
            raise ValueError("ReportParams.time_range must be non-negative.")
        object.__setattr__(self, "time_range", str(days))

        if self.format not in EXPORT_FORMATS:
            raise ValueError(
                f"ReportParams.format must be one of {', '.join(EXPORT_FORMATS)}."
            )

        if not isinstance(self.results_dir, Path):
            object.__setattr__(self, "results_dir", Path(self.results_dir))


# ---------------------------------------------------------------------------
# Runtime parameters – toggles that are never serialized to yaml
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class RuntimeParams:
    verbose: bool = False
    debug: bool = False


# ---------------------------------------------------------------------------
# Aggregate container
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class EfecosParams:
    """Aggregate parameter object passed to the API and CLI."""

    analytics: AnalyticsParams = field(default_factory=AnalyticsParams)
    report: ReportParams = field(default_factory=ReportParams)
    runtime: RuntimeParams = field(default_factory=RuntimeParams)

    def to_dict(self) -> dict[str, object]:
        """Flat YAML-shaped representation (inverse of the loader)."""
        return {
            "analytics": {
                "fuel_price": self.analytics.fuel_price,
                "currency": self.analytics.currency,
                "budget_alert_threshold": self.analytics.budget_alert_threshold,
                "anomaly_over_threshold": self.analytics.anomaly_over_threshold,
                "anomaly_under_threshold": self.analytics.anomaly_under_threshold,
                "recent_anomaly_limit": self.analytics.recent_anomaly_limit,
                "top_performer_limit": self.analytics.top_performer_limit,
                "chronological_trends": self.analytics.chronological_trends,
            },
            "time_range": self.report.time_range,
            "view": self.report.view,
            "format": self.report.format,
            "include_details": self.report.include_details,
            "results_dir": str(self.report.results_dir),
        }
