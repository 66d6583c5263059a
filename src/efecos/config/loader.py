from __future__ import annotations

"""Utilities for loading E-FECOS configuration YAML files into the parameter
dataclass hierarchy.

Every key is optional; anything missing falls back to the dataclass default so
that a config file only needs to name what it changes.
"""

from pathlib import Path
from typing import Any, Dict

import yaml

from efecos.utils.logging import EfecosLogger

from .params import AnalyticsParams, EfecosParams, ReportParams

logger = EfecosLogger.get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default_config.yaml"

_ANALYTICS_KEYS = set(AnalyticsParams.__dataclass_fields__)

# ---------------------------------------------------------------------------
# Helper parsing routines
# ---------------------------------------------------------------------------


def _parse_analytics(raw: Dict[str, Any] | None) -> AnalyticsParams:
    """Convert the YAML ``analytics`` mapping into `AnalyticsParams`."""

    raw = dict(raw or {})
    unknown = set(raw) - _ANALYTICS_KEYS
    if unknown:
        raise ValueError(
            f"Unknown analytics configuration keys in YAML: {', '.join(sorted(unknown))}"
        )

    for key in (
        "fuel_price",
        "budget_alert_threshold",
        "anomaly_over_threshold",
        "anomaly_under_threshold",
    ):
        if key in raw:
            raw[key] = float(raw[key])

    return AnalyticsParams(**raw)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_yaml(path: str | Path | None = None) -> EfecosParams:
    """Load a YAML configuration file into `EfecosParams`.

    ``None`` loads the packaged ``default_config.yaml``.
    """

    cfg_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        raise FileNotFoundError(cfg_path)

    try:
        with cfg_path.open() as f:
            data: Dict[str, Any] = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ValueError(
            f"Error parsing YAML configuration {cfg_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Configuration {cfg_path} must be a YAML mapping.")

    analytics = _parse_analytics(data.pop("analytics", None))

    report_defaults = ReportParams()
    results_dir = Path(data.pop("results_dir", report_defaults.results_dir))

    report = ReportParams(
        time_range=str(data.pop("time_range", report_defaults.time_range)),
        view=str(data.pop("view", report_defaults.view)),
        format=data.pop("format", report_defaults.format),
        include_details=bool(
            data.pop("include_details", report_defaults.include_details)
        ),
        results_dir=results_dir,
    )

    # Any remaining unknown keys will raise an error to avoid silent mistakes.
    if data:
        unknown_keys = ", ".join(sorted(data.keys()))
        raise ValueError(
            f"Unknown top-level configuration keys in YAML: {unknown_keys}"
        )

    logger.debug("Loaded configuration – analytics: %s report: %s", analytics, report)

    return EfecosParams(analytics=analytics, report=report)


def save_yaml(params: EfecosParams, output_path: str | Path) -> None:
    """Write `params` back to YAML in the layout `load_yaml` reads."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        yaml.safe_dump(params.to_dict(), f, sort_keys=False)
