"""Configuration module for E-FECOS parameters."""

from .loader import load_yaml as load_efecos_params
from .loader import save_yaml as save_efecos_params
from .params import (
    EXPORT_FORMATS,
    AnalyticsParams,
    EfecosParams,
    ReportParams,
    RuntimeParams,
)

__all__ = [
    "AnalyticsParams",
    "ReportParams",
    "RuntimeParams",
    "EfecosParams",
    "EXPORT_FORMATS",
    "load_efecos_params",
    "save_efecos_params",
]
