"""Tests for the exporter registry."""

import pytest

from efecos.core_types import AnalyticsData, ExportOptions
from efecos.registry import EXPORTER_REGISTRY, get_exporter, register_exporter
from efecos.reporting import export_analytics


def test_builtin_exporters_registered():
    assert {"csv", "json", "html", "report", "xlsx"} <= set(EXPORTER_REGISTRY)


def test_get_exporter_returns_instance():
    exporter = get_exporter("json")
    assert exporter.extension == "json"
    assert callable(exporter.export)


def test_unknown_exporter_lists_available():
    with pytest.raises(ValueError) as exc_info:
        get_exporter("pdf")
    assert "csv" in str(exc_info.value)
    assert "xlsx" in str(exc_info.value)


def test_duplicate_registration_rejected():
    with pytest.raises(ValueError, match="already registered"):

        @register_exporter("csv")
        class AnotherCsv:
            extension = "csv"

            def export(self, data, options):
                return ""


def test_custom_exporter_plugs_into_dispatch():
    @register_exporter("markdown")
    class MarkdownExporter:
        extension = "md"

        def export(self, data: AnalyticsData, options: ExportOptions) -> str:
            return f"# Fuel\n\n{data.total_fuel_used} L over {options.time_range} days\n"

    try:
        text = export_analytics(
            AnalyticsData(total_fuel_used=12.0), ExportOptions(format="markdown")
        )
        assert text == "# Fuel\n\n12.0 L over 30 days\n"
    finally:
        EXPORTER_REGISTRY.pop("markdown", None)
