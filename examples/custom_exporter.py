"""Custom exporter plugin example for E-FECOS.

Registers a Markdown exporter through the `efecos.registry` decorator and uses
it like any built-in format.

Run with:
    python examples/custom_exporter.py
"""

from __future__ import annotations

import efecos as ef
from efecos.core_types import AnalyticsData, ExportOptions
from efecos.utils.data_processing import data_dir


@ef.register_exporter("markdown")
class MarkdownExporter:
    extension = "md"

    def export(self, data: AnalyticsData, options: ExportOptions) -> str:
        lines = [
            f"# Fuel report (last {options.time_range} days)",
            "",
            "| Vehicle | Fuel (L) | Cost |",
            "|---|---:|---:|",
        ]
        for vehicle in data.vehicle_performance:
            lines.append(
                f"| {vehicle.name} | {vehicle.fuel_used:.1f} | "
                f"{options.currency}{vehicle.cost:,.2f} |"
            )
        return "\n".join(lines) + "\n"


def main():
    """Main execution function."""
    overview = ef.analyze(data_dir() / "sample_fleet.json", time_range=90)
    print(ef.export_analytics(overview.analytics, ExportOptions(format="markdown")))


if __name__ == "__main__":
    main()
