"""Public API demo for E-FECOS.

Loads the bundled sample fleet, prints the headline analytics for the last 30
days and writes a JSON export next to this script.

Run with:
    python examples/public_api_demo.py
"""

from __future__ import annotations

from pathlib import Path

import efecos as ef
from efecos.utils.data_processing import data_dir


def main():
    """Main execution function."""
    fleet = ef.load_fleet_data(data_dir() / "sample_fleet.json")

    overview = ef.analyze(
        fleet,
        time_range=30,
        view="weekly",
        output_dir=Path(__file__).parent / "results",
        format="json",
    )

    analytics = overview.analytics
    print(f"Fuel used:   {analytics.total_fuel_used:.1f} L")
    print(f"Fuel cost:   E{analytics.total_cost:,.2f}")
    print(f"Anomalies:   {analytics.anomalies_count}")
    print("Weekly fuel trend:")
    for point in analytics.fuel_trends:
        print(f"  {point.period}: {point.value:.1f} L")

    for alert in overview.budget_alerts:
        print(f"Budget '{alert.name}' at {alert.percentage:.0f}% ({alert.status.value})")


if __name__ == "__main__":
    main()
