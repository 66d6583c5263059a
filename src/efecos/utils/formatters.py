"""Display formatting helpers shared by the CLI tables and the reports."""

from datetime import date, datetime


def format_currency(amount: float, currency: str = "E") -> str:
    return f"{currency}{amount:,.2f}"


def format_number(num: float, decimals: int = 0) -> str:
    return f"{num:,.{decimals}f}"


def format_percentage(value: float, total: float) -> str:
    if total == 0:
        return "0%"
    return f"{(value / total) * 100:.1f}%"


def format_distance(km: float) -> str:
    if km < 1:
        return f"{km * 1000:.0f}m"
    return f"{km:.1f}km"


def format_fuel_consumption(liters: float, distance: float) -> str:
    if distance == 0:
        return "0 L/100km"
    return f"{(liters / distance) * 100:.1f} L/100km"


def format_date(value: date | datetime) -> str:
    """``Oct 19, 2026`` style date."""
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def plain_number(value: float) -> str:
    """Shortest textual form: whole numbers lose their ``.0``."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)
