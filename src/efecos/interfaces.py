"""Protocol definitions for pluggable components in E-FECOS."""

from typing import Protocol, Union

from efecos.core_types import AnalyticsData, ExportOptions


class Exporter(Protocol):
    """Protocol for report exporters.

    Text formats return ``str``; binary formats (spreadsheets) return ``bytes``.
    """

    extension: str

    def export(
        self, data: AnalyticsData, options: ExportOptions
    ) -> Union[str, bytes]:
        """Serialise ``data`` according to ``options``."""
        ...
