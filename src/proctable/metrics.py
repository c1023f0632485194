"""Per-field metric extraction for proctable."""

from datetime import datetime, timedelta, timezone
from typing import Any

import psutil

from proctable.models import UNKNOWN, DisplayRow, MetricResult, ProcessMetrics

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# psutil method name -> value substituted when that query fails
FALLBACKS: dict[str, Any] = {
    "name": UNKNOWN,
    "username": UNKNOWN,
    "cpu_percent": -1.0,
    "memory_percent": -1.0,
    "create_time": -1.0,
    "status": UNKNOWN,
}

# Attributes prefetched by psutil.process_iter()
ATTRS: list[str] = ["pid", *FALLBACKS]


def format_create_time(timestamp: float) -> str:
    """
    Format seconds since the epoch as an RFC 3339 local timestamp.

    Negative values, including the -1 fallback, render as the epoch itself.
    UTC is written with a ``Z`` suffix.
    """
    moment = _EPOCH + timedelta(seconds=max(int(timestamp), 0))
    text = moment.astimezone().isoformat(timespec="seconds")
    if text.endswith("+00:00"):
        return text[:-6] + "Z"
    return text


def format_percent(value: float) -> str:
    """Format a percentage with two decimals, like ``-1.00`` for a fallback."""
    return f"{value:.2f}"


class MetricExtractor:
    """
    Reads display fields from a process handle.

    Each field is queried on its own. A field whose query fails, or which
    psutil reported as unavailable (``None``), takes its value from
    ``FALLBACKS`` and never affects the other fields of the row.
    """

    def query(self, proc: psutil.Process, field: str) -> MetricResult:
        """
        Query one field of a process.

        Uses the value prefetched into ``proc.info`` by ``process_iter`` when
        there is one, otherwise calls the live psutil method.
        """
        fallback = FALLBACKS[field]
        info = getattr(proc, "info", None)
        try:
            if isinstance(info, dict) and field in info:
                value = info[field]
            else:
                value = getattr(proc, field)()
        except (psutil.Error, OSError):
            return MetricResult(fallback, ok=False)
        if value is None:
            return MetricResult(fallback, ok=False)
        return MetricResult(value)

    def value(self, proc: psutil.Process, field: str) -> Any:
        """Shortcut for ``query(proc, field).value``."""
        return self.query(proc, field).value

    def extract(self, proc: psutil.Process) -> ProcessMetrics:
        """Collect every display field of one process."""
        return ProcessMetrics(
            pid=proc.pid,
            name=str(self.value(proc, "name")) or UNKNOWN,
            username=str(self.value(proc, "username")) or UNKNOWN,
            cpu_percent=float(self.value(proc, "cpu_percent")),
            memory_percent=float(self.value(proc, "memory_percent")),
            create_time=float(self.value(proc, "create_time")),
            status=str(self.value(proc, "status")) or UNKNOWN,
        )

    def row(self, proc: psutil.Process) -> DisplayRow:
        """Extract a process straight into its display row."""
        return to_row(self.extract(proc))


def to_row(metrics: ProcessMetrics) -> DisplayRow:
    """Render extracted metrics as text cells."""
    return DisplayRow(
        pid=str(metrics.pid),
        name=metrics.name,
        username=metrics.username,
        cpu_percent=format_percent(metrics.cpu_percent),
        memory_percent=format_percent(metrics.memory_percent),
        create_time=format_create_time(metrics.create_time),
        status=metrics.status,
    )
