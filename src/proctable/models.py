"""Data models for proctable."""

from dataclasses import astuple, dataclass
from typing import Any

UNKNOWN = "<unknown>"


class ProctableError(Exception):
    """Base class for proctable errors."""


class CollectionError(ProctableError):
    """The process list could not be enumerated."""


class ConfigError(ProctableError, ValueError):
    """Invalid view configuration."""


@dataclass(slots=True, frozen=True)
class MetricResult:
    """Outcome of one field query: the value, or the fallback if the query failed."""

    value: Any
    ok: bool = True


@dataclass(slots=True, frozen=True)
class ProcessMetrics:
    """Every display field of one process, each already defaulted on failure."""

    pid: int
    name: str
    username: str
    cpu_percent: float
    memory_percent: float
    create_time: float  # Seconds since the epoch
    status: str  # 'running', 'sleeping', 'zombie', etc.


@dataclass(slots=True, frozen=True)
class DisplayRow:
    """Immutable text row handed to the table view."""

    pid: str
    name: str
    username: str
    cpu_percent: str
    memory_percent: str
    create_time: str
    status: str

    def cells(self) -> tuple[str, ...]:
        """Return the row as a 7-tuple of strings in column order."""
        return astuple(self)
