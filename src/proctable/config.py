"""View configuration for proctable."""

from dataclasses import dataclass
from enum import Enum

from proctable.models import ConfigError

DEFAULT_COUNT = 32


class SortKey(Enum):
    """Sort keys for the process table."""

    CPU = "cpu"
    MEM = "mem"
    PID = "pid"
    NAME = "name"
    USER = "user"
    TIME = "time"
    STATUS = "status"

    @property
    def descending(self) -> bool:
        """Numeric usage and creation time read largest first."""
        return self in (SortKey.CPU, SortKey.MEM, SortKey.TIME)


@dataclass(slots=True, frozen=True)
class Column:
    """Header title and display width of one table column."""

    title: str
    width: int


COLUMNS: tuple[Column, ...] = (
    Column("PID", 10),
    Column("Name", 20),
    Column("User", 10),
    Column("CPU%", 6),
    Column("Mem%", 6),
    Column("Time", 25),
    Column("Status", 6),
)


@dataclass(slots=True, frozen=True)
class ViewConfig:
    """Immutable settings read once at startup."""

    sort_key: SortKey = SortKey.CPU
    count: int = DEFAULT_COUNT

    def __post_init__(self) -> None:
        if not isinstance(self.sort_key, SortKey):
            raise ConfigError(f"sort key must be a SortKey, got {self.sort_key!r}")
        if self.count < 1:
            raise ConfigError(f"count must be a positive integer, got {self.count}")

    @classmethod
    def from_options(cls, order: str = SortKey.CPU.value, count: int = DEFAULT_COUNT) -> "ViewConfig":
        """
        Build a config from command-line values.

        Raises:
            ConfigError: If the sort key is not recognised or count is below 1.
        """
        try:
            sort_key = SortKey(order.lower())
        except ValueError:
            valid = ", ".join(key.value for key in SortKey)
            raise ConfigError(f"unknown sort key {order!r}, expected one of: {valid}") from None
        return cls(sort_key=sort_key, count=count)
