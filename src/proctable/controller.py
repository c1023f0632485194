"""Interaction state machine for proctable."""

from collections.abc import Sequence
from enum import Enum

import psutil
import structlog

from proctable.models import CollectionError, DisplayRow
from proctable.monitor import ProcessMonitor

log = structlog.get_logger(__name__)

QUIT_KEYS = frozenset({"q", "ctrl+c"})
REFRESH_KEYS = frozenset({"r"})
KILL_KEYS = frozenset({"d"})


class State(Enum):
    """Controller states."""

    RUNNING = "running"
    TERMINATED = "terminated"


class InteractionController:
    """
    Owns the displayed rows and reacts to operator commands.

    Every action runs to completion, including the refresh that follows a
    kill, before the next key is handled. Failed actions leave the rows
    exactly as they were.
    """

    def __init__(self, monitor: ProcessMonitor) -> None:
        self._monitor = monitor
        self._state = State.RUNNING
        self._rows: list[DisplayRow] = []

    @property
    def state(self) -> State:
        """Get the current state."""
        return self._state

    @property
    def rows(self) -> list[DisplayRow]:
        """Get the rows currently on display."""
        return list(self._rows)

    @property
    def monitor(self) -> ProcessMonitor:
        """Get the pipeline this controller drives."""
        return self._monitor

    def start(self) -> None:
        """
        Prime the monitor and load the first rows.

        Raises:
            CollectionError: If the first snapshot cannot be collected.
        """
        self._monitor.prime()
        self._rows = self._monitor.rows()

    def refresh(self) -> bool:
        """Replace the rows with a fresh snapshot. Returns False if collection failed."""
        try:
            rows = self._monitor.rows()
        except CollectionError as exc:
            log.warning("collection_failed", error=str(exc))
            return False
        self._rows = rows
        return True

    def kill_selected(self, selected: Sequence[str] | None) -> bool:
        """
        Kill the process shown in the selected row, then refresh.

        The pid in the first cell is the only link back to the process. An
        unparsable selection, a process that is already gone, or a refused
        signal all abort without touching the rows.
        """
        try:
            pid = int(selected[0])  # type: ignore[index]
        except (TypeError, ValueError, IndexError):
            log.debug("selection_invalid", selected=selected)
            return False

        log.info("kill_requested", pid=pid)
        try:
            proc = self._monitor.resolve(pid)
            self._monitor.kill(proc)
        except (psutil.Error, OSError, ValueError) as exc:
            log.warning("kill_failed", pid=pid, error=str(exc) or type(exc).__name__)
            return False
        return self.refresh()

    def quit(self) -> None:
        """Request program exit."""
        self._state = State.TERMINATED

    def handle(self, key: str, selected: Sequence[str] | None = None) -> bool:
        """
        Dispatch one key event.

        Returns True when the key was consumed here, False when it should be
        passed on to the table widget for navigation.
        """
        if self._state is State.TERMINATED:
            return True
        if key in QUIT_KEYS:
            self.quit()
        elif key in REFRESH_KEYS:
            self.refresh()
        elif key in KILL_KEYS:
            self.kill_selected(selected)
        else:
            return False
        return True
