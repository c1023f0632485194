"""Process snapshot pipeline for proctable."""

import time
from collections.abc import Callable, Iterable, Sequence
from typing import Any

import psutil
import structlog

from proctable.config import SortKey, ViewConfig
from proctable.metrics import ATTRS, MetricExtractor
from proctable.models import CollectionError, DisplayRow

log = structlog.get_logger(__name__)

ProcessSnapshot = list[psutil.Process]

# Seconds between the baseline cpu_percent reading and the first snapshot
PRIME_INTERVAL = 0.25


class SnapshotCollector:
    """
    Enumerates every live process at one instant.

    Uses psutil.process_iter() so attribute values are fetched in one pass and
    psutil can reuse its Process cache between refreshes, which is what makes
    cpu_percent report usage since the previous snapshot.
    """

    def __init__(
        self,
        iter_processes: Callable[..., Iterable[psutil.Process]] = psutil.process_iter,
        prime_interval: float = PRIME_INTERVAL,
    ) -> None:
        self._iter_processes = iter_processes
        self._prime_interval = prime_interval

    def prime(self) -> None:
        """
        Take a baseline cpu_percent reading for every process, then wait.

        psutil reports 0.0 the first time it samples a process.

        Raises:
            CollectionError: If the process list could not be enumerated.
        """
        try:
            list(self._iter_processes(attrs=["cpu_percent"], ad_value=None))
        except (psutil.Error, OSError) as exc:
            raise CollectionError(f"could not list processes: {exc}") from exc
        time.sleep(self._prime_interval)

    def collect(self) -> ProcessSnapshot:
        """
        Return a fresh snapshot of live process handles.

        Raises:
            CollectionError: If the process list could not be enumerated.
        """
        try:
            return list(self._iter_processes(attrs=ATTRS, ad_value=None))
        except (psutil.Error, OSError) as exc:
            raise CollectionError(f"could not list processes: {exc}") from exc


class RankingEngine:
    """Orders a snapshot by one sort key."""

    def __init__(self, extractor: MetricExtractor) -> None:
        self._extractor = extractor

    def sort_value(self, proc: psutil.Process, sort_key: SortKey) -> Any:
        """Compute the sort value of one process, with fallbacks for failed queries."""
        value = self._extractor.value
        if sort_key is SortKey.CPU:
            return float(value(proc, "cpu_percent"))
        if sort_key is SortKey.MEM:
            return float(value(proc, "memory_percent"))
        if sort_key is SortKey.TIME:
            return float(value(proc, "create_time"))
        if sort_key is SortKey.PID:
            return proc.pid
        if sort_key is SortKey.NAME:
            return str(value(proc, "name")).lower()
        if sort_key is SortKey.USER:
            return str(value(proc, "username")).lower()
        if sort_key is SortKey.STATUS:
            return str(value(proc, "status")).lower()
        raise ValueError(f"Unhandled sort key: {sort_key!r}")

    def rank(self, snapshot: Sequence[psutil.Process | None], sort_key: SortKey) -> ProcessSnapshot:
        """
        Return the non-null handles of the snapshot ordered by sort_key.

        Each sort value is computed once and cached by pid, so comparisons
        never re-query a live process. The sort is stable; ties keep the
        enumeration order.
        """
        handles = [proc for proc in snapshot if proc is not None]
        cache = {proc.pid: self.sort_value(proc, sort_key) for proc in handles}
        # A KeyError here means a handle bypassed the cache and is a bug.
        return sorted(handles, key=lambda proc: cache[proc.pid], reverse=sort_key.descending)


class RowProjector:
    """Bounds an ordered snapshot and renders it as display rows."""

    def __init__(self, extractor: MetricExtractor) -> None:
        self._extractor = extractor

    def project(self, ordered: Iterable[psutil.Process | None], max_count: int) -> list[DisplayRow]:
        """Render at most max_count rows, skipping null handles."""
        rows: list[DisplayRow] = []
        for proc in ordered:
            if len(rows) >= max_count:
                break
            if proc is None:
                continue
            rows.append(self._extractor.row(proc))
        return rows


class ProcessMonitor:
    """
    Runs the collect, rank and project pipeline for one view configuration.

    Also wraps the two psutil operations needed to kill a process by pid.
    """

    def __init__(
        self,
        config: ViewConfig,
        collector: SnapshotCollector | None = None,
        extractor: MetricExtractor | None = None,
        resolve: Callable[[int], psutil.Process] = psutil.Process,
    ) -> None:
        extractor = extractor or MetricExtractor()
        self._config = config
        self._collector = collector or SnapshotCollector()
        self._ranking = RankingEngine(extractor)
        self._projector = RowProjector(extractor)
        self._resolve = resolve

    def prime(self) -> None:
        """Take the baseline readings the first snapshot needs."""
        self._collector.prime()

    @property
    def config(self) -> ViewConfig:
        """Get the view configuration."""
        return self._config

    def rows(self) -> list[DisplayRow]:
        """
        Build the display rows from a fresh snapshot.

        Raises:
            CollectionError: If the snapshot could not be collected.
        """
        started = time.perf_counter()
        snapshot = self._collector.collect()
        ordered = self._ranking.rank(snapshot, self._config.sort_key)
        rows = self._projector.project(ordered, self._config.count)
        log.debug(
            "refresh",
            processes=len(snapshot),
            rows=len(rows),
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return rows

    def resolve(self, pid: int) -> psutil.Process:
        """
        Look up a live process by pid.

        Raises:
            psutil.NoSuchProcess: If no process has that pid any more.
        """
        return self._resolve(pid)

    def kill(self, proc: psutil.Process) -> None:
        """Send the kill signal to a process."""
        proc.kill()
