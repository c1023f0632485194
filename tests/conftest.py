"""Shared test fixtures for proctable."""

from collections import Counter

import psutil
import pytest

from proctable.config import SortKey, ViewConfig
from proctable.controller import InteractionController
from proctable.monitor import ProcessMonitor, SnapshotCollector


class FakeProcess:
    """Stand-in for psutil.Process whose queries can be made to fail."""

    def __init__(
        self,
        pid: int,
        name: str = "proc",
        username: str = "user",
        cpu_percent: float = 0.0,
        memory_percent: float = 0.0,
        create_time: float = 1_700_000_000.0,
        status: str = "sleeping",
        fail: tuple[str, ...] = (),
    ) -> None:
        self.pid = pid
        self.fail = set(fail)
        self.calls: Counter[str] = Counter()
        self.killed = False
        self._values = {
            "name": name,
            "username": username,
            "cpu_percent": cpu_percent,
            "memory_percent": memory_percent,
            "create_time": create_time,
            "status": status,
        }

    def _get(self, field: str):
        self.calls[field] += 1
        if field in self.fail:
            raise psutil.AccessDenied(self.pid)
        return self._values[field]

    def name(self):
        return self._get("name")

    def username(self):
        return self._get("username")

    def cpu_percent(self):
        return self._get("cpu_percent")

    def memory_percent(self):
        return self._get("memory_percent")

    def create_time(self):
        return self._get("create_time")

    def status(self):
        return self._get("status")

    def kill(self):
        if "kill" in self.fail:
            raise psutil.AccessDenied(self.pid)
        self.killed = True


class FakeSystem:
    """A process table that fake processes can be added to and killed from."""

    def __init__(self, *processes: FakeProcess) -> None:
        self.processes = {proc.pid: proc for proc in processes}
        self.broken = False

    def process_iter(self, **kwargs):
        if self.broken:
            raise psutil.AccessDenied()
        return list(self.processes.values())

    def resolve(self, pid: int) -> FakeProcess:
        if pid not in self.processes:
            raise psutil.NoSuchProcess(pid)
        proc = self.processes[pid]
        return _Reaper(self, proc)


class _Reaper:
    """Handle returned by FakeSystem.resolve(); killing it removes the process."""

    def __init__(self, system: FakeSystem, proc: FakeProcess) -> None:
        self.pid = proc.pid
        self._system = system
        self._proc = proc

    def kill(self):
        self._proc.kill()
        del self._system.processes[self.pid]


def make_monitor(system: FakeSystem, sort_key: SortKey = SortKey.CPU, count: int = 32) -> ProcessMonitor:
    """Build a ProcessMonitor wired to a fake system."""
    return ProcessMonitor(
        ViewConfig(sort_key=sort_key, count=count),
        collector=SnapshotCollector(system.process_iter, prime_interval=0),
        resolve=system.resolve,
    )


@pytest.fixture
def system() -> FakeSystem:
    """Three processes with distinct CPU and memory usage."""
    return FakeSystem(
        FakeProcess(100, name="idle", cpu_percent=10.0, memory_percent=30.0),
        FakeProcess(4321, name="busy", cpu_percent=95.5, memory_percent=1.5),
        FakeProcess(200, name="worker", cpu_percent=40.2, memory_percent=12.0),
    )


@pytest.fixture
def controller(system: FakeSystem) -> InteractionController:
    """A started controller over the fake system, sorted by CPU."""
    controller = InteractionController(make_monitor(system))
    controller.start()
    return controller
