"""Processes, timed events and ready-queue policies for CPU scheduling."""

from __future__ import annotations

import bisect
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from enum import IntEnum

NO_QUANTUM = 9999
PRIORITY_LEVELS = 4


class Transition(IntEnum):
    """State changes a simulation event can carry."""

    CREATED_TO_READY = 0
    READY_TO_RUNNING = 1
    RUNNING_TO_BLOCKED = 2
    BLOCKED_TO_READY = 3
    RUNNING_TO_READY = 4
    DONE = 5


@dataclass
class Process:
    """A simulated process with its input parameters and accumulated times."""

    pid: int
    arrival_time: int
    total_cpu: int
    max_cpu_burst: int
    max_io_burst: int
    priority: int = 0
    dynamic_priority: int = 0
    remaining_cpu: int = field(init=False)
    io_burst: int = 0
    remaining_burst: int = 0
    last_ready: int = 0
    prev_state_time: int = 0
    finishing_time: int = 0
    io_time: int = 0
    cpu_waiting_time: int = 0

    def __post_init__(self) -> None:
        self.remaining_cpu = self.total_cpu

    @property
    def turnaround_time(self) -> int:
        return self.finishing_time - self.arrival_time


@dataclass
class SimEvent:
    """A transition of process ``pid`` due at ``timestamp``."""

    timestamp: int
    pid: int
    transition: Transition
    in_ready: int = 0


class EventQueue:
    """Events ordered by timestamp; equal timestamps keep insertion order."""

    def __init__(self) -> None:
        self._events: list[SimEvent] = []

    def put(self, event: SimEvent) -> None:
        bisect.insort_right(self._events, event, key=lambda e: e.timestamp)

    def pop(self) -> SimEvent:
        if not self._events:
            raise IndexError("event queue is empty")
        return self._events.pop(0)

    def __len__(self) -> int:
        return len(self._events)


class ProcessScheduler(ABC):
    """A ready-queue policy with a name and a time quantum."""

    name: str = ""

    def __init__(self, quantum: int = NO_QUANTUM) -> None:
        self.quantum = quantum

    @abstractmethod
    def add_process(self, process: Process) -> None:
        """Put a process on the ready queue."""

    @abstractmethod
    def next_process(self) -> Process:
        """Remove and return the process to run next."""


class _SingleQueueScheduler(ProcessScheduler):
    def __init__(self, quantum: int = NO_QUANTUM) -> None:
        super().__init__(quantum)
        self._ready: deque[Process] = deque()

    def add_process(self, process: Process) -> None:
        process.dynamic_priority = process.priority - 1
        self._ready.append(process)

    def next_process(self) -> Process:
        if not self._ready:
            raise IndexError("ready queue is empty")
        return self._ready.popleft()

    def __len__(self) -> int:
        return len(self._ready)


class FCFSScheduler(_SingleQueueScheduler):
    """First come, first served."""

    name = "FCFS"

    def add_process(self, process: Process) -> None:
        super().add_process(process)

    def next_process(self) -> Process:
        return super().next_process()


class LCFSScheduler(_SingleQueueScheduler):
    """Last come, first served."""

    name = "LCFS"

    def add_process(self, process: Process) -> None:
        super().add_process(process)

    def next_process(self) -> Process:
        if not self._ready:
            raise IndexError("ready queue is empty")
        return self._ready.pop()


class SJFScheduler(_SingleQueueScheduler):
    """Shortest remaining CPU time first; ties go to the earliest queued."""

    name = "SJF"

    def add_process(self, process: Process) -> None:
        super().add_process(process)

    def next_process(self) -> Process:
        if not self._ready:
            raise IndexError("ready queue is empty")
        chosen = min(self._ready, key=lambda p: p.remaining_cpu)
        self._ready.remove(chosen)
        return chosen


class RRScheduler(_SingleQueueScheduler):
    """Round robin; preemption by quantum is driven by the simulation."""

    name = "RR"

    def add_process(self, process: Process) -> None:
        super().add_process(process)

    def next_process(self) -> Process:
        return super().next_process()


class PRIOScheduler(ProcessScheduler):
    """Multi-level priority with active and expired queues.

    A process whose dynamic priority has dropped to -1 has its priority
    reset and waits in the expired queues; once every active queue is empty
    the two sets are swapped.
    """

    name = "PRIO"

    def __init__(self, quantum: int = NO_QUANTUM) -> None:
        super().__init__(quantum)
        self._active: list[deque[Process]] = [deque() for _ in range(PRIORITY_LEVELS)]
        self._expired: list[deque[Process]] = [deque() for _ in range(PRIORITY_LEVELS)]

    def add_process(self, process: Process) -> None:
        if process.dynamic_priority == -1:
            process.dynamic_priority = process.priority - 1
            target = self._expired
        else:
            target = self._active
        level = process.dynamic_priority
        if not 0 <= level < PRIORITY_LEVELS:
            raise ValueError(f"priority level {level} out of range")
        target[level].append(process)

    def next_process(self) -> Process:
        if not any(self._active):
            self._active, self._expired = self._expired, self._active
        for queue in reversed(self._active):
            if queue:
                return queue.popleft()
        raise IndexError("ready queue is empty")


_SIMPLE = {"F": FCFSScheduler, "L": LCFSScheduler, "S": SJFScheduler}
_QUANTUM = {"R": RRScheduler, "P": PRIOScheduler}


def make_scheduler(spec: str) -> ProcessScheduler:
    """Build a scheduler from F, L, S, R<quantum> or P<quantum>."""
    if not spec:
        raise ValueError("empty scheduler spec")
    kind, rest = spec[0], spec[1:]
    if kind in _SIMPLE:
        return _SIMPLE[kind](NO_QUANTUM)
    if kind in _QUANTUM:
        digits = rest.strip()
        try:
            quantum = int(digits)
        except ValueError:
            raise ValueError(f"bad quantum in scheduler spec {spec!r}") from None
        return _QUANTUM[kind](quantum)
    raise ValueError(f"unknown scheduler spec {spec!r}")