"""Disk I/O request schedulers: FIFO, SSTF, SCAN, C-SCAN and F-SCAN."""

from __future__ import annotations

import bisect
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True)
class IORequest:
    """A disk request arriving at ``timestamp`` for track ``location``."""

    timestamp: int
    id: int
    location: int


def _insert_by_location(queue: list[IORequest], request: IORequest) -> None:
    """Insert keeping the queue ordered by track; equal tracks keep arrival order."""
    bisect.insort_right(queue, request, key=lambda r: r.location)


def _scan_pick(
    queue: list[IORequest], head: int, ascending: bool
) -> tuple[int, bool]:
    """Choose the next request for an elevator sweep.

    Returns the queue index of the chosen request and the sweep direction
    to use afterwards.
    """
    left: tuple[int, int] | None = None
    right: tuple[int, int] | None = None
    for index, request in enumerate(queue):
        distance = abs(request.location - head)
        if distance == 0:
            return index, ascending
        if request.location < head:
            if left is None or distance < left[1]:
                left = (index, distance)
        elif right is None or distance < right[1]:
            right = (index, distance)

    if left is None and right is None:
        raise IndexError("no pending requests")
    if ascending:
        if right is None:
            return left[0], False
        return right[0], True
    if left is None:
        return right[0], True
    return left[0], False


class IOScheduler(ABC):
    """Common interface of the disk schedulers.

    ``head`` is the track the disk head currently sits on.
    """

    def __init__(self) -> None:
        self.head = 0

    @abstractmethod
    def add(self, request: IORequest) -> None:
        """Queue a request."""

    @abstractmethod
    def next_request(self) -> IORequest:
        """Remove and return the request to serve next."""

    @abstractmethod
    def is_empty(self) -> bool:
        """Whether no request is waiting."""


class FIFOScheduler(IOScheduler):
    """Serves requests in the order they were queued."""

    def __init__(self) -> None:
        super().__init__()
        self._queue: deque[IORequest] = deque()

    def add(self, request: IORequest) -> None:
        self._queue.append(request)

    def next_request(self) -> IORequest:
        if not self._queue:
            raise IndexError("no pending requests")
        return self._queue.popleft()

    def is_empty(self) -> bool:
        return not self._queue


class SSTFScheduler(IOScheduler):
    """Shortest seek time first; ties go to the request queued earliest."""

    def __init__(self) -> None:
        super().__init__()
        self._queue: list[IORequest] = []

    def add(self, request: IORequest) -> None:
        self._queue.append(request)

    def next_request(self) -> IORequest:
        if not self._queue:
            raise IndexError("no pending requests")
        index, _ = min(
            enumerate(self._queue),
            key=lambda pair: abs(self.head - pair[1].location),
        )
        return self._queue.pop(index)

    def is_empty(self) -> bool:
        return not self._queue


class SCANScheduler(IOScheduler):
    """Elevator: sweeps upward, then downward, reversing at the last request."""

    def __init__(self) -> None:
        super().__init__()
        self._queue: list[IORequest] = []
        self._ascending = True

    def add(self, request: IORequest) -> None:
        _insert_by_location(self._queue, request)

    def next_request(self) -> IORequest:
        index, self._ascending = _scan_pick(self._queue, self.head, self._ascending)
        return self._queue.pop(index)

    def is_empty(self) -> bool:
        return not self._queue


class CSCANScheduler(IOScheduler):
    """Circular scan: sweeps upward only, wrapping to the lowest track."""

    def __init__(self) -> None:
        super().__init__()
        self._queue: list[IORequest] = []

    def add(self, request: IORequest) -> None:
        _insert_by_location(self._queue, request)

    def next_request(self) -> IORequest:
        if not self._queue:
            raise IndexError("no pending requests")
        index = next(
            (i for i, r in enumerate(self._queue) if r.location >= self.head), 0
        )
        return self._queue.pop(index)

    def is_empty(self) -> bool:
        return not self._queue


class FSCANScheduler(IOScheduler):
    """Scan over a frozen batch; new requests wait for the next batch."""

    def __init__(self) -> None:
        super().__init__()
        self._active: list[IORequest] = []
        self._pending: list[IORequest] = []
        self._ascending = True

    def add(self, request: IORequest) -> None:
        _insert_by_location(self._pending, request)

    def next_request(self) -> IORequest:
        if not self._active:
            self._active, self._pending = self._pending, self._active
            self._ascending = True
        index, self._ascending = _scan_pick(self._active, self.head, self._ascending)
        return self._active.pop(index)

    def is_empty(self) -> bool:
        return not self._active and not self._pending


_SCHEDULERS: dict[str, type[IOScheduler]] = {
    "i": FIFOScheduler,
    "j": SSTFScheduler,
    "s": SCANScheduler,
    "c": CSCANScheduler,
    "f": FSCANScheduler,
}


def make_scheduler(code: str) -> IOScheduler:
    """Build a scheduler from its one-letter code (i, j, s, c or f)."""
    try:
        return _SCHEDULERS[code]()
    except KeyError:
        raise ValueError(f"unknown scheduler {code!r}") from None