"""Discrete-event simulation of a disk serving timed I/O requests."""

from __future__ import annotations

import bisect
import getopt
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ossim.iosched import IORequest, IOScheduler, make_scheduler

_USAGE = (
    "inputfile is required.\n"
    "Input the required inputs in the format specified. -sScheduler inputfile"
)


@dataclass(frozen=True)
class IOSummary:
    """Totals and averages of one simulation run."""

    total_time: int
    total_movement: int
    avg_turnaround: float
    avg_wait: float
    max_wait: int

    def __str__(self) -> str:
        return (
            f"SUM: {self.total_time} {self.total_movement} "
            f"{self.avg_turnaround:.2f} {self.avg_wait:.2f} {self.max_wait}"
        )


class IOSimulator:
    """Feeds requests to a scheduler in arrival order and times the disk.

    With ``verbose`` set, ``trace`` collects one line per add, issue and
    finish.
    """

    def __init__(self, scheduler: IOScheduler, verbose: bool = False) -> None:
        self.scheduler = scheduler
        self.verbose = verbose
        self.trace: list[str] = []
        self._arrivals: list[IORequest] = []

    def add(self, request: IORequest) -> None:
        """Queue a request by arrival time; equal times keep insertion order."""
        bisect.insort_right(self._arrivals, request, key=lambda r: r.timestamp)

    def _log(self, line: str) -> None:
        if self.verbose:
            self.trace.append(line)

    def run(self) -> IOSummary:
        """Serve every queued request and return the summary."""
        arrivals = self._arrivals
        sched = self.scheduler
        total = len(arrivals)
        current: IORequest | None = None
        running = False
        now = head = 0
        turnaround = wait = max_wait = movement = 0

        while running or arrivals or not sched.is_empty():
            if not running:
                if sched.is_empty():
                    current = arrivals.pop(0)
                    sched.add(current)
                    now = current.timestamp
                    self._log(f"{current.timestamp}:{current.id:>6} add {current.location}")
                else:
                    current = sched.next_request()
                    self._log(f"{now}:{current.id:>6} issue {current.location} {head}")
                    movement += abs(head - current.location)
                    waiting = abs(now - current.timestamp)
                    wait += waiting
                    max_wait = max(max_wait, waiting)
                    running = True
            else:
                available = now + abs(head - current.location)
                while arrivals and arrivals[0].timestamp <= available:
                    arrived = arrivals.pop(0)
                    sched.add(arrived)
                    self._log(f"{arrived.timestamp}:{arrived.id:>6} add {arrived.location}")
                    now = arrived.timestamp
                head = current.location
                sched.head = head
                now = available
                turnaround += now - current.timestamp
                self._log(f"{now}:{current.id:>6} finish {now - current.timestamp}")
                running = False

        if total:
            avg_turnaround, avg_wait = turnaround / total, wait / total
        else:
            avg_turnaround = avg_wait = float("nan")
        return IOSummary(now, movement, avg_turnaround, avg_wait, max_wait)


def _leading_ints(line: str, count: int) -> list[int]:
    values: list[int] = []
    for token in line.split()[:count]:
        try:
            values.append(int(token))
        except ValueError:
            break
    return values + [-1] * (count - len(values))


def read_requests(lines: Iterable[str]) -> list[IORequest]:
    """Parse ``time track`` lines, skipping comments and blank lines."""
    requests = []
    for line in lines:
        if line.startswith("#") or not line.strip():
            continue
        timestamp, track = _leading_ints(line, 2)
        requests.append(IORequest(timestamp, len(requests), track))
    return requests


def main(argv: Sequence[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        options, rest = getopt.getopt(args, "s:")
    except getopt.GetoptError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 99

    code = None
    for option, value in options:
        if option == "-s":
            code = value[:1]

    if len(rest) != 1:
        print(_USAGE)
        return 99
    if code is None:
        print("error: a scheduler must be chosen with -s", file=sys.stderr)
        return 1
    try:
        scheduler = make_scheduler(code)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        with open(rest[0], encoding="utf-8") as handle:
            requests = read_requests(handle)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    simulator = IOSimulator(scheduler)
    for request in requests:
        simulator.add(request)
    print(simulator.run())
    return 0


if __name__ == "__main__":
    sys.exit(main())