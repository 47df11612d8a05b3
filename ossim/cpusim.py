"""Event-driven simulation of CPU scheduling with random CPU and I/O bursts."""

from __future__ import annotations

import getopt
import math
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from ossim.cpusched import (
    NO_QUANTUM,
    EventQueue,
    Process,
    ProcessScheduler,
    SimEvent,
    Transition,
    make_scheduler,
)
from ossim.randfile import RandomNumbers

_USAGE = (
    "inputfile and randfile are required.\n"
    "Input the required inputs in the format specified. "
    "[-v] [-s<schedspec>] inputfile randfile"
)

_STATE_NAMES = {
    Transition.CREATED_TO_READY: "CREATED -> READY",
    Transition.READY_TO_RUNNING: "READY -> RUNNG",
    Transition.RUNNING_TO_BLOCKED: "RUNNG -> BLOCK",
    Transition.BLOCKED_TO_READY: "BLOCK -> READY",
    Transition.RUNNING_TO_READY: "RUNNG -> READY",
    Transition.DONE: "Done",
}


@dataclass
class SimulationResult:
    """Processes after the run together with the overall figures."""

    processes: list[Process]
    finish_time: int
    cpu_util: float
    io_util: float
    avg_turnaround: float
    avg_waiting: float
    throughput: float
    trace: list[str] = field(default_factory=list)


def _ratio(numerator: float, denominator: float) -> float:
    if denominator:
        return numerator / denominator
    if numerator == 0:
        return math.nan
    return math.copysign(math.inf, numerator)


def _io_busy_time(segments: Iterable[tuple[int, int]]) -> int:
    """Length of the union of the given half-open time segments."""
    covered = 0
    end: int | None = None
    for begin, stop in sorted(segments):
        if end is None or end <= begin:
            covered += stop - begin
            end = stop
        elif end < stop:
            covered += stop - end
            end = stop
    return covered


def read_processes(lines: Iterable[str], rng: RandomNumbers) -> list[Process]:
    """Parse ``arrival total_cpu max_cpu_burst max_io_burst`` lines.

    Each process draws its static priority (1 to 4) from ``rng``.
    """
    processes: list[Process] = []
    for line in lines:
        fields = line.split()
        if not fields:
            continue
        try:
            arrival, total, cpu_burst, io_burst = (int(f) for f in fields[:4])
        except ValueError:
            raise ValueError(f"bad process line: {line.rstrip()!r}") from None
        process = Process(len(processes), arrival, total, cpu_burst, io_burst)
        priority = 1 + rng.next() % 4
        process.priority = priority
        process.dynamic_priority = priority
        processes.append(process)
    return processes


def _describe(now: int, transition: Transition, process: Process) -> str:
    parts = [f"{now} {process.pid} {process.prev_state_time}: {_STATE_NAMES[transition]}"]
    if transition is Transition.RUNNING_TO_READY:
        parts.append(" ")
    if transition in (Transition.READY_TO_RUNNING, Transition.RUNNING_TO_READY):
        parts.append(f" cb={process.remaining_burst}")
    if transition is Transition.RUNNING_TO_BLOCKED:
        parts.append(f"  ib={process.io_burst}")
    if transition in (
        Transition.READY_TO_RUNNING,
        Transition.RUNNING_TO_BLOCKED,
        Transition.RUNNING_TO_READY,
    ):
        parts.append(f" rem={process.remaining_cpu}")
    if transition in (Transition.READY_TO_RUNNING, Transition.RUNNING_TO_READY):
        parts.append(f" prio={process.dynamic_priority}")
    return "".join(parts)


def simulate(
    processes: Sequence[Process],
    scheduler: ProcessScheduler,
    rng: RandomNumbers,
    verbose: bool = False,
) -> SimulationResult:
    """Run every process to completion under ``scheduler``."""
    table = {process.pid: process for process in processes}
    trace: list[str] = []
    events = EventQueue()
    for process in processes:
        events.put(SimEvent(process.arrival_time, process.pid, Transition.CREATED_TO_READY))

    quantum = scheduler.quantum
    next_available = 0
    now = 0
    io_segments: list[tuple[int, int]] = []

    def log(transition: Transition, process: Process) -> None:
        if verbose:
            trace.append(_describe(now, transition, process))

    def make_ready(event: SimEvent, process: Process) -> None:
        log(event.transition, process)
        events.put(SimEvent(now, process.pid, Transition.READY_TO_RUNNING, in_ready=now))
        process.last_ready = event.timestamp
        process.dynamic_priority -= 1
        scheduler.add_process(process)

    def start_burst(process: Process, length: int, transition: Transition) -> None:
        nonlocal next_available
        events.put(SimEvent(now + length, process.pid, transition))
        process.remaining_burst = 0
        process.remaining_cpu -= length
        process.prev_state_time = length
        process.dynamic_priority = process.priority
        next_available = now + length

    while len(events):
        event = events.pop()
        process = table[event.pid]
        now = max(now, event.timestamp)
        transition = event.transition

        if transition is Transition.CREATED_TO_READY:
            log(transition, process)
            events.put(
                SimEvent(process.arrival_time, process.pid, Transition.READY_TO_RUNNING, in_ready=now)
            )
            process.dynamic_priority -= 1
            process.last_ready = event.timestamp
            scheduler.add_process(process)

        elif transition is Transition.READY_TO_RUNNING:
            if event.timestamp < next_available:
                if process.last_ready < 0:
                    process.last_ready = event.timestamp
                event.timestamp = next_available
                events.put(event)
                continue
            process = table[scheduler.next_process().pid]
            waited = event.timestamp - process.last_ready
            process.prev_state_time = waited
            process.cpu_waiting_time += waited
            if process.remaining_burst == 0:
                drawn = 1 + rng.next() % process.max_cpu_burst
                process.remaining_burst = min(drawn, process.remaining_cpu)
            burst = process.remaining_burst
            if quantum <= burst:
                log(transition, process)
                if quantum < burst:
                    events.put(SimEvent(now + quantum, process.pid, Transition.RUNNING_TO_READY))
                    process.remaining_burst = burst - quantum
                    process.prev_state_time = quantum
                    process.remaining_cpu -= quantum
                    next_available = now + quantum
                else:
                    finished = burst == process.remaining_cpu
                    start_burst(
                        process,
                        burst,
                        Transition.DONE if finished else Transition.RUNNING_TO_BLOCKED,
                    )
            elif process.remaining_cpu <= burst:
                log(transition, process)
                remaining = process.remaining_cpu
                events.put(SimEvent(now + remaining, process.pid, Transition.DONE))
                process.remaining_burst = 0
                next_available = now + remaining
                process.prev_state_time = remaining
                process.remaining_cpu = 0
            else:
                log(transition, process)
                start_burst(process, burst, Transition.RUNNING_TO_BLOCKED)
            process.last_ready = -1

        elif transition is Transition.RUNNING_TO_BLOCKED:
            io_burst = 1 + rng.next() % process.max_io_burst
            process.io_burst = io_burst
            log(transition, process)
            events.put(SimEvent(now + io_burst, process.pid, Transition.BLOCKED_TO_READY))
            process.io_time += io_burst
            io_segments.append((now, now + io_burst))
            process.prev_state_time = io_burst
            process.dynamic_priority = process.priority

        elif transition in (Transition.BLOCKED_TO_READY, Transition.RUNNING_TO_READY):
            make_ready(event, process)

        else:
            log(transition, process)
            process.prev_state_time = 0
            process.finishing_time = now

    count = len(processes)
    total_cpu = sum(p.total_cpu for p in processes)
    return SimulationResult(
        processes=list(processes),
        finish_time=now,
        cpu_util=_ratio(total_cpu, now) * 100.0,
        io_util=_ratio(_io_busy_time(io_segments), now) * 100.0,
        avg_turnaround=_ratio(sum(p.turnaround_time for p in processes), count),
        avg_waiting=_ratio(sum(p.cpu_waiting_time for p in processes), count),
        throughput=_ratio(count, now / 100.0),
        trace=trace,
    )


def format_report(result: SimulationResult, scheduler: ProcessScheduler) -> str:
    """Render the per-process table and the summary line."""
    header = scheduler.name
    if scheduler.quantum < NO_QUANTUM:
        header += f" {scheduler.quantum}"
    lines = [header]
    for index, p in enumerate(result.processes):
        lines.append(
            f"{index:04d}: {p.arrival_time:4d} {p.total_cpu:4d} {p.max_cpu_burst:4d} "
            f"{p.max_io_burst:4d} {p.priority} | {p.finishing_time:5d} "
            f"{p.turnaround_time:5d} {p.io_time:5d} {p.cpu_waiting_time:5d}"
        )
    lines.append(
        f"SUM: {result.finish_time} {result.cpu_util:.2f} {result.io_util:.2f} "
        f"{result.avg_turnaround:.2f} {result.avg_waiting:.2f} {result.throughput:.3f}"
    )
    return "\n".join(lines) + "\n"


def main(argv: Sequence[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        options, rest = getopt.getopt(args, "vs:")
    except getopt.GetoptError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 99

    verbose = False
    spec: str | None = None
    for option, value in options:
        if option == "-v":
            verbose = True
        elif option == "-s":
            spec = value

    if len(rest) != 2:
        print(_USAGE)
        return 99
    if spec is None:
        print("error: a scheduler must be chosen with -s", file=sys.stderr)
        return 1
    try:
        scheduler = make_scheduler(spec)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        rng = RandomNumbers.from_file(rest[1])
        with open(rest[0], encoding="utf-8") as handle:
            processes = read_processes(handle, rng)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    result = simulate(processes, scheduler, rng, verbose)
    for line in result.trace:
        print(line)
    sys.stdout.write(format_report(result, scheduler))
    return 0


if __name__ == "__main__":
    sys.exit(main())