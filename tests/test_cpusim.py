import pytest

from ossim.cpusched import make_scheduler
from ossim.cpusim import format_report, read_processes, simulate
from ossim.cpusim import main
from ossim.randfile import RandomNumbers

PROCESS_LINES = ["0 100 10 10", "500 100 20 10", "10 50 5 3", "20 60 8 12"]
RANDOM_VALUES = [7, 3, 15, 1, 22, 9, 4, 18, 2, 11, 6, 13]
SPECS = ["F", "L", "S", "R2", "R5", "P2", "P4"]


def _run(spec, lines=PROCESS_LINES, values=RANDOM_VALUES, verbose=False):
    rng = RandomNumbers(values)
    processes = read_processes(lines, rng)
    scheduler = make_scheduler(spec)
    return simulate(processes, scheduler, rng, verbose), scheduler


def test_read_processes_assigns_ids_and_priorities():
    rng = RandomNumbers(RANDOM_VALUES)
    processes = read_processes(PROCESS_LINES + [""], rng)
    assert [p.pid for p in processes] == list(range(len(PROCESS_LINES)))
    assert [p.arrival_time for p in processes] == [0, 500, 10, 20]
    assert all(1 <= p.priority <= 4 for p in processes)
    assert all(p.dynamic_priority == p.priority for p in processes)
    assert all(p.remaining_cpu == p.total_cpu for p in processes)


def test_read_processes_rejects_garbage():
    with pytest.raises(ValueError):
        read_processes(["0 10 x 3"], RandomNumbers([1]))


@pytest.mark.parametrize("spec", SPECS)
def test_time_accounting_invariant(spec):
    result, _ = _run(spec)
    for p in result.processes:
        assert p.remaining_cpu == 0
        assert p.turnaround_time == p.total_cpu + p.io_time + p.cpu_waiting_time
        assert p.finishing_time <= result.finish_time
    assert max(p.finishing_time for p in result.processes) == result.finish_time


@pytest.mark.parametrize("spec", SPECS)
def test_utilisation_bounds(spec):
    result, _ = _run(spec)
    total_cpu = sum(p.total_cpu for p in result.processes)
    total_io = sum(p.io_time for p in result.processes)
    assert result.cpu_util == pytest.approx(total_cpu / result.finish_time * 100.0)
    assert 0.0 < result.cpu_util <= 100.0
    assert 0.0 <= result.io_util <= total_io / result.finish_time * 100.0 + 1e-9
    assert result.avg_turnaround == pytest.approx(
        sum(p.turnaround_time for p in result.processes) / len(result.processes)
    )


def test_single_process_without_io():
    result, scheduler = _run("F", ["0 5 5 3"], [4], verbose=True)
    assert result.finish_time == 5
    assert result.cpu_util == pytest.approx(100.0)
    assert result.io_util == 0.0
    assert result.avg_waiting == 0.0
    assert result.trace == [
        "0 0 0: CREATED -> READY",
        "0 0 0: READY -> RUNNG cb=5 rem=5 prio=0",
        "5 0 5: Done",
    ]
    report = format_report(result, scheduler).splitlines()
    assert report[0] == "FCFS"
    assert report[-1].startswith("SUM: 5 100.00 0.00")


def test_single_process_io_is_fully_counted():
    result, _ = _run("F", ["0 30 5 7"], RANDOM_VALUES)
    (process,) = result.processes
    assert process.io_time > 0
    assert result.io_util == pytest.approx(process.io_time / result.finish_time * 100.0)


def test_round_robin_preempts_long_bursts():
    result, _ = _run("R2", ["0 20 20 4"], [19], verbose=True)
    assert any("RUNNG -> READY" in line for line in result.trace)
    assert result.processes[0].turnaround_time == 20


def test_report_layout():
    result, scheduler = _run("R5")
    lines = format_report(result, scheduler).splitlines()
    assert lines[0] == "RR 5"
    assert len(lines) == len(PROCESS_LINES) + 2
    assert lines[1].startswith("0000: ")
    assert lines[-1].split()[1] == str(result.finish_time)


def test_simulation_is_deterministic():
    first, _ = _run("P2")
    second, _ = _run("P2")
    assert [p.finishing_time for p in first.processes] == [
        p.finishing_time for p in second.processes
    ]


def test_main_requires_two_files(capsys):
    assert main(["-sF", "only-one"]) == 99
    assert "inputfile and randfile are required" in capsys.readouterr().out


def test_main_runs_from_files(tmp_path, capsys):
    procs = tmp_path / "input"
    procs.write_text("\n".join(PROCESS_LINES) + "\n")
    rand = tmp_path / "rfile"
    rand.write_text(f"{len(RANDOM_VALUES)}\n" + "\n".join(map(str, RANDOM_VALUES)) + "\n")
    assert main(["-v", "-sS", str(procs), str(rand)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].endswith("CREATED -> READY")
    assert "SJF" in out
    assert out[-1].startswith("SUM: ")


def test_main_rejects_unknown_scheduler(tmp_path):
    procs = tmp_path / "input"
    procs.write_text("0 5 5 3\n")
    rand = tmp_path / "rfile"
    rand.write_text("1\n4\n")
    assert main(["-sZ", str(procs), str(rand)]) == 1