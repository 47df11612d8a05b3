# ossim

Four small command-line simulators of classic operating-system algorithms.
Each reads a plain-text input file and prints its results.

| Command         | What it simulates                                      |
|-----------------|--------------------------------------------------------|
| `ossim-link`    | a two-pass linker for object modules                   |
| `ossim-sched`   | CPU process scheduling (FCFS, LCFS, SJF, RR, PRIO)     |
| `ossim-mmu`     | virtual memory with page-replacement algorithms        |
| `ossim-iosched` | disk I/O scheduling (FIFO, SSTF, SCAN, C-SCAN, F-SCAN) |

The CPU scheduler and the memory manager take their "random" numbers from a
*random file*. This is a text file whose first line is skipped (it normally
holds the count). After that comes one integer per line. The numbers are
read in order and reading starts again from the first number when the file
runs out, so every run can be reproduced exactly.

## Installation

```
pip install .
```

The package uses only the Python standard library and needs Python 3.10 or
later. To run the tests:

```
pip install .[test]
pytest
```

## Linker

```
ossim-link input.txt
```

The input is a sequence of modules. Each module has three parts:

* a definition list, `count (symbol address)*`
* a use list, `count symbol*`
* a program text, `count (type address)*`, where the type is `A`, `E`, `I` or `R`

The linker prints three things in order:

1. The symbol table. A symbol defined more than once is flagged and keeps its
   first value. A definition that lies beyond the end of its module is
   reported and set to relative zero.
2. The memory map, with relocated addresses and these errors:
   * illegal opcode or immediate value
   * relative address beyond the module
   * external address beyond the use list
   * undefined symbol
   * absolute address beyond the 512-word machine
3. Warnings for use-list entries that were never used, and for symbols that
   were defined but never used.

A syntax error stops the run with a message of the form
`Parse Error line L offset O: CODE`. The codes are:

* `NUM_EXPECTED`
* `SYM_EXPECTED`
* `ADDR_EXPECTED`
* `SYM_TOLONG`
* `TO_MANY_DEF_IN_MODULE`
* `TO_MANY_USE_IN_MODULE`
* `TO_MANY_INSTR`

Anything printed before the error is printed first.

In Python, `ossim.linker.link(text)` returns the full listing as a string.
On malformed input it raises `ossim.linker.ParseError`. The exception has
`code`, `line` and `offset` attributes, and `preceding` holds the output
produced before the error.

## CPU scheduler

```
ossim-sched [-v] -s<spec> inputfile randfile
```

Each line of the input file describes one process with four numbers: arrival
time, total CPU time, maximum CPU burst and maximum I/O burst. Each process
draws its static priority, from 1 to 4, from the random file. `-s` must be
given, and `<spec>` is one of:

* `F` – first come, first served
* `L` – last come, first served
* `S` – shortest remaining CPU time first
* `R<n>` – round robin with quantum `n`
* `P<n>` – priority scheduling with quantum `n`, using active and expired queues

`-v` prints every state transition. The report starts with the scheduler
name, followed by the quantum for `R` and `P`. After that comes one line per
process with its input parameters, static priority, finishing time,
turnaround time, I/O time and CPU waiting time.

The last line starts with `SUM:` and holds, in order:

* the finishing time
* CPU utilisation
* I/O utilisation
* average turnaround time
* average waiting time
* throughput per 100 time units

In Python, use the following:

* `ossim.cpusim.read_processes(lines, rng)` parses the input.
* `ossim.cpusim.simulate(processes, scheduler, rng, verbose)` runs the
  simulation and returns a `SimulationResult`.
* `ossim.cpusim.format_report(result, scheduler)` renders the report.
* `ossim.cpusched.make_scheduler(spec)` builds a scheduler from a spec
  string.

## Memory manager

```
ossim-mmu -a<algo> [-o<options>] [-f<frames>] inputfile randfile
```

Each non-comment line of the input is `op page`. `op` is `0` for a read and
any other value for a write. `page` is a virtual page from 0 to 63.

`-f` sets the number of physical frames. The default is 32, which is also
used for any value below 1.

`-a` must be given, and chooses the replacement algorithm:

* `f` – FIFO
* `r` – random
* `s` – second chance
* `c` – clock over frames
* `X` – clock over virtual pages
* `N` – NRU
* `l` – LRU
* `a` – aging over frames
* `Y` – aging over virtual pages

`-o` takes any combination of these letters:

* `O` – trace every instruction with its `UNMAP`, `OUT`, `IN`, `ZERO` and `MAP` operations
* `P` – print the final page table (`*` for a page never swapped out, `#` for a swapped-out page)
* `F` – print the final frame table
* `S` – print a summary line with the operation counts and the total cost

The total cost is:

* 1 per instruction
* 400 per map or unmap
* 3000 per page in or page out
* 150 per zeroed frame

In Python, `ossim.mmu.MMU(num_frames, replacer, options)` gives the same
behaviour. `MMU.access(operation, page)` returns the trace lines for one
instruction, and `MMU.report()` renders the selected sections.

## I/O scheduler

```
ossim-iosched -s<code> inputfile
```

Each non-comment line of the input is `time track`. `-s` must be given, and
`<code>` is one of:

* `i` – FIFO
* `j` – SSTF
* `s` – SCAN
* `c` – C-SCAN
* `f` – F-SCAN

The command prints one line starting with `SUM:` that holds, in order:

* the total time
* the total head movement
* the average turnaround time
* the average wait time
* the maximum wait time

## Using the building blocks

The policies are also available as plain classes:

* `ossim.iosched`:
  * `IORequest`
  * the schedulers `FIFOScheduler`, `SSTFScheduler`, `SCANScheduler`,
    `CSCANScheduler` and `FSCANScheduler`
  * `make_scheduler`

  These are driven by `ossim.iosim.IOSimulator`. `ossim.iosim.read_requests`
  parses the input.
* `ossim.cpusched`:
  * `Process`, `SimEvent` and `EventQueue`
  * the policies `FCFSScheduler`, `LCFSScheduler`, `SJFScheduler`,
    `RRScheduler` and `PRIOScheduler`
* `ossim.paging`:
  * `PageTableEntry`
  * the replacement policies `FIFOReplacer`, `RandomReplacer`,
    `SecondChanceReplacer`, `ClockFrameReplacer`, `ClockVirtualReplacer`,
    `NRUReplacer`, `LRUReplacer`, `AgingFrameReplacer` and
    `AgingVirtualReplacer`
  * `make_replacer(code, rng)`
* `ossim.randfile.RandomNumbers` reads random files and wraps around at the
  end. Build one with `from_file(path)` or `from_text(text)`.

## Limitations

* `ossim-iosched` has no verbose option and prints only the summary line.
  To get the per-request add, issue and finish trace, build an
  `IOSimulator(scheduler, verbose=True)` in Python and read its `trace` list
  after `run()`.
* The simulators only print text. They store nothing and produce no charts.