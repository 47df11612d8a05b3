"""Virtual memory manager simulating page faults over a small frame table."""

from __future__ import annotations

import getopt
import sys
from collections.abc import Iterable, Sequence

from ossim.paging import PageTableEntry, Replacer, make_replacer
from ossim.randfile import RandomNumbers

PAGE_COUNT = 64
DEFAULT_FRAMES = 32
_USAGE = (
    "inputfile and randfile are required.\n"
    "Input the required inputs in the format specified. "
    "[-aAlgo] [-oOptions] [-fFrameNumber] inputfile randfile"
)


class MMU:
    """Maps virtual pages onto physical frames and counts the work done.

    ``options`` is a string of letters: O traces every instruction, P, F and
    S add the page table, the frame table and the summary to the report.
    """

    def __init__(self, num_frames: int, replacer: Replacer, options: str = "") -> None:
        if num_frames < 1:
            num_frames = DEFAULT_FRAMES
        self.num_frames = num_frames
        self.replacer = replacer
        self.pages = [PageTableEntry() for _ in range(PAGE_COUNT)]
        self.frames: list[int] = []
        self.frame_to_page = [-1] * num_frames
        self.trace_ops = "O" in options
        self.show_pages = "P" in options
        self.show_frames = "F" in options
        self.show_summary = "S" in options
        self.instructions = 0
        self.maps = self.unmaps = self.ins = self.outs = self.zeros = 0

    def access(self, operation: int, page: int) -> list[str]:
        """Read (0) or write (other) a page; return the trace lines produced."""
        if not 0 <= page < len(self.pages):
            raise ValueError(f"page {page} out of range")
        lines: list[str] = []
        emit = lines.append if self.trace_ops else (lambda _line: None)
        now = self.instructions
        entry = self.pages[page]
        emit(f"==> inst: {operation} {page}")

        if not entry.present:
            if len(self.frames) < self.num_frames:
                frame = len(self.frames)
                self.frames.append(frame)
                emit(f"{now}: ZERO {frame:>8}")
                self.zeros += 1
            else:
                frame = self.replacer.get_frame(self.pages, self.frames, self.frame_to_page)
                old_page = self.frame_to_page[frame]
                old = self.pages[old_page]
                old.present = False
                old.referenced = False
                emit(f"{now}: UNMAP{old_page:>4}{frame:>4}")
                self.unmaps += 1
                if old.modified:
                    old.paged_out = True
                    old.modified = False
                    emit(f"{now}: OUT  {old_page:>4}{frame:>4}")
                    self.outs += 1
                if entry.paged_out:
                    emit(f"{now}: IN   {page:>4}{frame:>4}")
                    self.ins += 1
                else:
                    emit(f"{now}: ZERO {frame:>8}")
                    self.zeros += 1
            self.frame_to_page[frame] = page
            entry.frame = frame
            emit(f"{now}: MAP  {page:>4}{frame:>4}")
            self.maps += 1
            entry.present = True
        else:
            self.replacer.touch(self.frames, entry.frame)

        entry.referenced = True
        if operation != 0:
            entry.modified = True
        self.instructions += 1
        return lines

    @property
    def cost(self) -> int:
        return (
            self.instructions
            + 400 * (self.maps + self.unmaps)
            + 3000 * (self.ins + self.outs)
            + 150 * self.zeros
        )

    def report(self) -> str:
        """Render the sections selected by the P, F and S options."""
        out: list[str] = []
        if self.show_pages:
            cells = []
            for index, entry in enumerate(self.pages):
                if entry.present:
                    cells.append(
                        f"{index}:"
                        + ("R" if entry.referenced else "-")
                        + ("M" if entry.modified else "-")
                        + ("S " if entry.paged_out else "- ")
                    )
                else:
                    cells.append("# " if entry.paged_out else "* ")
            out.append("".join(cells))
        if self.show_frames:
            out.append("".join("* " if p == -1 else f"{p} " for p in self.frame_to_page))
        if self.show_summary:
            out.append(
                f"SUM {self.instructions} U={self.unmaps} M={self.maps} "
                f"I={self.ins} O={self.outs} Z={self.zeros} ===> {self.cost}"
            )
        return "".join(f"{line}\n" for line in out)


def read_instructions(lines: Iterable[str]) -> list[tuple[int, int]]:
    """Parse ``operation page`` lines, skipping comments and blank lines."""
    instructions = []
    for line in lines:
        if line.startswith("#") or not line.strip():
            continue
        fields = line.split()
        try:
            operation, page = int(fields[0]), int(fields[1])
        except (ValueError, IndexError):
            raise ValueError(f"bad instruction line: {line.rstrip()!r}") from None
        instructions.append((operation, page))
    return instructions


def main(argv: Sequence[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        options, rest = getopt.getopt(args, "a:o:f:")
    except getopt.GetoptError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 99

    code: str | None = None
    flags = ""
    num_frames = 0
    for option, value in options:
        if option == "-a":
            code = value[:1]
        elif option == "-o":
            flags = value
        elif option == "-f":
            try:
                num_frames = int(value)
            except ValueError:
                print(f"error: bad frame count {value!r}", file=sys.stderr)
                return 1

    if len(rest) != 2:
        print(_USAGE)
        return 99
    if code is None:
        print("error: an algorithm must be chosen with -a", file=sys.stderr)
        return 1

    try:
        rng = RandomNumbers.from_file(rest[1])
        replacer = make_replacer(code, rng)
        with open(rest[0], encoding="utf-8") as handle:
            instructions = read_instructions(handle)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    mmu = MMU(num_frames, replacer, flags)
    try:
        for operation, page in instructions:
            for line in mmu.access(operation, page):
                print(line)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    sys.stdout.write(mmu.report())
    return 0


if __name__ == "__main__":
    sys.exit(main())