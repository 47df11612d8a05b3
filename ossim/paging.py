"""Page table entries and page replacement policies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import MutableSequence, Sequence

from ossim.randfile import RandomNumbers

_COUNTER_MASK = 0xFFFFFFFF
_AGING_TOP_BIT = 31
_NRU_RESET_INTERVAL = 10


@dataclass
class PageTableEntry:
    """One virtual page: its status bits and the frame it occupies."""

    present: bool = False
    referenced: bool = False
    modified: bool = False
    paged_out: bool = False
    frame: int = 0


class Replacer(ABC):
    """Chooses the physical frame to evict when no frame is free.

    ``frames`` lists the frame numbers in use, in the order the policy keeps
    them; ``frame_to_page`` maps each frame number to the page it holds.
    """

    def __init__(self, rng: RandomNumbers | None = None) -> None:
        self.rng = rng

    def touch(self, frames: MutableSequence[int], frame: int) -> None:
        """Record a hit on a resident frame; most policies ignore hits."""
        return None

    @abstractmethod
    def get_frame(
        self,
        pages: Sequence[PageTableEntry],
        frames: MutableSequence[int],
        frame_to_page: Sequence[int],
    ) -> int:
        """Return the frame number to reuse."""


def _rotate_front(frames: MutableSequence[int]) -> int:
    frame = frames.pop(0)
    frames.append(frame)
    return frame


class FIFOReplacer(Replacer):
    """Evicts the frame filled longest ago."""

    def get_frame(self, pages, frames, frame_to_page):
        return _rotate_front(frames)


class RandomReplacer(Replacer):
    """Evicts a frame picked with the next number from the random file."""

    def __init__(self, rng: RandomNumbers) -> None:
        super().__init__(rng)

    def get_frame(self, pages, frames, frame_to_page):
        return frames[self.rng.next() % len(frames)]


class SecondChanceReplacer(Replacer):
    """FIFO that spares, once, frames whose page was referenced."""

    def get_frame(self, pages, frames, frame_to_page):
        for _ in range(len(frames)):
            page = pages[frame_to_page[frames[0]]]
            if not page.referenced:
                break
            page.referenced = False
            _rotate_front(frames)
        return _rotate_front(frames)


class ClockFrameReplacer(Replacer):
    """Clock algorithm whose hand walks over the physical frames."""

    def __init__(self, rng: RandomNumbers | None = None) -> None:
        super().__init__(rng)
        self._hand = 0

    def get_frame(self, pages, frames, frame_to_page):
        count = len(frames)
        while True:
            frame = frames[self._hand]
            page = pages[frame_to_page[frame]]
            if not page.referenced:
                break
            page.referenced = False
            self._hand = (self._hand + 1) % count
        self._hand = (self._hand + 1) % count
        return frame


class ClockVirtualReplacer(Replacer):
    """Clock algorithm whose hand walks over the virtual pages."""

    def __init__(self, rng: RandomNumbers | None = None) -> None:
        super().__init__(rng)
        self._hand = 0

    def get_frame(self, pages, frames, frame_to_page):
        if not any(page.present for page in pages):
            raise LookupError("no resident page to evict")
        count = len(pages)
        while True:
            page = pages[self._hand]
            if page.present:
                if not page.referenced:
                    break
                page.referenced = False
            self._hand = (self._hand + 1) % count
        self._hand = (self._hand + 1) % count
        return page.frame


class NRUReplacer(Replacer):
    """Not recently used: picks at random from the lowest non-empty class.

    Every tenth call clears the referenced bit of every resident page.
    """

    def __init__(self, rng: RandomNumbers) -> None:
        super().__init__(rng)
        self._calls = 0

    def get_frame(self, pages, frames, frame_to_page):
        classes: list[list[PageTableEntry]] = [[], [], [], []]
        for page in pages:
            if page.present:
                classes[2 * int(page.referenced) + int(page.modified)].append(page)
        candidates = next((group for group in classes if group), None)
        if candidates is None:
            raise LookupError("no resident page to evict")
        frame = candidates[self.rng.next() % len(candidates)].frame

        self._calls += 1
        if self._calls == _NRU_RESET_INTERVAL:
            for page in pages:
                if page.present:
                    page.referenced = False
            self._calls = 0
        return frame


class LRUReplacer(Replacer):
    """Least recently used: hits move a frame to the back of the list."""

    def touch(self, frames, frame):
        if frame in frames:
            frames.remove(frame)
        frames.append(frame)

    def get_frame(self, pages, frames, frame_to_page):
        return _rotate_front(frames)


class AgingFrameReplacer(Replacer):
    """Aging with one 32-bit counter per physical frame."""

    def __init__(self, rng: RandomNumbers | None = None) -> None:
        super().__init__(rng)
        self._counters: list[int] = []

    def get_frame(self, pages, frames, frame_to_page):
        if not self._counters:
            self._counters = [0] * len(frames)
        counters = self._counters
        for index, frame in enumerate(frames):
            page = pages[frame_to_page[frame]]
            counters[index] = (
                (counters[index] >> 1) | (int(page.referenced) << _AGING_TOP_BIT)
            ) & _COUNTER_MASK
            page.referenced = False
        victim = min(range(len(frames)), key=counters.__getitem__)
        counters[victim] = 0
        return frames[victim]


class AgingVirtualReplacer(Replacer):
    """Aging with one 32-bit counter per virtual page."""

    def __init__(self, rng: RandomNumbers | None = None) -> None:
        super().__init__(rng)
        self._counters: list[int] = []

    def get_frame(self, pages, frames, frame_to_page):
        if not self._counters:
            self._counters = [0] * len(pages)
        counters = self._counters
        for index, page in enumerate(pages):
            counters[index] = (
                (counters[index] >> 1) | (int(page.referenced) << _AGING_TOP_BIT)
            ) & _COUNTER_MASK
            if page.present:
                page.referenced = False
        resident = [index for index, page in enumerate(pages) if page.present]
        if not resident:
            raise LookupError("no resident page to evict")
        victim = min(resident, key=counters.__getitem__)
        counters[victim] = 0
        return pages[victim].frame


_REPLACERS: dict[str, type[Replacer]] = {
    "f": FIFOReplacer,
    "r": RandomReplacer,
    "s": SecondChanceReplacer,
    "c": ClockFrameReplacer,
    "X": ClockVirtualReplacer,
    "N": NRUReplacer,
    "l": LRUReplacer,
    "a": AgingFrameReplacer,
    "Y": AgingVirtualReplacer,
}


def make_replacer(code: str, rng: RandomNumbers) -> Replacer:
    """Build a policy from its one-letter code (f, r, s, c, X, N, l, a, Y)."""
    try:
        cls = _REPLACERS[code]
    except KeyError:
        raise ValueError(f"unknown replacement algorithm {code!r}") from None
    return cls(rng)