"""Cyclic reader for files of pre-generated random numbers.

The first line of such a file holds the count of numbers and is skipped.
Every following line holds one number. When the numbers run out, reading
starts again from the first number.
"""

from __future__ import annotations

from collections.abc import Iterable
from os import PathLike


class RandomNumbers:
    """Hands out the numbers of a random file in order, wrapping around."""

    def __init__(self, values: Iterable[int]) -> None:
        self._values = list(values)
        if not self._values:
            raise ValueError("random file holds no numbers")
        self._position = 0

    @classmethod
    def from_text(cls, text: str) -> RandomNumbers:
        """Parse the contents of a random file; the header line is skipped."""
        lines = text.splitlines()[1:]
        values = []
        for line in lines:
            stripped = line.strip()
            if not stripped:
                continue
            try:
                values.append(int(stripped.split()[0]))
            except ValueError:
                raise ValueError(f"not a number: {stripped!r}") from None
        return cls(values)

    @classmethod
    def from_file(cls, path: str | PathLike[str]) -> RandomNumbers:
        """Read a random file from disk."""
        with open(path, encoding="utf-8") as handle:
            return cls.from_text(handle.read())

    def next(self) -> int:
        """Return the next number, starting over after the last one."""
        value = self._values[self._position]
        self._position = (self._position + 1) % len(self._values)
        return value

    def __len__(self) -> int:
        return len(self._values)