"""Two-pass linker for a toy object-module format.

The input is a sequence of modules. Each module is a definition list
(``count (symbol address)*``), a use list (``count symbol*``) and a program
text (``count (type address)*``) whose types are A, E, I or R.
"""

from __future__ import annotations

import re
import sys
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

MACHINE_SIZE = 512
MAX_LIST_LENGTH = 16
MAX_SYMBOL_LENGTH = 16
_ADDRESS_TYPES = frozenset("AEIR")
_WORD_PATTERN = re.compile(r"\S+")

_ILLEGAL_OPCODE = "Error: Illegal opcode; treated as 9999"
_ILLEGAL_IMMEDIATE = "Error: Illegal immediate value; treated as 9999"
_RELATIVE_TOO_BIG = "Error: Relative address exceeds module size; zero used"
_EXTERNAL_TOO_BIG = (
    "Error: External address exceeds length of uselist; treated as immediate"
)
_ABSOLUTE_TOO_BIG = "Error: Absolute address exceeds machine size; zero used"
_MULTIPLY_DEFINED = " Error: This variable is multiple times defined; first value used"


class ParseError(Exception):
    """A syntax error in the input, located by line and 1-based column.

    ``preceding`` holds the output produced before the error was found.
    """

    def __init__(self, code: str, line: int, offset: int) -> None:
        self.code = code
        self.line = line
        self.offset = offset
        self.preceding = ""
        super().__init__(f"Parse Error line {line} offset {offset}: {code}")


@dataclass(frozen=True)
class _Word:
    text: str
    line: int
    offset: int


class _WordStream:
    """Words of the input with their positions, read front to back."""

    def __init__(self, text: str) -> None:
        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        self._words = [
            _Word(match.group(), number, match.start() + 1)
            for number, raw in enumerate(lines, 1)
            for match in _WORD_PATTERN.finditer(raw)
        ]
        self._position = 0
        if lines:
            self.end = (len(lines), len(lines[-1]) + 1)
        else:
            self.end = (0, 1)

    @property
    def exhausted(self) -> bool:
        return self._position >= len(self._words)

    def take(self) -> _Word | None:
        if self.exhausted:
            return None
        word = self._words[self._position]
        self._position += 1
        return word

    def fail(self, code: str, word: _Word | None) -> ParseError:
        if word is None:
            return ParseError(code, *self.end)
        return ParseError(code, word.line, word.offset)


@dataclass
class _Module:
    number: int
    base: int
    definitions: list[tuple[str, int]] = field(default_factory=list)
    uses: list[str] = field(default_factory=list)
    instructions: list[tuple[str, int]] = field(default_factory=list)


def _is_number(text: str) -> bool:
    return text.isascii() and text.isdigit()


def _read_number(words: _WordStream) -> int:
    word = words.take()
    if word is None or not _is_number(word.text):
        raise words.fail("NUM_EXPECTED", word)
    return int(word.text)


def _read_count(words: _WordStream, limit: int, code: str) -> int:
    word = words.take()
    if word is None or not _is_number(word.text):
        raise words.fail("NUM_EXPECTED", word)
    count = int(word.text)
    if count > limit:
        raise words.fail(code, word)
    return count


def _read_symbol(words: _WordStream) -> str:
    word = words.take()
    if word is None or not (word.text[0].isascii() and word.text[0].isalpha()):
        raise words.fail("SYM_EXPECTED", word)
    if len(word.text) > MAX_SYMBOL_LENGTH:
        raise words.fail("SYM_TOLONG", word)
    return word.text


def _read_address_type(words: _WordStream) -> str:
    word = words.take()
    if word is None or word.text not in _ADDRESS_TYPES:
        raise words.fail("ADDR_EXPECTED", word)
    return word.text


def _parse_modules(text: str) -> Iterator[_Module]:
    """Yield the modules of ``text`` one at a time, raising on bad syntax."""
    words = _WordStream(text)
    base = 0
    number = 1
    while not words.exhausted:
        module = _Module(number, base)
        for _ in range(_read_count(words, MAX_LIST_LENGTH, "TO_MANY_DEF_IN_MODULE")):
            name = _read_symbol(words)
            module.definitions.append((name, _read_number(words)))
        for _ in range(_read_count(words, MAX_LIST_LENGTH, "TO_MANY_USE_IN_MODULE")):
            module.uses.append(_read_symbol(words))
        count = _read_count(words, MACHINE_SIZE - base, "TO_MANY_INSTR")
        for _ in range(count):
            kind = _read_address_type(words)
            module.instructions.append((kind, _read_number(words)))
        base += count
        number += 1
        yield module


def _resolve(
    kind: str, value: int, module: _Module, symbols: dict[str, int]
) -> tuple[int, str, str | None]:
    """Return the relocated address, an error message and the symbol used."""
    if value > 9999:
        return 9999, (_ILLEGAL_IMMEDIATE if kind == "I" else _ILLEGAL_OPCODE), None
    opcode = value // 1000 * 1000
    operand = value % 1000
    if kind == "R":
        if operand > len(module.instructions):
            return opcode + module.base, _RELATIVE_TOO_BIG, None
        return module.base + value, "", None
    if kind == "E":
        if operand >= len(module.uses):
            return value, _EXTERNAL_TOO_BIG, None
        name = module.uses[operand]
        if name in symbols:
            return opcode + symbols[name], "", name
        return opcode, f"Error: {name} is not defined; zero used", name
    if kind == "A":
        if operand >= MACHINE_SIZE:
            return opcode, _ABSOLUTE_TOO_BIG, None
        return value, "", None
    return value, "", None


def link(text: str) -> str:
    """Link the modules in ``text`` and return the listing.

    The listing holds the symbol table, the memory map and the warnings.
    Raises ParseError when the input is malformed.
    """
    output: list[str] = []
    symbols: dict[str, int] = {}
    duplicates: set[str] = set()
    never_used: dict[str, int] = {}
    modules: list[_Module] = []

    try:
        for module in _parse_modules(text):
            defined_here = []
            for name, relative in module.definitions:
                if name in symbols:
                    duplicates.add(name)
                else:
                    symbols[name] = module.base + relative
                    defined_here.append(name)
                    never_used[name] = module.number
            last = len(module.instructions) - 1
            for name in defined_here:
                relative = symbols[name] - module.base
                if relative > last:
                    symbols[name] = module.base
                    output.append(
                        f"Warning: Module {module.number}: {name} to big {relative} "
                        f"(max={last}) assume zero relative"
                    )
            modules.append(module)
    except ParseError as exc:
        exc.preceding = "".join(f"{line}\n" for line in output)
        raise

    output.append("Symbol Table")
    for name, address in symbols.items():
        output.append(f"{name}={address}" + (_MULTIPLY_DEFINED if name in duplicates else ""))
    output.append("")

    output.append("Memory Map")
    counter = 0
    for module in modules:
        unused = list(module.uses)
        for kind, value in module.instructions:
            address, message, used = _resolve(kind, value, module, symbols)
            entry = f"{counter:03d}: {address:04d}"
            output.append(f"{entry} {message}" if message else entry)
            if used is not None:
                if used in unused:
                    unused.remove(used)
                never_used.pop(used, None)
            counter += 1
        output.extend(
            f"Warning: Module {module.number}: {name} appeared in the uselist "
            "but was not actually used"
            for name in unused
        )
    output.append("")
    output.extend(
        f"Warning: Module {number}: {name} was defined but never used"
        for name, number in never_used.items()
    )
    output.append("")
    return "".join(f"{line}\n" for line in output)


def main(argv: Sequence[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if not args or not args[0]:
        print("Expected argument after options")
        return 1
    path = args[0]
    try:
        with open(path, encoding="utf-8") as handle:
            text = handle.read()
    except OSError:
        print(f"Not a valid inputfile <{path}>")
        return 1
    try:
        sys.stdout.write(link(text))
    except ParseError as exc:
        sys.stdout.write(exc.preceding)
        print(exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())