"""Pattern based duration formatting.

Pattern letters:

    d   days
    H   hours
    m   minutes
    s   seconds
    S   fraction of a second (run length = number of digits, truncated)

A run of one letter is a single placeholder, zero-padded to the run length.
Text inside single quotes is literal (``''`` is a quote character); every
other character is copied as is. The largest unit in the pattern absorbs
the larger ones, so ``mm:ss`` renders 3661 seconds as ``61:01``.

Example:
    >>> format_duration("HH:mm:ss", 3661)
    '01:01:01'
    >>> format_duration("m'm' s's'", 125.5)
    '2m 5s'
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from functools import lru_cache
from typing import Union

# Largest unit first.
UNITS: tuple[tuple[str, int], ...] = (
    ("d", 86400),
    ("H", 3600),
    ("m", 60),
    ("s", 1),
)

FRACTION = "S"
PLACEHOLDER_LETTERS = frozenset([unit for unit, _ in UNITS] + [FRACTION])

DurationValue = Union[int, float, Decimal, timedelta, None]


@dataclass(frozen=True)
class Placeholder:
    """A duration component in a pattern."""

    unit: str
    width: int


Token = Union[str, Placeholder]


@dataclass(frozen=True)
class DurationPattern:
    """Compiled duration pattern."""

    pattern: str
    tokens: tuple[Token, ...]

    @property
    def units(self) -> frozenset[str]:
        return frozenset(t.unit for t in self.tokens if isinstance(t, Placeholder))

    def format(self, value: DurationValue) -> str:
        """Render a duration given in seconds."""
        remaining = to_seconds(value)
        present = self.units
        components: dict[str, int] = {}

        for unit, size in UNITS:
            if unit in present:
                amount = int(remaining // size)
                components[unit] = amount
                remaining -= amount * size

        parts = []
        for token in self.tokens:
            if isinstance(token, str):
                parts.append(token)
            elif token.unit == FRACTION:
                fraction = remaining % 1
                digits = int(fraction * (10 ** token.width))
                parts.append(str(digits).zfill(token.width))
            else:
                parts.append(str(components[token.unit]).zfill(token.width))

        return "".join(parts)


def to_seconds(value: DurationValue) -> Decimal:
    """Convert a duration to non-negative seconds as a Decimal."""
    if value is None:
        return Decimal(0)
    if isinstance(value, timedelta):
        seconds = Decimal(value.days * 86400 + value.seconds) + (
            Decimal(value.microseconds) / Decimal(1_000_000)
        )
    elif isinstance(value, float):
        seconds = Decimal(str(value))
    else:
        seconds = Decimal(value)

    if not seconds.is_finite() or seconds < 0:
        return Decimal(0)
    return seconds


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> DurationPattern:
    """Compile a duration pattern.

    Raises:
        ValueError: If a quoted literal is not terminated.
    """
    tokens: list[Token] = []
    literal: list[str] = []
    i = 0
    length = len(pattern)

    def flush() -> None:
        if literal:
            tokens.append("".join(literal))
            literal.clear()

    while i < length:
        char = pattern[i]

        if char == "'":
            # '' outside a quoted section is a single quote
            if i + 1 < length and pattern[i + 1] == "'":
                literal.append("'")
                i += 2
                continue
            i += 1
            while True:
                if i >= length:
                    raise ValueError(f"Unterminated quote in duration pattern: {pattern!r}")
                if pattern[i] == "'":
                    if i + 1 < length and pattern[i + 1] == "'":
                        literal.append("'")
                        i += 2
                        continue
                    i += 1
                    break
                literal.append(pattern[i])
                i += 1
            continue

        if char in PLACEHOLDER_LETTERS:
            run = 1
            while i + run < length and pattern[i + run] == char:
                run += 1
            flush()
            tokens.append(Placeholder(unit=char, width=run))
            i += run
            continue

        literal.append(char)
        i += 1

    flush()
    return DurationPattern(pattern=pattern, tokens=tuple(tokens))


def format_duration(pattern: str, value: DurationValue) -> str:
    """Format a duration in seconds with a pattern."""
    return compile_pattern(pattern).format(value)


class DurationFormatter:
    """Duration formatter bound to a pattern.

    Example:
        formatter = DurationFormatter("H:mm:ss")
        formatter.format(3661)   # "1:01:01"
    """

    def __init__(self, pattern: str) -> None:
        self._pattern = compile_pattern(pattern)

    @property
    def pattern(self) -> str:
        return self._pattern.pattern

    def format(self, value: DurationValue) -> str:
        return self._pattern.format(value)
