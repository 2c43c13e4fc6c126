"""Scaling of byte counts to human readable units.

Scaling uses :class:`decimal.Decimal` so that very large byte counts keep
every digit. Each division is truncated to ``len(str(base)) + 1`` fractional
digits.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, localcontext
from typing import NamedTuple, Sequence, Union

ByteCount = Union[int, float, str, Decimal, None]


@dataclass(frozen=True)
class UnitTable:
    """Ordered unit labels; entry ``i`` stands for ``base ** i`` bytes."""

    base: int
    units: tuple[str, ...]

    def __post_init__(self) -> None:
        if int(self.base) < 2:
            raise ValueError(f"Unit base must be at least 2, got {self.base}")
        if not self.units:
            raise ValueError("Unit table must contain at least the base unit")
        object.__setattr__(self, "base", int(self.base))
        object.__setattr__(self, "units", tuple(self.units))

    def multiplier(self, index: int) -> int:
        return self.base ** index

    def __len__(self) -> int:
        return len(self.units)


class ScaledValue(NamedTuple):
    """Result of scaling a byte count."""

    value: Decimal
    unit: int
    is_integer: bool


def _integer_digits(value: Decimal) -> int:
    return len(str(int(value)))


def scale(bytes: ByteCount, base: int, units: Sequence[str]) -> ScaledValue:
    """Scale a byte count into the largest fitting unit.

    Args:
        bytes: Byte count (int, Decimal or decimal string). None is zero.
        base: Unit base, e.g. 1024 or 1000.
        units: Unit labels, base unit first.

    Returns:
        ScaledValue; ``unit == 0`` means the value is a plain byte count.

    Example:
        >>> tuple(scale(1536, 1024, ["B", "KiB"]))
        (Decimal('1.50000'), 1, False)
    """
    table = UnitTable(base=base, units=tuple(units))
    if bytes is None:
        bytes = 0
    value = Decimal(str(bytes)) if isinstance(bytes, float) else Decimal(bytes)
    negative = value < 0
    value = value.copy_abs()

    precision = Decimal(1).scaleb(-(len(str(table.base)) + 1))
    divisor = Decimal(table.base)
    unit = 0

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(str(int(value))) + 16)
        while (
            (value >= divisor or _integer_digits(value) > 2)
            and unit < len(table) - 1
        ):
            value = (value / divisor).quantize(precision, rounding=ROUND_DOWN)
            unit += 1

    if negative:
        value = value.copy_negate()

    return ScaledValue(value=value, unit=unit, is_integer=unit == 0)


class FilesizeScaler:
    """Scaler bound to a :class:`UnitTable`.

    Example:
        scaler = FilesizeScaler(UnitTable(1024, ("B", "KiB", "MiB")))
        scaler.scale(5 * 1024 ** 2)   # ScaledValue(Decimal('5.00000'), 2, False)
        scaler.label(2)               # "MiB"
    """

    def __init__(self, table: UnitTable) -> None:
        self._table = table

    @property
    def table(self) -> UnitTable:
        return self._table

    def scale(self, bytes: ByteCount) -> ScaledValue:
        return scale(bytes, self._table.base, self._table.units)

    def label(self, unit: int) -> str:
        return self._table.units[unit]
