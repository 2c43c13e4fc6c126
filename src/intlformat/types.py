"""Enums and constants shared across intlformat."""

from __future__ import annotations

from enum import Enum


class FormatFamily(str, Enum):
    """Configuration family a format belongs to."""

    NUMBER = "number"
    CURRENCY = "currency"
    DATETIME = "datetime"
    SECRET = "secret"
    DURATION = "duration"
    FILESIZE = "filesize"


class NumberStyle(str, Enum):
    """Number formatting style."""

    DECIMAL = "decimal"
    CURRENCY = "currency"
    PERCENT = "percent"
    SCIENTIFIC = "scientific"
    COMPACT = "compact"
    SPELLOUT = "spellout"      # 42 -> forty-two
    ORDINAL = "ordinal"        # 1 -> 1st
    DURATION = "duration"      # 3661 -> 1:01:01

    @property
    def is_rule_based(self) -> bool:
        """Styles rendered by rules instead of a CLDR number pattern."""
        return self in (NumberStyle.SPELLOUT, NumberStyle.ORDINAL, NumberStyle.DURATION)

    @classmethod
    def from_value(cls, value: "NumberStyle | str") -> "NumberStyle":
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())


class DateTimeStyle(str, Enum):
    """Date or time style."""

    NONE = "none"
    SHORT = "short"      # 12/31/24
    MEDIUM = "medium"    # Dec 31, 2024
    LONG = "long"        # December 31, 2024
    FULL = "full"        # Tuesday, December 31, 2024

    @classmethod
    def from_value(cls, value: "DateTimeStyle | str | None") -> "DateTimeStyle":
        if value is None:
            return cls.NONE
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())

    @classmethod
    def is_style(cls, value: object) -> bool:
        """Check whether ``value`` names a style rather than a custom format."""
        if isinstance(value, cls):
            return True
        return isinstance(value, str) and value.lower() in {s.value for s in cls}


class Format:
    """Names of the built-in formats."""

    STRING = "string"
    INTEGER = "integer"
    DECIMAL = "decimal"
    CURRENCY = "currency"
    PERCENT = "percent"
    SCIENTIFIC = "scientific"
    SPELLOUT = "spellout"
    ORDINAL = "ordinal"
    TIME = "time"
    DATE = "date"
    DATETIME = "datetime"
    DURATION = "duration"
    FILESIZE = "filesize"
    DISKSIZE = "disksize"
    SECRET = "secret"
