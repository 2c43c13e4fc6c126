"""Immutable locale/timezone context of a formatter."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from intlformat.config import normalize_locale

_OFFSET_RE = re.compile(r"^(?:UTC|GMT)?([+-])(\d{1,2})(?::?(\d{2}))?$")

TimezoneLike = tzinfo | str


@dataclass(frozen=True)
class FormatterContext:
    """Snapshot of the locale and timezone a formatter works in.

    ``None`` means "use the application default". Transitions return the
    same object when the value does not change.
    """

    locale: str | None = None
    timezone: TimezoneLike | None = None

    def __post_init__(self) -> None:
        if self.locale is not None:
            object.__setattr__(self, "locale", normalize_locale(self.locale))

    def with_locale(self, locale: str | None) -> "FormatterContext":
        if locale is not None:
            locale = normalize_locale(locale)
        if locale == self.locale:
            return self
        return replace(self, locale=locale)

    def with_timezone(self, tz: TimezoneLike | None) -> "FormatterContext":
        if same_timezone(tz, self.timezone):
            return self
        return replace(self, timezone=tz)


def get_timezone(tz: TimezoneLike) -> tzinfo:
    """Resolve an IANA name, a ``+HH:MM`` offset or a tzinfo object.

    Raises:
        LookupError: If the timezone is unknown.
    """
    if isinstance(tz, tzinfo):
        return tz

    name = tz.strip()
    if name.upper() in ("UTC", "Z", "GMT"):
        return timezone.utc

    match = _OFFSET_RE.match(name)
    if match:
        sign, hours, minutes = match.groups()
        offset = timedelta(hours=int(hours), minutes=int(minutes or 0))
        return timezone(-offset if sign == "-" else offset)

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise LookupError(f"Unknown timezone: {tz!r}") from e


def timezone_key(tz: TimezoneLike | None) -> str | None:
    """Hashable identity of a timezone, used for equality and cache keys."""
    if tz is None:
        return None
    if isinstance(tz, str):
        return tz.strip()
    key = getattr(tz, "key", None)
    if key:
        return str(key)
    return repr(tz)


def same_timezone(a: TimezoneLike | None, b: TimezoneLike | None) -> bool:
    return timezone_key(a) == timezone_key(b)
