"""Date/time engine: Babel date formatting with ICU style construction."""

from __future__ import annotations

from datetime import date, datetime, time, timezone, tzinfo

from babel.core import Locale
from babel.dates import (
    format_date,
    format_datetime,
    format_time,
    get_datetime_format,
)

from intlformat.engine.number import parse_locale
from intlformat.types import DateTimeStyle

DateTimeValue = datetime | date | time


def localize(value: DateTimeValue, tz: tzinfo) -> DateTimeValue:
    """Move a value into ``tz``.

    Aware datetimes are converted, naive datetimes are taken as UTC and
    plain dates become local midnight. Times are returned unchanged.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(tz)
    if isinstance(value, date):
        return datetime.combine(value, time(), tzinfo=tz)
    return value


class DateTimeEngine:
    """Date/time formatting handle.

    Example:
        engine = DateTimeEngine("en_US", DateTimeStyle.NONE, DateTimeStyle.SHORT,
                                None, ZoneInfo("Europe/Berlin"))
        engine.format(datetime(2024, 1, 1, 12, tzinfo=timezone.utc))
    """

    def __init__(
        self,
        locale: str | Locale,
        date_type: DateTimeStyle | str | None,
        time_type: DateTimeStyle | str | None,
        pattern: str | None,
        tz: tzinfo,
    ) -> None:
        self._locale = parse_locale(locale)
        self._date_type = DateTimeStyle.from_value(date_type)
        self._time_type = DateTimeStyle.from_value(time_type)
        self._pattern = pattern or None
        self._tz = tz

        if (
            self._pattern is None
            and self._date_type is DateTimeStyle.NONE
            and self._time_type is DateTimeStyle.NONE
        ):
            raise ValueError("Either a pattern or a date or time style is required")

    @property
    def locale(self) -> Locale:
        return self._locale

    @property
    def date_type(self) -> DateTimeStyle:
        return self._date_type

    @property
    def time_type(self) -> DateTimeStyle:
        return self._time_type

    @property
    def pattern(self) -> str | None:
        return self._pattern

    @property
    def timezone(self) -> tzinfo:
        return self._tz

    def format(self, value: DateTimeValue) -> str:
        value = localize(value, self._tz)
        locale = self._locale

        if self._pattern is not None:
            if isinstance(value, time):
                return format_time(value, self._pattern, tzinfo=self._tz, locale=locale)
            return format_datetime(value, self._pattern, tzinfo=self._tz, locale=locale)

        date_type = self._date_type
        time_type = self._time_type

        if time_type is DateTimeStyle.NONE:
            return format_date(_as_date(value), date_type.value, locale=locale)
        if date_type is DateTimeStyle.NONE:
            return format_time(value, time_type.value, tzinfo=self._tz, locale=locale)

        glue = get_datetime_format(date_type.value, locale=locale).replace("'", "")
        return (
            glue
            .replace("{0}", format_time(value, time_type.value, tzinfo=self._tz, locale=locale))
            .replace("{1}", format_date(_as_date(value), date_type.value, locale=locale))
        )


def _as_date(value: DateTimeValue) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Cannot format {type(value).__name__} as a date")
