"""Locale and timezone aware value formatter.

Architecture:
    Formatter.<operation>(value)
         |
         v
    ConfigurationResolver  (format -> locale -> global scopes)
         |
         +---> NumberFormatterFactory   -> NumberEngine   (Babel / num2words)
         +---> DateTimeFormatterFactory -> DateTimeEngine (Babel)
         +---> DurationFormatter, FilesizeScaler, mask()
         |
         v
    str  or  FormattingError

Usage:
    >>> formatter = Formatter()
    >>> formatter.decimal(1234.5)
    '1,234.50'
    >>> formatter.for_locale("de_DE").decimal(1234.5)
    '1.234,50'
    >>> formatter.filesize(1536)
    '1.50 KiB'
    >>> formatter.secret("1234567890")
    '*****67890'
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Mapping, TypeVar

from intlformat.config import FormatterConfig, normalize_locale
from intlformat.context import (
    FormatterContext,
    TimezoneLike,
    get_timezone,
    same_timezone,
    timezone_key,
)
from intlformat.defaults import ApplicationDefaults
from intlformat.duration import DurationFormatter
from intlformat.engine import DateTimeEngine, NumberEngine
from intlformat.errors import (
    EngineFormattingFailed,
    FailedToCreateFormatter,
    FailedToFormatValue,
)
from intlformat.factories import (
    DateTimeFormatterFactory,
    NumberFormatterFactory,
    OverrideLayer,
)
from intlformat.filesize import FilesizeScaler, UnitTable
from intlformat.registry import FormatRegistry
from intlformat.resolver import ConfigurationResolver, ResolvedFormatSpec
from intlformat.secret import mask
from intlformat.translation import CatalogTranslator, Translator
from intlformat.types import DateTimeStyle, Format, FormatFamily

logger = logging.getLogger(__name__)

T = TypeVar("T")

Number = int | float | Decimal
DateTimeStyleLike = DateTimeStyle | str


def _freeze(value: Any) -> Any:
    """Turn option mappings into hashable cache key parts."""
    if isinstance(value, Mapping):
        return tuple(sorted((str(k), _freeze(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True)
class _SizeHandle:
    """Resolved filesize parameters."""

    scaler: FilesizeScaler
    fraction_digits: int


class Formatter:
    """Locale and timezone aware formatter.

    Instances behave as immutable values: :meth:`for_locale` and
    :meth:`for_timezone` return a new formatter (or ``self`` when nothing
    changes). Every formatter owns a cache of built engine handles.

    Args:
        config: Format configuration (defaults to the built-in one).
        defaults: Application default locale and timezone.
        translator: Unit label translations.
        registry: Named format handlers for :meth:`format`.
        locale: Locale of this formatter (None: application default).
        timezone: Timezone of this formatter (None: application default).
    """

    def __init__(
        self,
        config: FormatterConfig | None = None,
        *,
        defaults: ApplicationDefaults | None = None,
        translator: Translator | None = None,
        registry: FormatRegistry | None = None,
        locale: str | None = None,
        timezone: TimezoneLike | None = None,
    ) -> None:
        self._config = config if config is not None else FormatterConfig.default()
        self._resolver = ConfigurationResolver(self._config)
        self._defaults = defaults if defaults is not None else ApplicationDefaults()
        self._translator = translator if translator is not None else CatalogTranslator()
        self._registry = registry if registry is not None else FormatRegistry.with_builtins()
        self._context = FormatterContext(locale, timezone)
        self._numbers = NumberFormatterFactory()
        self._dates = DateTimeFormatterFactory()
        self._handles: dict[tuple[Any, ...], Any] = {}

    # =========================================================================
    # Context
    # =========================================================================

    @property
    def context(self) -> FormatterContext:
        return self._context

    @property
    def config(self) -> FormatterConfig:
        return self._config

    @property
    def registry(self) -> FormatRegistry:
        return self._registry

    def for_locale(self, locale: str | None) -> "Formatter":
        """Get a formatter for ``locale`` (``self`` if it is already in use)."""
        if locale is not None and normalize_locale(locale) == self.get_locale():
            return self
        context = self._context.with_locale(locale)
        if context is self._context:
            return self
        return self._derive(context)

    def for_timezone(self, timezone: TimezoneLike | None) -> "Formatter":
        """Get a formatter for ``timezone`` (``self`` if it is already in use)."""
        if timezone is not None and same_timezone(timezone, self.get_timezone()):
            return self
        context = self._context.with_timezone(timezone)
        if context is self._context:
            return self
        return self._derive(context)

    def get_locale(self) -> str:
        return normalize_locale(self._context.locale or self._defaults.locale)

    def get_timezone(self) -> TimezoneLike:
        if self._context.timezone is not None:
            return self._context.timezone
        return self._defaults.timezone

    def cache_size(self) -> int:
        """Number of engine handles cached by this formatter."""
        return len(self._handles)

    def _derive(self, context: FormatterContext) -> "Formatter":
        formatter = copy.copy(self)
        formatter._context = context
        formatter._handles = {}
        logger.debug(
            "Derived formatter: locale=%s timezone=%s",
            formatter.get_locale(), timezone_key(formatter.get_timezone()),
        )
        return formatter

    def _cached(self, key: tuple[Any, ...], build: Callable[[], T]) -> T:
        if key in self._handles:
            logger.debug("Formatter cache hit: %s", key)
            return self._handles[key]
        handle = build()
        self._handles[key] = handle
        return handle

    def _resolve(
        self,
        family: FormatFamily,
        format: str,
        overrides: Mapping[str, Any] | None = None,
    ) -> ResolvedFormatSpec:
        return self._resolver.resolve(family, format, self.get_locale(), overrides)

    def _timezone(self, tz: TimezoneLike | None, format: str) -> tzinfo:
        try:
            return get_timezone(tz if tz is not None else self.get_timezone())
        except LookupError as e:
            raise FailedToCreateFormatter(
                str(e), family=FormatFamily.DATETIME.value, format=format, cause=e,
            ) from e

    def _engine_failed(
        self,
        family: FormatFamily,
        format: str,
        error: Exception,
    ) -> EngineFormattingFailed:
        logger.warning("Failed to format %s value with '%s': %s", family.value, format, error)
        return EngineFormattingFailed(
            type(error).__name__,
            str(error),
            family=family.value,
            format=format,
            cause=error,
        )

    # =========================================================================
    # Registry
    # =========================================================================

    def format(self, name: str, value: Any, **options: Any) -> str:
        """Format ``value`` with a registered format.

        Raises:
            UnknownFormat: If no handler is registered under ``name``.
        """
        return self._registry.get(name)(self, value, **options)

    # =========================================================================
    # Numbers
    # =========================================================================

    def _number_engine(
        self,
        family: FormatFamily,
        format: str,
        overrides: Mapping[str, Any] | None = None,
    ) -> NumberEngine:
        key = (family.value, format, _freeze(overrides or {}))

        def build() -> NumberEngine:
            spec = self._resolve(family, format, overrides)
            leading: dict[str, Any] = {}
            texts: dict[str, str] = {}
            digits = spec.get("fraction_digits")
            if digits is not None:
                leading["fraction_digits"] = abs(int(digits))
            currency = spec.get("currency")
            if currency is not None:
                texts["currency_code"] = str(currency)

            return self._numbers.build(
                spec.locale,
                spec.style,
                spec.pattern,
                OverrideLayer(attributes=leading, text_attributes=texts),
                OverrideLayer.from_spec(spec),
                family=family.value,
                format=format,
            )

        return self._cached(key, build)

    def _format_number(
        self,
        family: FormatFamily,
        format: str,
        value: Number | None,
        overrides: Mapping[str, Any] | None = None,
    ) -> str:
        engine = self._number_engine(family, format, overrides)
        try:
            return engine.format(value if value is not None else 0)
        except Exception as e:
            raise self._engine_failed(family, format, e) from e

    def string(self, value: Any) -> str:
        """Trimmed string representation; None is an empty string."""
        if value is None:
            return ""
        return str(value).strip()

    def number(self, value: Number | None, format: str) -> str:
        """Format with any configured number format."""
        return self._format_number(FormatFamily.NUMBER, format, value)

    def integer(self, value: Number | None) -> str:
        return self._format_number(
            FormatFamily.NUMBER, Format.INTEGER, value, {"fraction_digits": 0},
        )

    def decimal(self, value: Number | None, decimals: int | None = None) -> str:
        overrides = {"fraction_digits": abs(decimals)} if decimals is not None else None
        return self._format_number(FormatFamily.NUMBER, Format.DECIMAL, value, overrides)

    def percent(self, value: Number | None, decimals: int | None = None) -> str:
        """Format a percentage given on a 0-100 scale."""
        overrides = {"fraction_digits": abs(decimals)} if decimals is not None else None
        value = (value if value is not None else 0) / 100
        return self._format_number(FormatFamily.NUMBER, Format.PERCENT, value, overrides)

    def scientific(self, value: Number | None) -> str:
        return self._format_number(FormatFamily.NUMBER, Format.SCIENTIFIC, value)

    def spellout(self, value: Number | None) -> str:
        return self._format_number(FormatFamily.NUMBER, Format.SPELLOUT, value)

    def ordinal(self, value: Number | None) -> str:
        return self._format_number(FormatFamily.NUMBER, Format.ORDINAL, value)

    def currency(self, value: Number | None, currency: str | None = None) -> str:
        """Format an amount of money.

        Args:
            value: Amount.
            currency: ISO 4217 code; defaults to the configured currency or
                the currency of the locale's territory.
        """
        family = FormatFamily.CURRENCY
        engine = self._number_engine(family, Format.CURRENCY)
        try:
            return engine.format_currency(value if value is not None else 0, currency)
        except Exception as e:
            raise self._engine_failed(family, Format.CURRENCY, e) from e

    # =========================================================================
    # Dates and times
    # =========================================================================

    def _date_engine(
        self,
        kind: str,
        format: DateTimeStyleLike | None,
        tz: TimezoneLike | None,
    ) -> tuple[str, DateTimeEngine]:
        name = kind
        overrides: dict[str, Any] = {}
        explicit_style = format is not None and DateTimeStyle.is_style(format)

        if explicit_style:
            style = DateTimeStyle.from_value(format)
            if kind in (Format.DATE, Format.DATETIME):
                overrides["date_type"] = style
            if kind in (Format.TIME, Format.DATETIME):
                overrides["time_type"] = style
        elif format is not None:
            name = str(format)

        tzinfo = self._timezone(tz, name)
        key = (FormatFamily.DATETIME.value, kind, name, _freeze(overrides), timezone_key(tzinfo))

        def build() -> DateTimeEngine:
            spec = self._resolve(FormatFamily.DATETIME, name, overrides)
            return self._dates.build(
                spec.get("date_type"),
                spec.get("time_type"),
                None if explicit_style else spec.pattern,
                spec.locale,
                tzinfo,
                family=FormatFamily.DATETIME.value,
                format=name,
            )

        return name, self._cached(key, build)

    def _format_datetime(
        self,
        kind: str,
        value: datetime | date | time | None,
        format: DateTimeStyleLike | None,
        tz: TimezoneLike | None,
    ) -> str:
        if value is None:
            return ""
        name, engine = self._date_engine(kind, format, tz)
        try:
            return engine.format(value)
        except Exception as e:
            raise self._engine_failed(FormatFamily.DATETIME, name, e) from e

    def time(
        self,
        value: datetime | time | None,
        format: DateTimeStyleLike | None = None,
        tz: TimezoneLike | None = None,
    ) -> str:
        """Format a time.

        Args:
            value: Time or datetime; None gives an empty string.
            format: Style (short, medium, long, full) or a configured
                datetime format name.
            tz: Timezone for this call.
        """
        return self._format_datetime(Format.TIME, value, format, tz)

    def date(
        self,
        value: datetime | date | None,
        format: DateTimeStyleLike | None = None,
        tz: TimezoneLike | None = None,
    ) -> str:
        return self._format_datetime(Format.DATE, value, format, tz)

    def datetime(
        self,
        value: datetime | date | None,
        format: DateTimeStyleLike | None = None,
        tz: TimezoneLike | None = None,
    ) -> str:
        return self._format_datetime(Format.DATETIME, value, format, tz)

    # =========================================================================
    # Durations, sizes, secrets
    # =========================================================================

    def duration(
        self,
        value: Number | timedelta | None,
        format: str | None = None,
    ) -> str:
        """Format a duration given in seconds (or as a timedelta)."""
        family = FormatFamily.DURATION
        name = format or Format.DURATION

        def build() -> DurationFormatter:
            spec = self._resolve(family, name)
            try:
                return DurationFormatter(spec.pattern)
            except ValueError as e:
                raise FailedToCreateFormatter(
                    str(e), family=family.value, format=name, cause=e,
                ) from e

        formatter = self._cached((family.value, name), build)
        try:
            return formatter.format(value)
        except (ArithmeticError, TypeError, ValueError) as e:
            raise FailedToFormatValue(
                f"Invalid duration {value!r}: {e}", family=family.value, format=name, cause=e,
            ) from e

    def _size_handle(self, format: str, decimals: int | None) -> _SizeHandle:
        family = FormatFamily.FILESIZE
        overrides = {"fraction_digits": abs(decimals)} if decimals is not None else None

        def build() -> _SizeHandle:
            spec = self._resolve(family, format, overrides)
            try:
                table = UnitTable(int(spec.get("base")), tuple(spec.get("units")))
            except (TypeError, ValueError) as e:
                raise FailedToCreateFormatter(
                    f"Invalid unit table: {e}", family=family.value, format=format, cause=e,
                ) from e
            return _SizeHandle(FilesizeScaler(table), int(spec.get("fraction_digits", 2)))

        return self._cached((family.value, format, _freeze(overrides or {})), build)

    def _format_size(
        self,
        format: str,
        bytes: int | str | Decimal | None,
        decimals: int | None,
    ) -> str:
        handle = self._size_handle(format, decimals)
        try:
            scaled = handle.scaler.scale(bytes)
        except (ArithmeticError, TypeError, ValueError) as e:
            raise FailedToFormatValue(
                f"Invalid byte count {bytes!r}: {e}",
                family=FormatFamily.FILESIZE.value,
                format=format,
                cause=e,
            ) from e

        if scaled.is_integer:
            number = self.integer(scaled.value)
            if scaled.value == 0:
                return number
        else:
            number = self.decimal(scaled.value, handle.fraction_digits)

        label = self._translator.translate(
            handle.scaler.label(scaled.unit), self.get_locale(), abs(scaled.value),
        )
        return f"{number} {label}"

    def filesize(
        self,
        bytes: int | str | Decimal | None,
        decimals: int | None = None,
    ) -> str:
        """Format a byte count with binary units (1 KiB = 1024 bytes)."""
        return self._format_size(Format.FILESIZE, bytes, decimals)

    def disksize(
        self,
        bytes: int | str | Decimal | None,
        decimals: int | None = None,
    ) -> str:
        """Format a byte count with decimal units (1 kB = 1000 bytes)."""
        return self._format_size(Format.DISKSIZE, bytes, decimals)

    def secret(self, value: str | None, visible: int | None = None) -> str:
        """Mask all but the last ``visible`` characters."""
        if value is None:
            return ""
        overrides = {"visible": visible} if visible is not None else None
        spec = self._resolve(FormatFamily.SECRET, Format.SECRET, overrides)
        try:
            return mask(str(value), int(spec.get("visible")))
        except (TypeError, ValueError) as e:
            raise FailedToFormatValue(
                f"Invalid visible character count: {e}",
                family=FormatFamily.SECRET.value,
                format=Format.SECRET,
                cause=e,
            ) from e

    def __repr__(self) -> str:
        return (
            f"Formatter(locale={self.get_locale()!r}, "
            f"timezone={timezone_key(self.get_timezone())!r})"
        )


__all__ = ["Formatter"]
