"""Tests for the Formatter facade."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from unittest.mock import patch

import pytest

from intlformat import (
    ApplicationDefaults,
    CatalogTranslator,
    ConfigurationMissing,
    EngineFormattingFailed,
    FailedToCreateFormatter,
    FailedToFormatValue,
    Formatter,
    FormatRegistry,
    FormattingError,
    InvalidAttribute,
    UnknownFormat,
)
from intlformat.engine import NumberEngine


# =============================================================================
# Context transitions
# =============================================================================


class TestContext:
    """Tests for locale/timezone transitions."""

    def test_effective_defaults(self, formatter: Formatter):
        assert formatter.get_locale() == "en_US"
        assert formatter.get_timezone() == "UTC"

    def test_application_defaults(self):
        formatter = Formatter(defaults=ApplicationDefaults(locale="de-DE", timezone="Europe/Berlin"))
        assert formatter.get_locale() == "de_DE"
        assert formatter.decimal(1234.5) == "1.234,50"

    def test_for_locale_same_value_returns_self(self, formatter: Formatter):
        assert formatter.for_locale("en_US") is formatter
        assert formatter.for_locale("en-US") is formatter

    def test_for_locale_is_idempotent(self, formatter: Formatter):
        german = formatter.for_locale("de_DE")
        assert german is not formatter
        assert german.for_locale("de-DE") is german
        assert formatter.get_locale() == "en_US"

    def test_for_locale_none_resets(self, formatter: Formatter):
        german = formatter.for_locale("de_DE")
        assert german.for_locale(None).get_locale() == "en_US"
        assert formatter.for_locale(None) is formatter

    def test_for_timezone(self, formatter: Formatter):
        assert formatter.for_timezone("UTC") is formatter
        berlin = formatter.for_timezone("Europe/Berlin")
        assert berlin.get_timezone() == "Europe/Berlin"
        assert berlin.for_timezone("Europe/Berlin") is berlin
        assert berlin.get_locale() == "en_US"

    def test_transitions_get_fresh_cache(self, formatter: Formatter):
        formatter.decimal(1)
        assert formatter.cache_size() == 1
        assert formatter.for_locale("de_DE").cache_size() == 0
        assert formatter.cache_size() == 1

    def test_repr(self, formatter: Formatter):
        assert repr(formatter) == "Formatter(locale='en_US', timezone='UTC')"


# =============================================================================
# Numbers
# =============================================================================


class TestNumbers:
    """Tests for number operations."""

    def test_string(self, formatter: Formatter):
        assert formatter.string("  text \n") == "text"
        assert formatter.string(None) == ""
        assert formatter.string(42) == "42"

    def test_integer(self, formatter: Formatter):
        assert formatter.integer(1234567) == "1,234,567"
        assert formatter.integer(2.4) == "2"
        assert formatter.integer(None) == "0"

    def test_decimal(self, formatter: Formatter):
        assert formatter.decimal(1234.5678) == "1,234.57"
        assert formatter.decimal(None) == "0.00"
        assert formatter.decimal(Decimal("1.5")) == "1.50"

    def test_decimal_locale(self, formatter: Formatter):
        assert formatter.for_locale("de_DE").decimal(1234.5678) == "1.234,57"

    def test_decimal_digits(self, formatter: Formatter):
        assert formatter.decimal(1.23456, 3) == "1.235"
        assert formatter.decimal(1.23456, -3) == "1.235"
        assert formatter.decimal(1.5, 0) == "2"

    def test_percent(self, formatter: Formatter):
        assert formatter.percent(50) == "50%"
        assert formatter.percent(12.5, 1) == "12.5%"
        assert formatter.percent(None) == "0%"

    def test_scientific(self, formatter: Formatter):
        assert formatter.scientific(10000) == "1E4"

    def test_spellout(self, formatter: Formatter):
        assert formatter.spellout(42) == "forty-two"
        assert formatter.for_locale("de_DE").spellout(3) == "drei"

    def test_ordinal(self, formatter: Formatter):
        assert formatter.ordinal(1) == "1st"
        assert formatter.ordinal(2.0) == "2nd"
        assert formatter.ordinal(3.7) == "3rd"

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_ordinal_non_finite(self, formatter: Formatter, value):
        with pytest.raises(EngineFormattingFailed) as exc_info:
            formatter.ordinal(value)
        assert exc_info.value.format == "ordinal"
        assert isinstance(exc_info.value.cause, (ValueError, OverflowError))

    def test_number(self, formatter: Formatter):
        assert formatter.number(42, "spellout") == "forty-two"
        assert formatter.number(1234.5, "decimal") == "1,234.50"

    def test_number_unknown_format(self, formatter: Formatter):
        with pytest.raises(ConfigurationMissing) as exc_info:
            formatter.number(1, "unknown")
        assert exc_info.value.parameter == "style"

    def test_handles_are_cached(self, formatter: Formatter):
        formatter.decimal(1)
        formatter.decimal(2)
        assert formatter.cache_size() == 1
        formatter.decimal(1, 3)
        assert formatter.cache_size() == 2

    def test_locale_configuration(self, make_formatter):
        formatter = make_formatter({
            "locales": {"de": {"number": {"decimal": {"fraction_digits": 3}}}},
        })
        assert formatter.for_locale("de_AT").decimal(1.5) == "1,500"
        assert formatter.decimal(1.5) == "1.50"
        assert formatter.for_locale("de_AT").decimal(1.5, 1) == "1,5"

    def test_configured_symbols(self, make_formatter):
        formatter = make_formatter({
            "global": {
                "number": {
                    "decimal": {"symbols": {"decimal_separator": ",", "grouping_separator": " "}},
                },
            },
        })
        assert formatter.decimal(1234.5) == "1 234,50"

    def test_configured_pattern(self, make_formatter):
        formatter = make_formatter({
            "global": {"number": {"price": {"style": "decimal", "pattern": "#,##0.00 net"}}},
        })
        assert formatter.number(1234.5, "price") == "1,234.50 net"

    def test_invalid_attribute_is_not_cached(self, make_formatter):
        formatter = make_formatter({
            "global": {"number": {"decimal": {"attributes": {"bogus": 1}}}},
        })
        with pytest.raises(InvalidAttribute) as exc_info:
            formatter.decimal(1)
        assert exc_info.value.key == "bogus"
        assert exc_info.value.format == "decimal"
        assert formatter.cache_size() == 0

    def test_unknown_locale(self, formatter: Formatter):
        with pytest.raises(FailedToCreateFormatter):
            formatter.for_locale("xx_YY").decimal(1)


class TestCurrency:
    """Tests for currency()."""

    def test_explicit_currency(self, formatter: Formatter):
        assert formatter.currency(1234.5, "USD") == "$1,234.50"
        assert formatter.currency(10, "EUR") == "€10.00"

    def test_territory_currency(self, formatter: Formatter):
        assert formatter.currency(1234.5) == "$1,234.50"

    def test_configured_currency(self, make_formatter):
        formatter = make_formatter({"global": {"currency": {"currency": {"currency": "EUR"}}}})
        assert formatter.currency(10) == "€10.00"
        assert formatter.currency(10, "USD") == "$10.00"

    def test_no_currency_for_locale(self, formatter: Formatter):
        with pytest.raises(EngineFormattingFailed) as exc_info:
            formatter.for_locale("en").currency(1)
        error = exc_info.value
        assert error.engine_code == "ValueError"
        assert error.family == "currency"
        assert isinstance(error.cause, ValueError)


# =============================================================================
# Dates and times
# =============================================================================


@pytest.fixture
def clock_formatter(make_formatter) -> Formatter:
    return make_formatter({
        "global": {
            "datetime": {
                "clock": {"date_type": "none", "time_type": "none", "pattern": "HH:mm"},
                "iso": {"date_type": "none", "time_type": "none", "pattern": "yyyy-MM-dd"},
            },
        },
        "locales": {
            "de": {"datetime": {"date": {"pattern": "dd.MM.yyyy"}}},
        },
    })


class TestDateTime:
    """Tests for time(), date() and datetime()."""

    def test_none_is_empty(self, formatter: Formatter):
        assert formatter.time(None) == ""
        assert formatter.date(None) == ""
        assert formatter.datetime(None) == ""
        assert formatter.cache_size() == 0

    def test_default_date(self, formatter: Formatter, utc_noon):
        assert formatter.date(utc_noon) == "1/31/24"
        assert formatter.date(date(2024, 1, 31)) == "1/31/24"

    def test_style_argument(self, formatter: Formatter, utc_noon):
        assert formatter.date(utc_noon, "medium") == "Jan 31, 2024"
        assert formatter.date(utc_noon, "LONG") == "January 31, 2024"

    def test_default_datetime(self, formatter: Formatter, utc_noon):
        assert formatter.datetime(utc_noon).startswith("1/31/24, 12:00")

    def test_custom_format(self, clock_formatter: Formatter, utc_noon):
        assert clock_formatter.time(utc_noon, "clock", tz="Europe/Berlin") == "13:00"
        assert clock_formatter.datetime(utc_noon, "iso") == "2024-01-31"

    def test_formatter_timezone(self, clock_formatter: Formatter, utc_noon):
        berlin = clock_formatter.for_timezone("Europe/Berlin")
        assert berlin.time(utc_noon, "clock") == "13:00"
        assert berlin.time(utc_noon, "clock", tz="+02:00") == "14:00"
        assert clock_formatter.time(utc_noon, "clock") == "12:00"

    def test_naive_datetime_is_utc(self, clock_formatter: Formatter):
        assert clock_formatter.time(datetime(2024, 1, 31, 12), "clock", tz="Europe/Berlin") == "13:00"

    def test_time_value(self, clock_formatter: Formatter):
        assert clock_formatter.time(time(9, 30), "clock") == "09:30"

    def test_locale_pattern(self, clock_formatter: Formatter, utc_noon):
        german = clock_formatter.for_locale("de_DE")
        assert german.date(utc_noon) == "31.01.2024"

    def test_style_replaces_configured_pattern(self, clock_formatter: Formatter, utc_noon):
        german = clock_formatter.for_locale("de_DE")
        assert german.date(utc_noon, "long") == "31. Januar 2024"

    def test_handles_are_cached_per_timezone(self, clock_formatter: Formatter, utc_noon):
        clock_formatter.time(utc_noon, "clock")
        clock_formatter.time(utc_noon, "clock")
        assert clock_formatter.cache_size() == 1
        clock_formatter.time(utc_noon, "clock", tz="Asia/Tokyo")
        assert clock_formatter.cache_size() == 2

    def test_unknown_timezone(self, formatter: Formatter, utc_noon):
        with pytest.raises(FailedToCreateFormatter) as exc_info:
            formatter.time(utc_noon, tz="Mars/Olympus_Mons")
        assert isinstance(exc_info.value.__cause__, LookupError)

    def test_unknown_custom_format(self, formatter: Formatter, utc_noon):
        with pytest.raises(ConfigurationMissing):
            formatter.date(utc_noon, "nope")

    def test_engine_failure_is_wrapped(self, formatter: Formatter):
        with pytest.raises(EngineFormattingFailed) as exc_info:
            formatter.date(time(9, 30))
        assert exc_info.value.engine_code == "TypeError"
        assert exc_info.value.family == "datetime"


# =============================================================================
# Durations, sizes, secrets
# =============================================================================


class TestDuration:
    """Tests for duration()."""

    def test_default_pattern(self, formatter: Formatter):
        assert formatter.duration(3661) == "01:01:01"
        assert formatter.duration(timedelta(minutes=90)) == "01:30:00"

    def test_none_is_zero(self, formatter: Formatter):
        assert formatter.duration(None) == formatter.duration(0) == "00:00:00"

    def test_configured_format(self, make_formatter):
        formatter = make_formatter({"global": {"duration": {"short": {"pattern": "mm:ss"}}}})
        assert formatter.duration(3661, "short") == "61:01"

    def test_locale_pattern(self, make_formatter):
        formatter = make_formatter({
            "locales": {"de": {"duration": {"duration": {"pattern": "H 'Std.' m 'Min.'"}}}},
        })
        assert formatter.for_locale("de_DE").duration(3660) == "1 Std. 1 Min."

    def test_invalid_pattern(self, make_formatter):
        formatter = make_formatter({"global": {"duration": {"broken": {"pattern": "H 'h"}}}})
        with pytest.raises(FailedToCreateFormatter):
            formatter.duration(1, "broken")

    def test_invalid_value(self, formatter: Formatter):
        with pytest.raises(FailedToFormatValue):
            formatter.duration("soon")  # type: ignore[arg-type]


class TestFilesize:
    """Tests for filesize() and disksize()."""

    def test_bytes(self, formatter: Formatter):
        assert formatter.filesize(1) == "1 byte"
        assert formatter.filesize(10) == "10 bytes"

    def test_zero_has_no_label(self, formatter: Formatter):
        assert formatter.filesize(0) == "0"
        assert formatter.filesize(None) == "0"

    def test_scaled(self, formatter: Formatter):
        assert formatter.filesize(1536) == "1.50 KiB"
        assert formatter.filesize(5 * 1024 ** 3) == "5.00 GiB"

    def test_decimals(self, formatter: Formatter):
        assert formatter.filesize(1536, 1) == "1.5 KiB"

    def test_disksize(self, formatter: Formatter):
        assert formatter.disksize(1500) == "1.50 kB"
        assert formatter.disksize(2_000_000_000) == "2.00 GB"

    def test_negative(self, formatter: Formatter):
        assert formatter.filesize(-1536) == "-1.50 KiB"

    def test_huge_values(self, formatter: Formatter):
        assert formatter.filesize(str(1024 ** 9)) == "1,024.00 YiB"

    def test_locale(self, formatter: Formatter):
        german = formatter.for_locale("de_DE")
        assert german.filesize(1) == "1 Byte"
        assert german.filesize(5) == "5 Bytes"
        assert german.filesize(1536) == "1,50 KiB"

    def test_plural_forms(self, formatter: Formatter):
        russian = formatter.for_locale("ru_RU")
        assert russian.filesize(3) == "3 байта"
        assert russian.filesize(5) == "5 байт"

    def test_custom_translator(self, defaults):
        translator = CatalogTranslator({"en": {"filesize.KiB": "kibibytes"}})
        formatter = Formatter(defaults=defaults, translator=translator)
        assert formatter.filesize(2048) == "2.00 kibibytes"

    def test_invalid_unit_table(self, make_formatter):
        formatter = make_formatter({"global": {"filesize": {"filesize": {"base": 1}}}})
        with pytest.raises(FailedToCreateFormatter):
            formatter.filesize(1)

    def test_invalid_value(self, formatter: Formatter):
        with pytest.raises(FailedToFormatValue):
            formatter.filesize("lots")


class TestSecret:
    """Tests for secret()."""

    def test_default_visible(self, formatter: Formatter):
        assert formatter.secret("1234567890") == "*****67890"

    def test_visible_argument(self, formatter: Formatter):
        assert formatter.secret("1234567890", 2) == "********90"

    def test_configured_visible(self, make_formatter):
        formatter = make_formatter({"global": {"secret": {"secret": {"visible": 3}}}})
        assert formatter.secret("1234567890") == "*******890"

    def test_none_is_empty(self, formatter: Formatter):
        assert formatter.secret(None) == ""


# =============================================================================
# Registry dispatch and errors
# =============================================================================


class TestFormatDispatch:
    """Tests for format()."""

    def test_builtin(self, formatter: Formatter):
        assert formatter.format("decimal", 1.5) == "1.50"
        assert formatter.format("decimal", 1.23456, decimals=3) == "1.235"
        assert formatter.format("secret", "abcdefghij", visible=1) == "*********j"

    def test_unknown(self, formatter: Formatter):
        with pytest.raises(UnknownFormat):
            formatter.format("nope", 1)

    def test_empty_registry_is_kept(self, defaults):
        registry = FormatRegistry()
        formatter = Formatter(defaults=defaults, registry=registry)
        registry.register("twice", lambda formatter, value, **options: str(value) * 2)

        assert formatter.registry is registry
        assert formatter.format("twice", "ab") == "abab"
        with pytest.raises(UnknownFormat):
            formatter.format("decimal", 1)

    def test_custom_handler(self, defaults):
        registry = FormatRegistry.with_builtins()

        @registry.handler("price")
        def price(formatter, value, **options):
            return formatter.currency(value, "EUR")

        formatter = Formatter(defaults=defaults, registry=registry)
        assert formatter.format("price", 9.99) == "€9.99"
        assert formatter.for_locale("en_GB").registry is registry


class TestEngineFailures:
    """Engine exceptions are wrapped with the original as the cause."""

    def test_number_engine_failure(self, formatter: Formatter):
        with patch.object(NumberEngine, "format", side_effect=ArithmeticError("boom")):
            with pytest.raises(EngineFormattingFailed) as exc_info:
                formatter.decimal(1)

        error = exc_info.value
        assert error.engine_code == "ArithmeticError"
        assert error.engine_message == "boom"
        assert error.family == "number"
        assert error.format == "decimal"
        assert isinstance(error.__cause__, ArithmeticError)
        assert error.cause is error.__cause__
        assert isinstance(error, FailedToFormatValue)
        assert isinstance(error, FormattingError)

    def test_failure_is_logged(self, formatter: Formatter, caplog):
        with patch.object(NumberEngine, "format", side_effect=ArithmeticError("boom")):
            with pytest.raises(EngineFormattingFailed):
                formatter.integer(1)
        assert "boom" in caplog.text
