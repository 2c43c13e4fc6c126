"""Number engine: Babel number patterns with ICU style setters.

A :class:`NumberEngine` is created for a locale, a style and an optional
pattern, then configured incrementally with ``set_attribute``,
``set_symbol`` and ``set_text_attribute``. Each setter returns False when
the key or the value is not supported, mirroring ICU's NumberFormatter.

Pattern styles (decimal, currency, percent, scientific, compact) are
rendered by Babel. Rule-based styles use num2words (spellout, ordinal) or
the duration pattern formatter (duration).
"""

from __future__ import annotations

import copy
import logging
from decimal import Decimal
from typing import Any, Mapping

from babel.core import Locale
from babel.numbers import (
    NumberPattern,
    format_compact_decimal,
    get_territory_currencies,
    parse_pattern,
)
from num2words import num2words

from intlformat.duration import format_duration
from intlformat.types import NumberStyle

logger = logging.getLogger(__name__)


# Attribute -> kind of value it accepts
ATTRIBUTES: dict[str, str] = {
    "fraction_digits": "int",
    "min_fraction_digits": "int",
    "max_fraction_digits": "int",
    "min_integer_digits": "int",
    "grouping_size": "int",
    "grouping_used": "bool",
    "decimal_quantization": "bool",
    "currency_digits": "bool",
}

# Symbol name -> CLDR number symbol key
SYMBOLS: dict[str, str] = {
    "decimal_separator": "decimal",
    "grouping_separator": "group",
    "plus_sign": "plusSign",
    "minus_sign": "minusSign",
    "percent": "percentSign",
    "per_mille": "perMille",
    "exponential": "exponential",
    "infinity": "infinity",
    "nan": "nan",
}
CURRENCY_SYMBOL = "currency_symbol"

TEXT_ATTRIBUTES = frozenset([
    "positive_prefix",
    "positive_suffix",
    "negative_prefix",
    "negative_suffix",
    "currency_code",
    "ruleset",
])

# num2words conversions allowed as "ruleset"
RULESETS = frozenset(["cardinal", "ordinal", "ordinal_num", "year", "currency"])

DURATION_PATTERN = "H:mm:ss"

Number = int | float | Decimal


def parse_locale(locale: str | Locale) -> Locale:
    """Parse a locale tag in either ``en_US`` or ``en-US`` form."""
    if isinstance(locale, Locale):
        return locale
    return Locale.parse(locale.replace("-", "_"))


class _FixedCurrencySymbols(dict):
    """Currency symbol table that answers every code with one symbol."""

    def __init__(self, symbol: str) -> None:
        super().__init__()
        self._symbol = symbol

    def get(self, key: Any, default: Any = None) -> str:
        return self._symbol

    def __getitem__(self, key: Any) -> str:
        return self._symbol

    def __contains__(self, key: object) -> bool:
        return True


class SymbolLocale(Locale):
    """Babel locale whose number and currency symbols can be overridden.

    Babel's pattern renderer asks the locale for its symbols, so a locale
    carrying the overrides is all the renderer needs.
    """

    def __init__(
        self,
        base: Locale,
        symbols: Mapping[str, str] | None = None,
        currency_symbol: str | None = None,
    ) -> None:
        super().__init__(base.language, base.territory, base.script, base.variant)
        self._symbol_overrides = dict(symbols or {})
        self._currency_symbol = currency_symbol

    @property
    def number_symbols(self):
        symbols = super().number_symbols
        if not self._symbol_overrides:
            return symbols
        return {
            system: {**values, **self._symbol_overrides}
            for system, values in symbols.items()
        }

    @property
    def currency_symbols(self):
        if self._currency_symbol is None:
            return super().currency_symbols
        return _FixedCurrencySymbols(self._currency_symbol)


class NumberEngine:
    """Configurable number formatting handle.

    Example:
        engine = NumberEngine("de_DE", NumberStyle.DECIMAL)
        engine.set_attribute("fraction_digits", 2)
        engine.format(1234.5)   # "1.234,50"
    """

    def __init__(
        self,
        locale: str | Locale,
        style: NumberStyle | str,
        pattern: str | None = None,
    ) -> None:
        self._locale = parse_locale(locale)
        self._style = NumberStyle.from_value(style)
        self._pattern: NumberPattern | None = None
        self._text_pattern = pattern

        if not self._style.is_rule_based:
            self._pattern = copy.copy(
                parse_pattern(pattern) if pattern else self._default_pattern()
            )

        self._grouping_used = True
        self._decimal_quantization = True
        self._currency_digits = True
        self._symbols: dict[str, str] = {}
        self._currency_symbol: str | None = None
        self._currency_code: str | None = None
        self._ruleset: str | None = None
        self._prefix: dict[bool, str] = {}
        self._suffix: dict[bool, str] = {}
        self._render_locale: Locale | None = None

    @property
    def locale(self) -> Locale:
        return self._locale

    @property
    def style(self) -> NumberStyle:
        return self._style

    @property
    def number_pattern(self) -> NumberPattern | None:
        return self._pattern

    def _default_pattern(self) -> NumberPattern:
        locale = self._locale
        if self._style is NumberStyle.DECIMAL:
            return locale.decimal_formats.get(None)
        if self._style is NumberStyle.CURRENCY:
            return locale.currency_formats["standard"]
        if self._style is NumberStyle.PERCENT:
            return locale.percent_formats.get(None)
        if self._style is NumberStyle.SCIENTIFIC:
            return locale.scientific_formats.get(None)
        # compact: the pattern only drives attributes, Babel picks the
        # compact pattern per magnitude
        return locale.decimal_formats.get(None)

    # -------------------------------------------------------------------------
    # Setters
    # -------------------------------------------------------------------------

    def set_attribute(self, key: str, value: Any) -> bool:
        kind = ATTRIBUTES.get(key)
        if kind is None:
            return False

        if kind == "bool":
            if not isinstance(value, (bool, int)):
                return False
            flag = bool(value)
            if key == "grouping_used":
                self._grouping_used = flag
            elif key == "decimal_quantization":
                self._decimal_quantization = flag
            else:
                self._currency_digits = flag
            return True

        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return False

        if self._pattern is None:
            # Rule-based styles accept and ignore numeric attributes.
            return True

        pattern = self._pattern
        min_frac, max_frac = pattern.frac_prec
        if key == "fraction_digits":
            pattern.frac_prec = (value, value)
            self._currency_digits = False
        elif key == "min_fraction_digits":
            pattern.frac_prec = (value, max(value, max_frac))
            self._currency_digits = False
        elif key == "max_fraction_digits":
            pattern.frac_prec = (min(min_frac, value), value)
            self._currency_digits = False
        elif key == "min_integer_digits":
            pattern.int_prec = (value, max(value, pattern.int_prec[1]))
        elif key == "grouping_size":
            if value == 0:
                return False
            pattern.grouping = (value, value)
        return True

    def set_symbol(self, key: str, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        if key == CURRENCY_SYMBOL:
            self._currency_symbol = value
        elif key in SYMBOLS:
            self._symbols[SYMBOLS[key]] = value
        else:
            return False
        self._render_locale = None
        return True

    def set_text_attribute(self, key: str, value: Any) -> bool:
        if key not in TEXT_ATTRIBUTES or not isinstance(value, str):
            return False

        if key == "currency_code":
            if len(value) != 3 or not value.isalpha():
                return False
            self._currency_code = value.upper()
        elif key == "ruleset":
            if value not in RULESETS:
                return False
            self._ruleset = value
        else:
            position, _, part = key.partition("_")
            target = self._prefix if part == "prefix" else self._suffix
            target[position == "negative"] = value
        return True

    def get_text_attribute(self, key: str) -> str | None:
        if key == "currency_code":
            return self._currency_code or self.default_currency()
        if key == "ruleset":
            return self._ruleset
        return None

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    def default_currency(self) -> str | None:
        """Currency in use in the locale's territory, if any."""
        territory = self._locale.territory
        if not territory:
            return None
        currencies = get_territory_currencies(territory)
        return currencies[0] if currencies else None

    def format(self, value: Number) -> str:
        """Format a number.

        Raises:
            Exception: Whatever the underlying engine raises; callers wrap it.
        """
        if self._style is NumberStyle.CURRENCY:
            return self.format_currency(value, None)
        if self._style.is_rule_based:
            return self._format_rule_based(value)
        if self._style is NumberStyle.COMPACT:
            return self._format_compact(value)
        return self._apply(value, currency=None)

    def format_currency(self, value: Number, currency: str | None) -> str:
        """Format an amount of money.

        Raises:
            ValueError: If no currency is given and none can be derived.
        """
        currency = currency or self.get_text_attribute("currency_code")
        if not currency:
            raise ValueError(f"No currency for locale {self._locale}")
        if self._pattern is None:
            raise ValueError(f"Style {self._style.value} cannot format currencies")
        return self._apply(value, currency=currency)

    def _rendering_locale(self) -> Locale:
        if self._render_locale is None:
            if self._symbols or self._currency_symbol is not None:
                self._render_locale = SymbolLocale(
                    self._locale, self._symbols, self._currency_symbol
                )
            else:
                self._render_locale = self._locale
        return self._render_locale

    def _effective_pattern(self) -> NumberPattern:
        pattern = self._pattern
        if pattern is None:
            raise ValueError(f"Style {self._style.value} has no number pattern")
        minus = self._symbols.get("minusSign")
        if not self._prefix and not self._suffix and minus is None:
            return pattern
        pattern = copy.copy(pattern)
        if minus is not None:
            # parse_pattern derives the negative prefix with a literal "-"
            pattern.prefix = (pattern.prefix[0], pattern.prefix[1].replace("-", minus))
        pattern.prefix = (
            self._prefix.get(False, pattern.prefix[0]),
            self._prefix.get(True, pattern.prefix[1]),
        )
        pattern.suffix = (
            self._suffix.get(False, pattern.suffix[0]),
            self._suffix.get(True, pattern.suffix[1]),
        )
        return pattern

    def _apply(self, value: Number, currency: str | None) -> str:
        return self._effective_pattern().apply(
            value,
            self._rendering_locale(),
            currency=currency,
            currency_digits=self._currency_digits,
            decimal_quantization=self._decimal_quantization,
            group_separator=self._grouping_used,
        )

    def _format_compact(self, value: Number) -> str:
        if self._pattern is None:
            raise ValueError(f"Style {self._style.value} has no number pattern")
        fraction_digits = self._pattern.frac_prec[1]
        return format_compact_decimal(
            value,
            fraction_digits=fraction_digits,
            locale=self._rendering_locale(),
        )

    def _format_rule_based(self, value: Number) -> str:
        negative = value < 0
        if self._style is NumberStyle.DURATION:
            text = format_duration(DURATION_PATTERN, abs(value))
            sign = "-" if negative else ""
        else:
            if self._style is NumberStyle.ORDINAL:
                value = int(value)
            elif isinstance(value, float) and value.is_integer():
                value = int(value)
            default = "ordinal_num" if self._style is NumberStyle.ORDINAL else "cardinal"
            # num2words renders the sign itself
            text = num2words(
                value,
                lang=str(self._locale),
                to=self._ruleset or default,
            )
            sign = ""
        return f"{self._prefix.get(negative, '')}{sign}{text}{self._suffix.get(negative, '')}"
