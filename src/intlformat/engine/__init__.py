"""Formatting engines wrapped by intlformat.

Number and date/time handles backed by Babel's CLDR data, with num2words
for spelled-out and ordinal numbers.
"""

from intlformat.engine.dates import DateTimeEngine, localize
from intlformat.engine.number import (
    ATTRIBUTES,
    SYMBOLS,
    TEXT_ATTRIBUTES,
    NumberEngine,
    SymbolLocale,
    parse_locale,
)

__all__ = [
    "ATTRIBUTES",
    "SYMBOLS",
    "TEXT_ATTRIBUTES",
    "DateTimeEngine",
    "NumberEngine",
    "SymbolLocale",
    "localize",
    "parse_locale",
]
