"""Unit label translations.

Catalog values are either plain strings or plural forms keyed by CLDR
plural category (``one``, ``few``, ``many``, ``other``, ...); the category
is picked with Babel's plural rules for the requested locale.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Mapping, Protocol, runtime_checkable

from babel.core import Locale, UnknownLocaleError

from intlformat.config import normalize_locale
from intlformat.resolver import locale_chain

logger = logging.getLogger(__name__)

Message = str | Mapping[str, str]


@runtime_checkable
class Translator(Protocol):
    """Translation lookup used for unit labels."""

    def translate(
        self,
        key: str,
        locale: str,
        count: int | float | Decimal | None = None,
    ) -> str:
        ...


def _units(prefix: str, labels: list[str]) -> dict[str, str]:
    return {f"{prefix}.{label}": label for label in labels}


_IEC = ["KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB"]
_SI = ["kB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"]


BUILTIN_CATALOGS: dict[str, dict[str, Message]] = {
    "en": {
        "filesize.bytes": {"one": "byte", "other": "bytes"},
        "disksize.bytes": {"one": "byte", "other": "bytes"},
        **_units("filesize", _IEC),
        **_units("disksize", _SI),
    },
    "de": {
        "filesize.bytes": {"one": "Byte", "other": "Bytes"},
        "disksize.bytes": {"one": "Byte", "other": "Bytes"},
    },
    "ru": {
        "filesize.bytes": {"one": "байт", "few": "байта", "many": "байт", "other": "байта"},
        "disksize.bytes": {"one": "байт", "few": "байта", "many": "байт", "other": "байта"},
        "filesize.KiB": "КиБ",
        "filesize.MiB": "МиБ",
        "filesize.GiB": "ГиБ",
        "filesize.TiB": "ТиБ",
        "filesize.PiB": "ПиБ",
        "filesize.EiB": "ЭиБ",
        "filesize.ZiB": "ЗиБ",
        "filesize.YiB": "ЙиБ",
        "disksize.kB": "кБ",
        "disksize.MB": "МБ",
        "disksize.GB": "ГБ",
        "disksize.TB": "ТБ",
        "disksize.PB": "ПБ",
        "disksize.EB": "ЭБ",
        "disksize.ZB": "ЗБ",
        "disksize.YB": "ЙБ",
    },
    "ko": {
        "filesize.bytes": "바이트",
        "disksize.bytes": "바이트",
    },
}


class CatalogTranslator:
    """Translator backed by in-memory catalogs.

    Lookup order: the locale, its parent locales, the fallback locale, and
    finally the key itself.

    Example:
        translator = CatalogTranslator()
        translator.translate("filesize.bytes", "en_US", 1)   # "byte"
        translator.translate("filesize.bytes", "ru", 3)      # "байта"
    """

    def __init__(
        self,
        catalogs: Mapping[str, Mapping[str, Message]] | None = None,
        *,
        fallback: str = "en",
        include_builtin: bool = True,
    ) -> None:
        self._catalogs: dict[str, dict[str, Message]] = {}
        self._fallback = normalize_locale(fallback)
        if include_builtin:
            for locale, messages in BUILTIN_CATALOGS.items():
                self.add_messages(locale, messages)
        for locale, messages in (catalogs or {}).items():
            self.add_messages(locale, messages)

    def add_messages(self, locale: str, messages: Mapping[str, Message]) -> None:
        """Add or replace messages of a locale."""
        catalog = self._catalogs.setdefault(normalize_locale(locale), {})
        catalog.update(messages)

    def get_supported_locales(self) -> list[str]:
        return sorted(self._catalogs.keys())

    def translate(
        self,
        key: str,
        locale: str,
        count: int | float | Decimal | None = None,
    ) -> str:
        for candidate in [*locale_chain(locale), self._fallback]:
            catalog = self._catalogs.get(candidate)
            if catalog is not None and key in catalog:
                return self._select(catalog[key], candidate, count)

        logger.debug("No translation for '%s' in %s", key, locale)
        return key

    def _select(self, message: Any, locale: str, count: Any) -> str:
        if isinstance(message, str):
            return message

        category = "other"
        if count is not None:
            try:
                category = Locale.parse(locale).plural_form(abs(count))
            except (UnknownLocaleError, ValueError):
                # Catalog locales unknown to CLDR have no plural rules
                logger.debug("No plural rules for %s, using 'other'", locale)

        return message.get(category) or message.get("other") or next(iter(message.values()))
