"""Configuration resolution.

Merges the three configuration scopes of a format into one
:class:`ResolvedFormatSpec`:

    format scope    per-call overrides (e.g. ``decimal(value, decimals=3)``)
         |
    locale scope    locales.<locale>.<family>.<format>, then locales.<language>...
         |
    global scope    global.<family>.<format>

Scalars are "first match wins" in that order. The attribute, symbol and
text-attribute maps are unions where the first definition of a key wins;
maps are collected from the format scope, then the global scope, then the
locale scope.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from intlformat.config import FormatterConfig, normalize_locale
from intlformat.errors import ConfigurationMissing
from intlformat.types import FormatFamily

logger = logging.getLogger(__name__)


MAP_PARAMETERS = ("attributes", "symbols", "text_attributes")

REQUIRED_PARAMETERS: dict[FormatFamily, tuple[str, ...]] = {
    FormatFamily.NUMBER: ("style",),
    FormatFamily.CURRENCY: ("style",),
    FormatFamily.DATETIME: ("date_type", "time_type"),
    FormatFamily.SECRET: ("visible",),
    FormatFamily.DURATION: ("pattern",),
    FormatFamily.FILESIZE: ("base", "units"),
}


def _text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _frozen(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class ResolvedFormatSpec:
    """Outcome of configuration resolution for one (family, format, locale).

    Attributes:
        family: Format family.
        format: Format name.
        locale: Locale the spec was resolved for.
        style: Number style or None for families without styles.
        pattern: Pattern string or None.
        attributes: Numeric engine attributes.
        symbols: Engine symbol overrides.
        text_attributes: Engine text attributes.
        options: Every other resolved scalar.
    """

    family: FormatFamily
    format: str
    locale: str
    style: str | None = None
    pattern: str | None = None
    attributes: Mapping[str, Any] = field(default_factory=dict)
    symbols: Mapping[str, str] = field(default_factory=dict)
    text_attributes: Mapping[str, str] = field(default_factory=dict)
    options: Mapping[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        """Get a resolved scalar (style and pattern included)."""
        if name == "style":
            return self.style if self.style is not None else default
        if name == "pattern":
            return self.pattern if self.pattern is not None else default
        return self.options.get(name, default)


def locale_chain(locale: str) -> list[str]:
    """Locale scopes to probe, most specific first.

    Example:
        >>> locale_chain("sr_Latn_RS")
        ['sr_Latn_RS', 'sr_Latn', 'sr']
    """
    parts = normalize_locale(locale).split("_")
    return ["_".join(parts[:i]) for i in range(len(parts), 0, -1)]


def union_maps(layers: Iterable[Mapping[str, Any] | None]) -> dict[str, Any]:
    """Union of mappings; the first layer defining a key wins."""
    merged: dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            if key not in merged:
                merged[key] = value
    return merged


class ConfigurationResolver:
    """Resolves format parameters from a :class:`FormatterConfig`.

    Example:
        resolver = ConfigurationResolver(FormatterConfig.default())
        spec = resolver.resolve("number", "decimal", "de_DE")
        spec.style                       # "decimal"
        spec.get("fraction_digits")      # 2
    """

    def __init__(self, config: FormatterConfig) -> None:
        self._config = config

    @property
    def config(self) -> FormatterConfig:
        return self._config

    def resolve(
        self,
        family: FormatFamily | str,
        format: str,
        locale: str,
        overrides: Mapping[str, Any] | None = None,
    ) -> ResolvedFormatSpec:
        """Resolve the parameters of a format.

        Args:
            family: Format family.
            format: Format name.
            locale: Locale to resolve for.
            overrides: Format-scope parameters (highest precedence).

        Returns:
            ResolvedFormatSpec.

        Raises:
            ConfigurationMissing: If a required parameter is absent from
                every scope.
        """
        family = FormatFamily(family)
        format_scope = {k: v for k, v in (overrides or {}).items() if v is not None}
        locale_scopes = [
            self._config.get_locale(tag, family.value, format)
            for tag in locale_chain(locale)
        ]
        global_scope = self._config.get_global(family.value, format)

        scalar_order = [format_scope, *locale_scopes, global_scope]
        map_order = [format_scope, global_scope, *locale_scopes]

        scalars: dict[str, Any] = {}
        for scope in scalar_order:
            if not scope:
                continue
            for key, value in scope.items():
                if key in MAP_PARAMETERS or value is None:
                    continue
                scalars.setdefault(key, value)

        for required in REQUIRED_PARAMETERS[family]:
            if required not in scalars:
                raise ConfigurationMissing(family.value, format, required)

        maps = {
            name: union_maps(scope.get(name) if scope else None for scope in map_order)
            for name in MAP_PARAMETERS
        }

        style = scalars.pop("style", None)
        pattern = scalars.pop("pattern", None)

        spec = ResolvedFormatSpec(
            family=family,
            format=format,
            locale=normalize_locale(locale),
            style=_text(style),
            pattern=_text(pattern),
            attributes=_frozen(maps["attributes"]),
            symbols=_frozen(maps["symbols"]),
            text_attributes=_frozen(maps["text_attributes"]),
            options=_frozen(scalars),
        )
        logger.debug("Resolved %s format '%s' for %s: %s", family.value, format, locale, spec)
        return spec
