"""Factories building configured engine handles."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Any, Mapping

from babel.core import UnknownLocaleError

from intlformat.engine import DateTimeEngine, NumberEngine
from intlformat.errors import FailedToCreateFormatter, InvalidAttribute
from intlformat.resolver import ResolvedFormatSpec, union_maps
from intlformat.types import DateTimeStyle, NumberStyle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverrideLayer:
    """One layer of engine overrides."""

    attributes: Mapping[str, Any] = field(default_factory=dict)
    symbols: Mapping[str, str] = field(default_factory=dict)
    text_attributes: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_spec(cls, spec: ResolvedFormatSpec) -> "OverrideLayer":
        return cls(
            attributes=spec.attributes,
            symbols=spec.symbols,
            text_attributes=spec.text_attributes,
        )


class NumberFormatterFactory:
    """Builds :class:`NumberEngine` handles.

    Layers are merged in the order given, the first layer to set a key wins.
    Attributes are applied first, then symbols, then text attributes. A
    rejected key fails the whole build.

    Example:
        factory = NumberFormatterFactory()
        engine = factory.build(
            "en_US",
            NumberStyle.DECIMAL,
            None,
            OverrideLayer(attributes={"fraction_digits": 2}),
            OverrideLayer(symbols={"decimal_separator": ","}),
        )
    """

    def build(
        self,
        locale: str,
        style: NumberStyle | str,
        pattern: str | None = None,
        *layers: OverrideLayer,
        family: str | None = None,
        format: str | None = None,
    ) -> NumberEngine:
        try:
            engine = NumberEngine(locale, style, pattern)
        except (UnknownLocaleError, ValueError, TypeError) as e:
            raise FailedToCreateFormatter(
                f"Failed to create number formatter ({style}) for locale {locale}: {e}",
                family=family,
                format=format,
                cause=e,
            ) from e

        attributes = union_maps(layer.attributes for layer in layers)
        symbols = union_maps(layer.symbols for layer in layers)
        texts = union_maps(layer.text_attributes for layer in layers)

        groups = (
            ("attribute", attributes, engine.set_attribute),
            ("symbol", symbols, engine.set_symbol),
            ("text_attribute", texts, engine.set_text_attribute),
        )
        for kind, values, setter in groups:
            for key, value in values.items():
                if not setter(key, value):
                    raise InvalidAttribute(kind, key, family=family, format=format)

        logger.debug(
            "Built number formatter: locale=%s style=%s pattern=%s attributes=%s "
            "symbols=%s texts=%s",
            locale, engine.style.value, pattern, attributes, symbols, texts,
        )
        return engine


class DateTimeFormatterFactory:
    """Builds :class:`DateTimeEngine` handles."""

    def build(
        self,
        date_type: DateTimeStyle | str | None,
        time_type: DateTimeStyle | str | None,
        pattern: str | None,
        locale: str,
        timezone: tzinfo,
        *,
        family: str | None = None,
        format: str | None = None,
    ) -> DateTimeEngine:
        try:
            engine = DateTimeEngine(locale, date_type, time_type, pattern, timezone)
        except (UnknownLocaleError, ValueError, TypeError) as e:
            raise FailedToCreateFormatter(
                f"Failed to create date formatter for locale {locale}: {e}",
                family=family,
                format=format,
                cause=e,
            ) from e

        logger.debug(
            "Built date formatter: locale=%s date=%s time=%s pattern=%s tz=%s",
            locale, engine.date_type.value, engine.time_type.value, pattern, timezone,
        )
        return engine
