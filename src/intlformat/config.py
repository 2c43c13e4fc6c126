"""Configuration sources for intlformat.

Configuration is a read-only nested mapping with two scopes::

    global:
      <family>:
        <format>: {<parameter>: <value>, ...}
    locales:
      <locale>:
        <family>:
          <format>: {<parameter>: <value>, ...}

User configuration is deep-merged over :data:`DEFAULT_CONFIG`, so a config
file only needs to list what it changes.

Usage:
    >>> config = load_config("formats.yaml")
    >>> config.get_global("number", "decimal")
    {'style': 'decimal', 'fraction_digits': 2}
"""

from __future__ import annotations

import copy
import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from intlformat.errors import ConfigSourceError

logger = logging.getLogger(__name__)


FILESIZE_UNITS = [
    "filesize.bytes",
    "filesize.KiB",
    "filesize.MiB",
    "filesize.GiB",
    "filesize.TiB",
    "filesize.PiB",
    "filesize.EiB",
    "filesize.ZiB",
    "filesize.YiB",
]

DISKSIZE_UNITS = [
    "disksize.bytes",
    "disksize.kB",
    "disksize.MB",
    "disksize.GB",
    "disksize.TB",
    "disksize.PB",
    "disksize.EB",
    "disksize.ZB",
    "disksize.YB",
]

DEFAULT_CONFIG: dict[str, Any] = {
    "global": {
        "number": {
            "integer": {"style": "decimal", "fraction_digits": 0},
            "decimal": {"style": "decimal", "fraction_digits": 2},
            "percent": {"style": "percent", "fraction_digits": 0},
            "scientific": {"style": "scientific"},
            "spellout": {"style": "spellout"},
            "ordinal": {"style": "ordinal"},
        },
        "currency": {
            "currency": {"style": "currency"},
        },
        "datetime": {
            "time": {"date_type": "none", "time_type": "short"},
            "date": {"date_type": "short", "time_type": "none"},
            "datetime": {"date_type": "short", "time_type": "short"},
        },
        "secret": {
            "secret": {"visible": 5},
        },
        "duration": {
            "duration": {"pattern": "HH:mm:ss"},
        },
        "filesize": {
            "filesize": {"base": 1024, "units": FILESIZE_UNITS, "fraction_digits": 2},
            "disksize": {"base": 1000, "units": DISKSIZE_UNITS, "fraction_digits": 2},
        },
    },
    "locales": {},
}


def normalize_locale(locale: str) -> str:
    """Normalize a locale tag to Babel's underscore form (``en-US`` -> ``en_US``)."""
    return locale.strip().replace("-", "_")


def merge_config(base: dict[str, Any], override: Mapping[str, Any]) -> None:
    """Deep merge ``override`` into ``base`` in place."""
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, Mapping)
        ):
            merge_config(base[key], value)
        else:
            base[key] = copy.deepcopy(value)


class FormatterConfig:
    """Read-only layered configuration.

    Example:
        >>> config = FormatterConfig.from_dict({
        ...     "locales": {"de-DE": {"number": {"decimal": {"fraction_digits": 3}}}},
        ... })
        >>> config.get_locale("de_DE", "number", "decimal")
        {'fraction_digits': 3}
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        data = copy.deepcopy(dict(data or {}))
        locales = data.get("locales") or {}
        if not isinstance(locales, Mapping):
            raise ConfigSourceError("'locales' must be a mapping of locale -> families")
        data["global"] = dict(data.get("global") or {})
        data["locales"] = {
            normalize_locale(str(locale)): families
            for locale, families in locales.items()
        }
        self._data = data

    @classmethod
    def default(cls) -> "FormatterConfig":
        return cls(DEFAULT_CONFIG)

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        *,
        include_defaults: bool = True,
    ) -> "FormatterConfig":
        """Create configuration from a mapping.

        Args:
            data: Configuration mapping.
            include_defaults: Merge ``data`` over :data:`DEFAULT_CONFIG`.

        Returns:
            FormatterConfig instance.
        """
        if include_defaults:
            merged = copy.deepcopy(DEFAULT_CONFIG)
            # Locale keys must be normalized before merging so that
            # "de-DE" and "de_DE" land in the same scope.
            data = dict(data)
            if isinstance(data.get("locales"), Mapping):
                data["locales"] = {
                    normalize_locale(str(k)): v for k, v in data["locales"].items()
                }
            merge_config(merged, data)
            return cls(merged)
        return cls(data)

    def get_global(self, family: str, format: str) -> Mapping[str, Any] | None:
        """Get the global-scope parameters of a format."""
        return self._lookup(self._data["global"], family, format)

    def get_locale(
        self,
        locale: str,
        family: str,
        format: str,
    ) -> Mapping[str, Any] | None:
        """Get the parameters of a format for exactly ``locale``."""
        families = self._data["locales"].get(normalize_locale(locale))
        if not isinstance(families, Mapping):
            return None
        return self._lookup(families, family, format)

    def locales(self) -> list[str]:
        """List locales that carry overrides."""
        return list(self._data["locales"].keys())

    def formats(self, family: str) -> list[str]:
        """List globally configured format names of a family."""
        formats = self._data["global"].get(family)
        return list(formats.keys()) if isinstance(formats, Mapping) else []

    def to_dict(self) -> dict[str, Any]:
        """Get a copy of the full configuration."""
        return copy.deepcopy(self._data)

    def _lookup(
        self,
        families: Mapping[str, Any],
        family: str,
        format: str,
    ) -> Mapping[str, Any] | None:
        formats = families.get(family)
        if not isinstance(formats, Mapping):
            return None
        params = formats.get(format)
        if params is None:
            return None
        if not isinstance(params, Mapping):
            raise ConfigSourceError(
                f"Parameters of {family} format '{format}' must be a mapping, "
                f"got {type(params).__name__}"
            )
        return params

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FormatterConfig):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"FormatterConfig(locales={self.locales()})"


def read_config_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML, JSON or TOML configuration file.

    Raises:
        ConfigSourceError: If the file is missing, unsupported or invalid.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigSourceError(f"Configuration file not found: {path}")

    content = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()

    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content) or {}
        elif suffix == ".json":
            data = json.loads(content)
        elif suffix == ".toml":
            data = tomllib.loads(content)
        else:
            raise ConfigSourceError(f"Unsupported file format: {suffix}")
    except (yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigSourceError(f"Failed to load config {path}: {e}") from e

    if not isinstance(data, Mapping):
        raise ConfigSourceError(f"Configuration root must be a mapping: {path}")

    logger.debug("Loaded formatter configuration from %s", path)
    return dict(data)


def load_config(
    *paths: str | Path,
    overrides: Mapping[str, Any] | None = None,
    include_defaults: bool = True,
) -> FormatterConfig:
    """Load configuration from files.

    Later files override earlier ones; ``overrides`` is applied last.

    Args:
        *paths: Configuration files (YAML, JSON or TOML).
        overrides: Extra configuration mapping.
        include_defaults: Start from :data:`DEFAULT_CONFIG`.

    Returns:
        FormatterConfig instance.
    """
    merged: dict[str, Any] = {}
    for path in paths:
        merge_config(merged, read_config_file(path))
    if overrides:
        merge_config(merged, overrides)
    return FormatterConfig.from_dict(merged, include_defaults=include_defaults)
