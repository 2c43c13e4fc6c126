"""intlformat - Locale and timezone aware value formatting powered by Babel."""

from intlformat.config import (
    DEFAULT_CONFIG,
    FormatterConfig,
    load_config,
    read_config_file,
)
from intlformat.context import FormatterContext, get_timezone
from intlformat.defaults import ApplicationDefaults
from intlformat.duration import DurationFormatter, format_duration
from intlformat.errors import (
    ConfigError,
    ConfigSourceError,
    ConfigurationMissing,
    EngineFormattingFailed,
    FailedToCreateFormatter,
    FailedToFormatValue,
    FormattingError,
    InvalidAttribute,
    UnknownFormat,
)
from intlformat.factories import (
    DateTimeFormatterFactory,
    NumberFormatterFactory,
    OverrideLayer,
)
from intlformat.filesize import FilesizeScaler, ScaledValue, UnitTable, scale
from intlformat.formatter import Formatter
from intlformat.registry import FormatRegistry
from intlformat.resolver import ConfigurationResolver, ResolvedFormatSpec
from intlformat.secret import SecretMasker, mask
from intlformat.translation import CatalogTranslator, Translator
from intlformat.types import DateTimeStyle, Format, FormatFamily, NumberStyle

__version__ = "0.1.0"

__all__ = [
    # Facade
    "Formatter",
    "FormatRegistry",
    # Configuration
    "DEFAULT_CONFIG",
    "FormatterConfig",
    "load_config",
    "read_config_file",
    "ConfigurationResolver",
    "ResolvedFormatSpec",
    "ApplicationDefaults",
    "FormatterContext",
    "get_timezone",
    # Factories
    "NumberFormatterFactory",
    "DateTimeFormatterFactory",
    "OverrideLayer",
    # Algorithms
    "DurationFormatter",
    "format_duration",
    "FilesizeScaler",
    "ScaledValue",
    "UnitTable",
    "scale",
    "SecretMasker",
    "mask",
    # Translation
    "Translator",
    "CatalogTranslator",
    # Types
    "DateTimeStyle",
    "Format",
    "FormatFamily",
    "NumberStyle",
    # Errors
    "FormattingError",
    "UnknownFormat",
    "FailedToCreateFormatter",
    "ConfigurationMissing",
    "InvalidAttribute",
    "FailedToFormatValue",
    "EngineFormattingFailed",
    "ConfigError",
    "ConfigSourceError",
]
