"""Exception hierarchy for intlformat.

All failures raised while building or using a formatting handle derive from
:class:`FormattingError`, which records the format family and format name
that failed together with the original exception (if any).

Hierarchy:
    FormattingError
     +-- UnknownFormat
     +-- FailedToCreateFormatter
     |    +-- ConfigurationMissing
     |    +-- InvalidAttribute
     +-- FailedToFormatValue
          +-- EngineFormattingFailed

    ConfigError (configuration sources)
"""

from __future__ import annotations


class FormattingError(Exception):
    """Base formatting error.

    Attributes:
        family: Format family (``number``, ``datetime``, ...) or None.
        format: Format name or None.
        cause: Underlying exception, also available as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        family: str | None = None,
        format: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.family = family
        self.format = format
        self.cause = cause
        super().__init__(message)


class UnknownFormat(FormattingError):
    """No handler is registered under the requested name."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.available = available
        super().__init__(
            f"Format '{name}' is not registered. Available: {available}",
            format=name,
        )


class FailedToCreateFormatter(FormattingError):
    """A formatting handle could not be constructed."""

    pass


class ConfigurationMissing(FailedToCreateFormatter):
    """A required parameter is absent from every configuration scope."""

    def __init__(self, family: str, format: str, parameter: str) -> None:
        self.parameter = parameter
        super().__init__(
            f"Required parameter '{parameter}' for {family} format '{format}' "
            f"is not configured",
            family=family,
            format=format,
        )


class InvalidAttribute(FailedToCreateFormatter):
    """The engine rejected an attribute, symbol or text attribute."""

    def __init__(
        self,
        kind: str,
        key: str,
        *,
        family: str | None = None,
        format: str | None = None,
    ) -> None:
        self.kind = kind
        self.key = key
        super().__init__(
            f"Number engine rejected {kind} '{key}': unknown or invalid value",
            family=family,
            format=format,
        )


class FailedToFormatValue(FormattingError):
    """A handle was built but the value could not be formatted."""

    pass


class EngineFormattingFailed(FailedToFormatValue):
    """The engine's format call reported a failure."""

    def __init__(
        self,
        engine_code: str,
        engine_message: str,
        *,
        family: str | None = None,
        format: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.engine_code = engine_code
        self.engine_message = engine_message
        super().__init__(
            f"Failed to format {family} value with format '{format}': "
            f"[{engine_code}] {engine_message}",
            family=family,
            format=format,
            cause=cause,
        )


class ConfigError(Exception):
    """Base configuration error."""

    pass


class ConfigSourceError(ConfigError):
    """Configuration source could not be read or parsed."""

    pass
