"""Registry of named format handlers.

A handler is a callable ``handler(formatter, value, **options) -> str``.
The default registry maps every built-in format name to the matching
:class:`~intlformat.formatter.Formatter` method; applications register
their own formats without touching the formatter.

Example:
    registry = FormatRegistry.with_builtins()

    @registry.handler("price")
    def price(formatter, value, **options):
        return formatter.currency(value, "EUR")

    Formatter(registry=registry).format("price", 9.99)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from intlformat.errors import UnknownFormat
from intlformat.types import Format

if TYPE_CHECKING:
    from intlformat.formatter import Formatter


FormatHandler = Callable[..., str]


def _method(name: str) -> FormatHandler:
    def handler(formatter: "Formatter", value: Any, **options: Any) -> str:
        return getattr(formatter, name)(value, **options)

    handler.__name__ = name
    handler.__qualname__ = f"builtin.{name}"
    return handler


BUILTIN_FORMATS = (
    Format.STRING,
    Format.INTEGER,
    Format.DECIMAL,
    Format.CURRENCY,
    Format.PERCENT,
    Format.SCIENTIFIC,
    Format.SPELLOUT,
    Format.ORDINAL,
    Format.TIME,
    Format.DATE,
    Format.DATETIME,
    Format.DURATION,
    Format.FILESIZE,
    Format.DISKSIZE,
    Format.SECRET,
)


class FormatRegistry:
    """Name -> handler table."""

    def __init__(self) -> None:
        self._handlers: dict[str, FormatHandler] = {}

    @classmethod
    def with_builtins(cls) -> "FormatRegistry":
        """Create a registry holding every built-in format."""
        registry = cls()
        for name in BUILTIN_FORMATS:
            registry.register(name, _method(name))
        return registry

    def register(
        self,
        name: str,
        handler: FormatHandler,
        replace: bool = False,
    ) -> None:
        """Register a handler.

        Raises:
            ValueError: If name already exists and replace is False.
        """
        if name in self._handlers and not replace:
            raise ValueError(f"Format '{name}' already registered")
        self._handlers[name] = handler

    def handler(
        self,
        name: str,
        replace: bool = False,
    ) -> Callable[[FormatHandler], FormatHandler]:
        """Decorator form of :meth:`register`."""

        def decorator(func: FormatHandler) -> FormatHandler:
            self.register(name, func, replace=replace)
            return func

        return decorator

    def unregister(self, name: str) -> None:
        self._handlers.pop(name, None)

    def get(self, name: str) -> FormatHandler:
        """Get a handler by name.

        Raises:
            UnknownFormat: If the name is not registered.
        """
        if name not in self._handlers:
            raise UnknownFormat(name, self.names())
        return self._handlers[name]

    def has(self, name: str) -> bool:
        return name in self._handlers

    def names(self) -> list[str]:
        return list(self._handlers.keys())

    def copy(self) -> "FormatRegistry":
        registry = FormatRegistry()
        registry._handlers = dict(self._handlers)
        return registry

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
