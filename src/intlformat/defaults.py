"""Application defaults for locale and timezone."""

from __future__ import annotations

import os
from dataclasses import dataclass

from babel.core import default_locale

DEFAULT_LOCALE = "en_US"
DEFAULT_TIMEZONE = "UTC"


@dataclass(frozen=True)
class ApplicationDefaults:
    """Locale and timezone used when a formatter has none set.

    Attributes:
        locale: Locale tag (e.g. "en_US").
        timezone: IANA timezone name or offset.
    """

    locale: str = DEFAULT_LOCALE
    timezone: str = DEFAULT_TIMEZONE

    @classmethod
    def from_env(cls) -> "ApplicationDefaults":
        """Read defaults from the environment.

        Checks INTLFORMAT_LOCALE, then the POSIX locale variables (via Babel),
        and INTLFORMAT_TIMEZONE. Missing values fall back to en_US / UTC.
        """
        locale = os.getenv("INTLFORMAT_LOCALE") or default_locale() or DEFAULT_LOCALE
        timezone = os.getenv("INTLFORMAT_TIMEZONE") or DEFAULT_TIMEZONE
        return cls(locale=locale, timezone=timezone)
