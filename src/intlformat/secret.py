"""Masking of secrets (tokens, keys, card numbers)."""

from __future__ import annotations

MASK_CHAR = "*"


def mask(value: str, visible: int) -> str:
    """Hide all but ``visible`` trailing characters of ``value``.

    Strings not longer than ``visible`` are hidden completely. When fewer
    characters would be hidden than shown, the first ``visible`` characters
    are masked instead.

    Args:
        value: Secret to mask.
        visible: How many characters may stay visible.

    Returns:
        Masked string of the same length.

    Example:
        >>> mask("1234567890", 4)
        '******7890'
        >>> mask("123456", 4)
        '****56'
        >>> mask("1234", 4)
        '****'
    """
    visible = abs(int(visible))
    length = len(value)
    hidden = length - visible

    if length <= visible:
        return MASK_CHAR * length
    if hidden < visible:
        return MASK_CHAR * visible + value[visible:]
    return MASK_CHAR * hidden + value[hidden:]


class SecretMasker:
    """Masker bound to a visible character budget."""

    def __init__(self, visible: int = 5) -> None:
        self.visible = visible

    def mask(self, value: str | None) -> str:
        if value is None:
            return ""
        return mask(value, self.visible)
