"""Utility functions for inisupport."""

import re

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(value: str) -> int:
    """Parse the leading decimal integer of ``value`` the way C ``atoi`` does.

    Leading whitespace and a sign are accepted; parsing stops at the first
    non-digit.

    Args:
        value: Text to parse  # (e.g. "42", " -7", "12abc")

    Returns:
        Parsed integer, or 0 when ``value`` has no leading digits
    """
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


def parse_bool(value: str) -> bool:
    """Interpret ``value`` as a flag.

    A first character of ``Y``, ``T`` or ``1`` (any case) is true; anything
    else is true only if it parses as a non-zero integer.

    Args:
        value: Text to interpret  # (e.g. "yes", "true", "0", "2")

    Returns:
        Truth value
    """
    if value[:1].upper() in ("Y", "T", "1"):
        return True
    return parse_int(value) != 0


def split_key(key: str) -> tuple:
    """Split ``section:name`` into its section and name.

    Args:
        key: Configuration key

    Returns:
        ``(section, name)``; a key without a colon has an empty section
    """
    section, sep, name = key.partition(":")
    return (section, name) if sep else ("", key)
