"""Lenient numeric parsing for source text fields.

The open data feed publishes every attribute as a JSON string, and some rows
carry blanks or junk. These helpers turn such values into ``None`` instead of
raising so one bad row never breaks a scan.
"""

from __future__ import annotations

import math
from typing import Any, Optional


def clean_text(value: Any) -> Optional[str]:
    """Return the stripped text form of a scalar, or None for blanks."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def parse_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_year(value: Any) -> Optional[int]:
    """Parse a year written as "1925" or "1925.0"; fractional years are rejected."""
    number = parse_float(value)
    if number is None or not number.is_integer():
        return None
    return int(number)
