"""
Lenient parsing helpers for upstream payloads

Bitpanda sends every number as a string. Anything that does not parse is
treated as zero rather than an error, so a single bad field never sinks a
whole listing.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

ZERO = Decimal("0")


def parse_decimal(value: Any) -> Decimal:
    """
    Parse a locale-invariant decimal ("1.5", "-0.25", "1e3").

    Returns Decimal(0) for None, blank, non-numeric, NaN or infinite input.

    Examples:
        "1.5"  -> Decimal("1.5")
        "abc"  -> Decimal("0")
        "1,5"  -> Decimal("0")
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        return ZERO
    try:
        result = Decimal(value.strip())
    except InvalidOperation:
        return ZERO
    return result if result.is_finite() else ZERO


def parse_optional_decimal(value: Any) -> Optional[Decimal]:
    """None for absent/blank values, otherwise parse_decimal()"""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_decimal(value)


def parse_unix_time(value: Any) -> datetime:
    """Epoch seconds (string or int) -> aware UTC datetime; now() when unusable"""
    try:
        return datetime.fromtimestamp(int(str(value).strip()), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return datetime.now(timezone.utc)


def parse_epoch_ms(value: Any) -> Optional[datetime]:
    """Epoch milliseconds -> aware UTC datetime; None when unusable"""
    try:
        return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def parse_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_bool(value: Any) -> bool:
    """JSON booleans as-is; the strings "true"/"1" (any case) are true, everything else false"""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1")
    return False
