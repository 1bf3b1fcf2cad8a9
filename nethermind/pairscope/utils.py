import datetime
import math
from typing import Any
from urllib.parse import urlencode

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def is_hex_body(value: str) -> bool:
    """
    Returns True if every character of value is a hex digit.  Empty strings are considered valid hex.

    >>> is_hex_body("0bb8")
    True
    >>> is_hex_body("0b_b8")
    False
    """
    return all(char in HEX_DIGITS for char in value)


def redact_params(params: dict[str, Any], secret_keys: tuple[str, ...] = ("apikey", "api_key")) -> str:
    """
    Urlencodes query parameters for logging, masking API keys

    :param params: query parameters
    :param secret_keys: parameter names whose values are masked
    :return: urlencoded query string
    """
    return urlencode({key: ("****" if key in secret_keys and val else val) for key, val in params.items()})


def format_unix_date(timestamp: int) -> str:
    """
    Formats a unix timestamp as a short US date in UTC.

    >>> format_unix_date(1704412800)
    'Jan 5, 2024'
    """
    date = datetime.datetime.fromtimestamp(timestamp, tz=datetime.timezone.utc)
    return f"{date.strftime('%b')} {date.day}, {date.year}"


def safe_float(value: Any) -> float:
    """
    Parses a decimal string returned by an upstream API.  Values that cannot be parsed are
    treated as zero.
    """
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(parsed):
        return 0.0
    return parsed


def safe_int(value: Any) -> int:
    """Parses an integer string returned by an upstream API, returning 0 for unparseable values"""
    try:
        return int(value)
    except (TypeError, ValueError):
        parsed = safe_float(value)
        return int(parsed) if math.isfinite(parsed) else 0
