"""Lenient conversions of text and environment values to numbers and ages."""

import os
import re
from datetime import date

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_UINT64_MAX = (1 << 64) - 1

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"[0-9]+")
_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def get_role_int(env_key: str) -> int:
    """Read an integer role from the environment; 0 when unset or not a number.

    Values outside the 64-bit signed range are clamped to it.
    """
    text = os.environ.get(env_key, "")
    if not _SIGNED.fullmatch(text):
        return 0
    return max(_INT64_MIN, min(_INT64_MAX, int(text)))


def parse_uint(text: str) -> int:
    """Parse an unsigned 64-bit decimal integer, returning 0 on any error."""
    if not _UNSIGNED.fullmatch(text):
        return 0
    value = int(text)
    return value if value <= _UINT64_MAX else 0


def string_to_int(text: str) -> int:
    """Parse a signed 64-bit decimal integer, returning 0 on any error."""
    if not _SIGNED.fullmatch(text):
        return 0
    value = int(text)
    return value if _INT64_MIN <= value <= _INT64_MAX else 0


def age(birth_date: str) -> int:
    """Years between the year of a YYYY-MM-DD date and the current year.

    An unparsable date counts as the year 1.
    """
    born_year = 1
    if _DATE.fullmatch(birth_date):
        try:
            born_year = date.fromisoformat(birth_date).year
        except ValueError:
            born_year = 1
    return date.today().year - born_year