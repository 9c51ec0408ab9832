"""Salary string parsing and hourly-to-annual conversion."""

import re
from typing import Optional, Tuple

HOURS_PER_WEEK = 40
WEEKS_PER_YEAR = 52

# Largest value the dataset column and the listings table can hold
MAX_SALARY = 2**63 - 1

_HOURLY_MARKER = re.compile(r"hour", re.IGNORECASE)
_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")
_UNIT_TOKENS = re.compile(r"year|hour", re.IGNORECASE)
_NUMBER = re.compile(r"\d+")


def annualize_hourly(hourly: float) -> int:
    """Convert an hourly rate to an annual salary rounded to the nearest thousand.

    Example:
        >>> annualize_hourly(45)
        94000
    """
    return int(round(hourly * HOURS_PER_WEEK * WEEKS_PER_YEAR / 1000) * 1000)


def parse_salary(raw: Optional[str]) -> Tuple[Optional[int], bool]:
    """Parse a raw salary estimate into whole annual dollars.

    The hourly marker is detected on the raw text. Everything that is not a
    letter or digit is then removed (so thousands separators and decimal
    points disappear), the unit tokens are dropped and the first run of
    digits is the value.

    Args:
        raw: Salary text as extracted, e.g. "$45 per hour" or "$70,000 a year"

    Returns:
        (annual_salary, was_hourly). annual_salary is None when nothing numeric
        remains or the value exceeds MAX_SALARY.

    Example:
        >>> parse_salary("$45 per hour")
        (94000, True)
        >>> parse_salary("$70,000 a year")
        (70000, False)
    """
    if raw is None:
        return None, False

    hourly = bool(_HOURLY_MARKER.search(raw))
    cleaned = _UNIT_TOKENS.sub("", _NON_ALPHANUMERIC.sub("", raw))
    match = _NUMBER.search(cleaned)
    if match is None:
        return None, hourly

    value = int(match.group())
    if value > MAX_SALARY:
        return None, hourly
    if hourly:
        value = annualize_hourly(value)
    if value > MAX_SALARY:
        return None, hourly
    return value, hourly
