"""
Qualification lifecycle rules.

Pure functions: derive an expiration date from an acquisition date and a
validity period, and classify how urgent an expiration is relative to a
caller-supplied reference date. Nothing here reads the clock, touches the
database, or logs.

Leap days: an acquisition on February 29 advanced into a non-leap year
expires on February 28 of that year.

Usage:
    from qualtrack.qualifications.lifecycle import compute_expiration, classify
    expiration = compute_expiration("2023-04-15", 3)     # date(2026, 4, 15)
    status = classify(expiration, today=date(2026, 2, 1))  # WARNING
"""

import re
from datetime import MAXYEAR, date, datetime
from typing import Any, Optional

from qualtrack.qualifications.errors import InvalidDateError, InvalidPolicyError
from qualtrack.qualifications.models import (
    PERMANENT,
    Expiration,
    ExpirationStatus,
    ValidityPeriod,
)

# Records without a qualification master expire after one year
DEFAULT_VALIDITY_YEARS = 1

# Days-to-expiry at or below which a qualification is flagged (inclusive)
WARNING_DAYS = 90

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_iso_date(value: Any) -> date:
    """
    Coerce a YYYY-MM-DD string (or a date) into a date.

    Raises:
        InvalidDateError: wrong shape or not a real calendar day (2023-02-30)
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateError(f"Invalid date: {value!r}")

    match = _ISO_DATE.match(value.strip())
    if not match:
        raise InvalidDateError(f"Invalid date (expected YYYY-MM-DD): {value!r}")

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise InvalidDateError(f"Invalid date: {value!r} ({exc})") from exc


def is_permanent(value: Any) -> bool:
    return isinstance(value, str) and value.strip().lower() == PERMANENT


def parse_validity_period(value: Any) -> ValidityPeriod:
    """
    Normalize a validity period to a positive int or PERMANENT.

    Accepts ints, digit strings as stored in the database ("3"), and the
    permanent sentinel in any case.

    Raises:
        InvalidPolicyError: zero, negative, fractional, boolean, or garbage
    """
    if is_permanent(value):
        return PERMANENT
    if isinstance(value, bool):
        raise InvalidPolicyError(f"Invalid validity period: {value!r}")
    if isinstance(value, int):
        years = value
    elif isinstance(value, str) and re.fullmatch(r"[0-9]+", value.strip()):
        years = int(value.strip())
    else:
        raise InvalidPolicyError(f"Invalid validity period: {value!r}")

    if years <= 0:
        raise InvalidPolicyError(f"Validity period must be positive: {value!r}")
    return years


def parse_expiration(value: Any) -> Expiration:
    """Stored expiration (ISO string or sentinel) back to a date or PERMANENT."""
    if is_permanent(value):
        return PERMANENT
    return parse_iso_date(value)


# ---------------------------------------------------------------------------
# Expiration calculator
# ---------------------------------------------------------------------------

def add_years(start: date, years: int) -> date:
    """Advance by whole years keeping month and day; Feb 29 clamps to Feb 28."""
    target_year = start.year + years
    if target_year > MAXYEAR:
        raise InvalidPolicyError(
            f"Validity period of {years} years runs past year {MAXYEAR}"
        )
    try:
        return start.replace(year=target_year)
    except ValueError:
        # Only February 29 into a non-leap year lands here
        return date(target_year, 2, 28)


def compute_expiration(
    acquired_date: Any, validity_period: Optional[Any] = None
) -> Expiration:
    """
    Derive the expiration of a qualification.

    Args:
        acquired_date: date or YYYY-MM-DD string
        validity_period: positive years, PERMANENT, or None for the
            one-year default applied when no master is referenced

    Returns:
        The expiration date, or PERMANENT

    Raises:
        InvalidDateError: acquired_date is not a real calendar date
        InvalidPolicyError: validity_period is not usable
    """
    acquired = parse_iso_date(acquired_date)

    if validity_period is None:
        period: ValidityPeriod = DEFAULT_VALIDITY_YEARS
    else:
        period = parse_validity_period(validity_period)

    if period == PERMANENT:
        return PERMANENT
    return add_years(acquired, period)


# ---------------------------------------------------------------------------
# Status classifier
# ---------------------------------------------------------------------------

def days_between(today: date, expiration: date) -> int:
    """Whole calendar days from today until expiration (negative once past)."""
    return (expiration - today).days


def classify(expiration: Any, today: date) -> ExpirationStatus:
    """
    Urgency of an expiration relative to today.

    Returns:
        NORMAL   — permanent, or more than 90 days away
        WARNING  — 0 to 90 days away (both ends inclusive)
        EXPIRED  — expiration is before today
    """
    if is_permanent(expiration):
        return ExpirationStatus.NORMAL

    diff_days = days_between(parse_iso_date(today), parse_iso_date(expiration))
    if diff_days < 0:
        return ExpirationStatus.EXPIRED
    if diff_days <= WARNING_DAYS:
        return ExpirationStatus.WARNING
    return ExpirationStatus.NORMAL
