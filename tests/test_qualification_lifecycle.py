"""
Tests for qualifications/lifecycle.py — expiration calculator and status classifier.

Covers year arithmetic, the permanent sentinel, the one-year default,
leap days, the 90-day warning window boundaries, and input validation.
"""

from datetime import date, datetime, timedelta

import pytest

from qualtrack.qualifications.errors import InvalidDateError, InvalidPolicyError
from qualtrack.qualifications.lifecycle import (
    DEFAULT_VALIDITY_YEARS,
    WARNING_DAYS,
    add_years,
    classify,
    compute_expiration,
    days_between,
    parse_expiration,
    parse_iso_date,
    parse_validity_period,
)
from qualtrack.qualifications.models import PERMANENT, ExpirationStatus

TODAY = date(2024, 6, 1)


# ---------------------------------------------------------------------------
# Expiration calculator
# ---------------------------------------------------------------------------

class TestComputeExpiration:
    def test_three_year_policy(self):
        assert compute_expiration("2023-04-15", 3) == date(2026, 4, 15)

    def test_accepts_date_objects(self):
        assert compute_expiration(date(2023, 4, 15), 3) == date(2026, 4, 15)

    def test_permanent_policy(self):
        assert compute_expiration("2024-01-15", PERMANENT) == PERMANENT

    def test_permanent_is_case_insensitive(self):
        assert compute_expiration("2024-01-15", "Permanent") == PERMANENT

    def test_no_policy_defaults_to_one_year(self):
        assert DEFAULT_VALIDITY_YEARS == 1
        assert compute_expiration("2024-06-01") == date(2025, 6, 1)
        assert compute_expiration("2024-06-01", None) == date(2025, 6, 1)

    def test_digit_string_policy(self):
        assert compute_expiration("2020-01-15", "2") == date(2022, 1, 15)

    def test_month_and_day_preserved(self):
        for years in (1, 2, 5, 10):
            result = compute_expiration("2019-11-30", years)
            assert (result.month, result.day) == (11, 30)
            assert result.year == 2019 + years

    def test_leap_day_into_non_leap_year_clamps(self):
        assert compute_expiration("2024-02-29", 1) == date(2025, 2, 28)

    def test_leap_day_into_leap_year_kept(self):
        assert compute_expiration("2024-02-29", 4) == date(2028, 2, 29)

    def test_deterministic(self):
        assert compute_expiration("2023-04-15", 3) == compute_expiration("2023-04-15", 3)

    @pytest.mark.parametrize("acquired", ["2023-02-30", "2023-13-01", "15/04/2023", "", "2023-4-15"])
    def test_invalid_acquired_date(self, acquired):
        with pytest.raises(InvalidDateError):
            compute_expiration(acquired, 3)

    def test_invalid_date_checked_before_policy(self):
        with pytest.raises(InvalidDateError):
            compute_expiration("not-a-date", PERMANENT)

    @pytest.mark.parametrize("period", [0, -1, "0", "-3", "abc", "1.5", 1.5, True, "", [3]])
    def test_invalid_policy(self, period):
        with pytest.raises(InvalidPolicyError):
            compute_expiration("2023-04-15", period)

    def test_year_overflow_is_policy_error(self):
        with pytest.raises(InvalidPolicyError):
            compute_expiration("2023-04-15", 9000)


class TestAddYears:
    def test_plain(self):
        assert add_years(date(2021, 3, 15), 3) == date(2024, 3, 15)

    def test_feb_29_clamps(self):
        assert add_years(date(2020, 2, 29), 1) == date(2021, 2, 28)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class TestParsing:
    def test_parse_iso_date(self):
        assert parse_iso_date("2024-06-01") == date(2024, 6, 1)

    def test_parse_iso_date_strips_whitespace(self):
        assert parse_iso_date(" 2024-06-01 ") == date(2024, 6, 1)

    def test_parse_iso_date_datetime(self):
        assert parse_iso_date(datetime(2024, 6, 1, 12, 0)) == date(2024, 6, 1)

    def test_parse_iso_date_rejects_none(self):
        with pytest.raises(InvalidDateError):
            parse_iso_date(None)

    def test_parse_validity_period(self):
        assert parse_validity_period(3) == 3
        assert parse_validity_period("3") == 3
        assert parse_validity_period("PERMANENT") == PERMANENT

    def test_parse_expiration(self):
        assert parse_expiration("permanent") == PERMANENT
        assert parse_expiration("2026-04-15") == date(2026, 4, 15)


# ---------------------------------------------------------------------------
# Status classifier
# ---------------------------------------------------------------------------

class TestClassify:
    def test_permanent_is_normal(self):
        for today in (date(1990, 1, 1), TODAY, date(2999, 12, 31)):
            assert classify(PERMANENT, today) == ExpirationStatus.NORMAL

    def test_within_window_is_warning(self):
        assert days_between(TODAY, date(2024, 8, 1)) == 61
        assert classify(date(2024, 8, 1), TODAY) == ExpirationStatus.WARNING

    def test_past_is_expired(self):
        assert classify(date(2023, 12, 1), TODAY) == ExpirationStatus.EXPIRED

    def test_expiring_today_is_warning(self):
        assert classify(TODAY, TODAY) == ExpirationStatus.WARNING

    def test_yesterday_is_expired(self):
        assert classify(TODAY - timedelta(days=1), TODAY) == ExpirationStatus.EXPIRED

    def test_window_upper_bound_inclusive(self):
        assert WARNING_DAYS == 90
        assert classify(TODAY + timedelta(days=90), TODAY) == ExpirationStatus.WARNING

    def test_just_outside_window_is_normal(self):
        assert classify(TODAY + timedelta(days=91), TODAY) == ExpirationStatus.NORMAL

    def test_accepts_iso_strings(self):
        assert classify("2024-08-01", "2024-06-01") == ExpirationStatus.WARNING

    def test_calculated_then_classified(self):
        expiration = compute_expiration("2021-03-15", 3)
        assert classify(expiration, TODAY) == ExpirationStatus.EXPIRED

    def test_invalid_expiration(self):
        with pytest.raises(InvalidDateError):
            classify("soon", TODAY)

    def test_labels(self):
        assert ExpirationStatus.NORMAL.label == "Normal"
        assert ExpirationStatus.WARNING.label == "Warning"
        assert ExpirationStatus.EXPIRED.label == "Expired"
