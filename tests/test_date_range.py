from datetime import date

import pytest

from app.services.date_range import (
    DateRange,
    current_month_range,
    parse_date,
    resolve_date_range,
)
from app.utils.api_errors import InvalidDateError, InvalidRangeError, ValidationError


def test_explicit_dates_are_used():
    assert resolve_date_range("2025-01-10", "2025-02-20") == DateRange(
        date(2025, 1, 10), date(2025, 2, 20)
    )


def test_missing_dates_default_to_current_month():
    resolved = resolve_date_range(today=date(2025, 3, 17))

    assert resolved == DateRange(date(2025, 3, 1), date(2025, 3, 31))


@pytest.mark.parametrize(
    "today, last_day",
    [
        (date(2024, 2, 10), date(2024, 2, 29)),
        (date(2023, 2, 28), date(2023, 2, 28)),
        (date(2025, 12, 31), date(2025, 12, 31)),
        (date(2025, 4, 1), date(2025, 4, 30)),
    ],
)
def test_current_month_range_ends_on_last_calendar_day(today, last_day):
    resolved = current_month_range(today)

    assert resolved.start_date == today.replace(day=1)
    assert resolved.end_date == last_day


def test_single_bound_falls_back_to_current_month():
    resolved = resolve_date_range("2025-01-01", None, today=date(2025, 6, 5))

    assert resolved == DateRange(date(2025, 6, 1), date(2025, 6, 30))


def test_iso_datetime_is_truncated_to_date():
    assert parse_date("2025-03-05T13:45:00") == date(2025, 3, 5)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2025-03-01T00:00:00.000Z", date(2025, 3, 1)),
        ("2025-03-31T23:59:59.999Z", date(2025, 3, 31)),
        ("2025-03-05T13:45:00+00:00", date(2025, 3, 5)),
    ],
)
def test_browser_timestamps_are_accepted(value, expected):
    assert parse_date(value) == expected


def test_utc_timestamps_resolve_to_a_range():
    resolved = resolve_date_range("2025-03-01T00:00:00.000Z", "2025-03-31T23:59:59.999Z")

    assert resolved == DateRange(date(2025, 3, 1), date(2025, 3, 31))


@pytest.mark.parametrize("bad", ["not-a-date", "2025-13-01", "2025-02-30", "20250301", "86400"])
def test_unparseable_date_is_rejected(bad):
    with pytest.raises(InvalidDateError) as excinfo:
        resolve_date_range(bad, "2025-03-31")

    assert isinstance(excinfo.value, ValidationError)
    assert excinfo.value.status_code == 400


def test_malformed_bound_is_rejected_even_without_the_other():
    with pytest.raises(InvalidDateError):
        resolve_date_range(None, "31/03/2025")


def test_start_after_end_is_rejected():
    with pytest.raises(InvalidRangeError) as excinfo:
        resolve_date_range("2025-04-01", "2025-03-01")

    assert excinfo.value.status_code == 400


def test_overlap():
    march = DateRange(date(2025, 3, 1), date(2025, 3, 31))

    assert march.overlaps(date(2025, 2, 15), date(2025, 3, 1))
    assert march.overlaps(date(2025, 3, 31), date(2025, 4, 30))
    assert march.overlaps(date(2025, 1, 1), date(2025, 12, 31))
    assert not march.overlaps(date(2025, 2, 1), date(2025, 2, 28))
    assert not march.overlaps(date(2025, 4, 1), date(2025, 4, 30))
