from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from app.utils.api_errors import InvalidDateError, InvalidRangeError


@dataclass(frozen=True)
class DateRange:
    start_date: date
    end_date: date

    def overlaps(self, start_date: date, end_date: date) -> bool:
        return start_date <= self.end_date and end_date >= self.start_date


def current_month_range(today: Optional[date] = None) -> DateRange:
    today = today or datetime.now().date()
    first_day = today.replace(day=1)
    last_day = (first_day + timedelta(days=32)).replace(day=1) - timedelta(days=1)
    return DateRange(start_date=first_day, end_date=last_day)


_DATE = TypeAdapter(date)
_DATETIME = TypeAdapter(datetime)


def parse_date(value: str, field_name: str = "date") -> date:
    """Parse ``YYYY-MM-DD``; a full ISO datetime (``Z`` suffix included) is truncated to its date."""
    text = value.strip()
    error = InvalidDateError(f"Invalid {field_name}: '{value}', expected YYYY-MM-DD")
    # bare numbers would otherwise be read as unix timestamps
    if "-" not in text:
        raise error
    try:
        return _DATE.validate_python(text)
    except ValidationError:
        pass
    try:
        return _DATETIME.validate_python(text).date()
    except ValidationError:
        raise error


def resolve_date_range(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    today: Optional[date] = None,
) -> DateRange:
    """
    Resolve the summary window.

    Both bounds given -> use them. Otherwise fall back to the calendar month
    containing ``today`` (server clock when not given). Any supplied bound
    must parse even if the other one is missing.
    """
    start = parse_date(start_date, "startDate") if start_date else None
    end = parse_date(end_date, "endDate") if end_date else None

    if start is None or end is None:
        return current_month_range(today)

    if start > end:
        raise InvalidRangeError("Start date must be before end date")

    return DateRange(start_date=start, end_date=end)
