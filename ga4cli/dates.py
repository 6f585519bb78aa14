"""
Symbolic date ranges -> concrete (start, end) calendar dates
"""

from datetime import date, datetime, timedelta
from typing import Optional

from attr import dataclass

from .errors import InvalidInputError

DATE_FORMAT = "%Y-%m-%d"

# GA4 rejects anything earlier than its launch day
GA4_EPOCH = date(2015, 8, 14)

RANGE_CHOICES = ["today", "yesterday", "last7", "last30", "last90", "all", "custom"]
DEFAULT_RANGE = "last7"

_DAYS_BACK = {
    "last7": 7,
    "last30": 30,
    "last90": 90,
}


@dataclass(frozen=True)
class DateRange:
    start_date: date
    end_date: date

    def as_api(self) -> dict:
        return {
            "start_date": self.start_date.strftime(DATE_FORMAT),
            "end_date": self.end_date.strftime(DATE_FORMAT),
        }


def parse_date(value: str) -> date:
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidInputError(f"Invalid date '{value}', expected YYYY-MM-DD") from e


def resolve_date_range(
    range_name: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    today: Optional[date] = None
) -> DateRange:
    """
    Resolve a range name and/or explicit dates into a DateRange.

    Explicit dates win over the symbolic range; when only one of them is
    given the other side comes from the symbolic range. `custom` requires
    both explicit dates.

    Raises:
        InvalidInputError: On unknown range names, malformed dates or an
            end date before the start date
    """
    today = today or date.today()
    range_name = (range_name or DEFAULT_RANGE).lower()

    if range_name not in RANGE_CHOICES:
        raise InvalidInputError(
            f"Unknown range '{range_name}', expected one of: {', '.join(RANGE_CHOICES)}"
        )

    if range_name == "custom":
        if not start_date or not end_date:
            raise InvalidInputError("Range 'custom' requires --start-date and --end-date")
        start, end = today, today
    elif range_name == "today":
        start, end = today, today
    elif range_name == "yesterday":
        start = end = today - timedelta(days=1)
    elif range_name == "all":
        start, end = GA4_EPOCH, today
    else:
        start, end = today - timedelta(days=_DAYS_BACK[range_name]), today

    if start_date:
        start = parse_date(start_date)
    if end_date:
        end = parse_date(end_date)

    if end < start:
        raise InvalidInputError(
            f"End date {end.strftime(DATE_FORMAT)} is before start date {start.strftime(DATE_FORMAT)}"
        )

    return DateRange(start_date=start, end_date=end)
