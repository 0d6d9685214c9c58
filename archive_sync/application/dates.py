"""Calendar helpers for walking a date range one day at a time."""

import datetime
import logging
from typing import Iterator, Optional, Union

from .domain import DateRange
from .exceptions import InvalidDateError

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"

DateLike = Union[str, datetime.date]


def parse_date(value: DateLike) -> datetime.date:
    """
    Converts a `YYYY-MM-DD` string (or a date) into a date.

    Raises:
        InvalidDateError: If the value is not a valid calendar date.
    """

    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value

    try:
        return datetime.datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidDateError(
            f"Invalid date '{value}'. Please use YYYY-MM-DD format"
        ) from e


def build_date_range(
    start: DateLike,
    end: Optional[DateLike] = None,
    today: Optional[datetime.date] = None,
) -> DateRange:
    """
    Builds the effective range to process.

    An omitted end date means today. An end date after today is clamped to
    today and a warning is logged; the returned range records the
    adjustment in its `clamped` flag.

    Raises:
        InvalidDateError: If either date is malformed or start is after
                          the effective end date.
    """

    today = today or datetime.date.today()
    start_date = parse_date(start)
    end_date = parse_date(end) if end else today

    clamped = False
    if end_date > today:
        logger.warning(
            f"End date {end_date} exceeds current date. Using {today} instead"
        )
        end_date = today
        clamped = True

    if start_date > end_date:
        raise InvalidDateError(
            f"Start date {start_date} is after end date {end_date}"
        )

    return DateRange(start=start_date, end=end_date, clamped=clamped)


def iterate(start: DateLike, end: DateLike) -> Iterator[datetime.date]:
    """Yields every day from start to end, both inclusive."""

    day = parse_date(start)
    last = parse_date(end)
    step = datetime.timedelta(days=1)

    while day <= last:
        yield day
        day += step


def iterate_range(date_range: DateRange) -> Iterator[datetime.date]:
    return iterate(date_range.start, date_range.end)
