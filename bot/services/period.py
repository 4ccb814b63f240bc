"""Calendar window computation for stats requests."""

import calendar
from datetime import datetime, time, timedelta, timezone

from models import Period, PeriodType

END_OF_DAY = time(23, 59, 59)


def _start_of_day(day) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _end_of_day(day) -> datetime:
    return datetime.combine(day, END_OF_DAY, tzinfo=timezone.utc)


def compute_period(period_type: PeriodType, reference: datetime) -> Period:
    """Compute the inclusive UTC window for a period containing ``reference``.

    - daily: the reference day
    - weekly: the most recent Monday through the end of the reference day
    - monthly: the whole calendar month
    - yearly: the whole calendar year

    Naive datetimes are treated as UTC.
    """
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)
    today = reference.astimezone(timezone.utc).date()

    if period_type == PeriodType.DAILY:
        start, end = _start_of_day(today), _end_of_day(today)
    elif period_type == PeriodType.WEEKLY:
        monday = today - timedelta(days=today.weekday())
        start, end = _start_of_day(monday), _end_of_day(today)
    elif period_type == PeriodType.MONTHLY:
        last_day = calendar.monthrange(today.year, today.month)[1]
        start = _start_of_day(today.replace(day=1))
        end = _end_of_day(today.replace(day=last_day))
    elif period_type == PeriodType.YEARLY:
        start = _start_of_day(today.replace(month=1, day=1))
        end = _end_of_day(today.replace(month=12, day=31))
    else:
        raise ValueError(f"Unknown period type: {period_type}")

    return Period(type=period_type, start=start, end=end)
