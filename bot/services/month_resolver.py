"""Resolve which monthly archives cover a stats period."""

import logging
from datetime import datetime

from models import MonthBucket, PeriodType

logger = logging.getLogger(__name__)


def resolve_month_buckets(
    period_type: PeriodType,
    period_start: datetime,
    period_end: datetime,
    now: datetime,
) -> list[MonthBucket]:
    """Return the archive months needed for a period, in chronological order.

    The month before the period is always included so the last rating before
    the period is known even when no game was played yet this month. Months
    after ``now`` are dropped since their archives cannot exist.
    """
    start_bucket = MonthBucket.containing(period_start)
    end_bucket = MonthBucket.containing(period_end)

    buckets: set[MonthBucket] = {start_bucket.previous()}

    if period_type == PeriodType.YEARLY:
        bucket = MonthBucket(year=start_bucket.year, month=1)
        while bucket <= end_bucket:
            buckets.add(bucket)
            bucket = bucket.next()
    elif period_type in (PeriodType.DAILY, PeriodType.WEEKLY, PeriodType.MONTHLY):
        buckets.add(start_bucket)
        if period_type == PeriodType.WEEKLY:
            # A week can straddle a month boundary
            buckets.add(end_bucket)
    else:
        raise ValueError(f"Unknown period type: {period_type}")

    current = MonthBucket.containing(now)
    resolved = sorted(b for b in buckets if b <= current)
    logger.info(f"Resolved months for {period_type.value}: {', '.join(str(b) for b in resolved)}")
    return resolved
