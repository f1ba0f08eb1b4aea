"""Report schedule arithmetic.

A report's first run is its ``scheduled_date``. After each run the next run
advances by its frequency; one-off reports have no next run. Naive datetimes
are read as UTC.
"""

import calendar
from datetime import datetime, timedelta, timezone

from ai_adoption_assessment.errors import ValidationError

FREQUENCIES: tuple[str, ...] = ("once", "daily", "weekly", "monthly")

_FIXED_INTERVALS: dict[str, timedelta] = {
    "daily": timedelta(days=1),
    "weekly": timedelta(days=7),
}


def as_utc(moment: datetime) -> datetime:
    """Attach UTC to a naive datetime; aware values are returned unchanged."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def add_months(moment: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping the day to the target month's end.

    Args:
        moment: Starting datetime.
        months: Number of months; negative moves backwards.

    Returns:
        The shifted datetime with time-of-day and tzinfo preserved.
    """
    month_index = moment.year * 12 + (moment.month - 1) + months
    year, month_zero = divmod(month_index, 12)
    month = month_zero + 1
    last_day = calendar.monthrange(year, month)[1]
    return moment.replace(year=year, month=month, day=min(moment.day, last_day))


def compute_next_run(frequency: str, last_run: datetime) -> datetime | None:
    """Return the run after ``last_run``, or None when the report does not repeat.

    Raises:
        ValidationError: If frequency is not one of FREQUENCIES.
    """
    if frequency == "once":
        return None
    if frequency in _FIXED_INTERVALS:
        return as_utc(last_run) + _FIXED_INTERVALS[frequency]
    if frequency == "monthly":
        return add_months(as_utc(last_run), 1)
    raise ValidationError(f"Invalid report frequency '{frequency}'.")


def is_due(next_run: datetime | None, status: str, now: datetime) -> bool:
    """A report is due when it is scheduled and its next run has arrived."""
    return status == "scheduled" and next_run is not None and as_utc(next_run) <= as_utc(now)
