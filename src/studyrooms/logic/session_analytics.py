"""
Business logic for session analytics.

Resolves the date range a request refers to and aggregates the sessions found
in it: total and average duration, most active hour and weekday, and the
number of sessions started per calendar date.
"""

import calendar
from datetime import datetime, timedelta
from typing import Iterable, Optional, Tuple

from studyrooms.handlers.utils.observability import logger, tracer
from studyrooms.models.input import TimeRange
from studyrooms.models.output import SessionAnalyticsOutput
from studyrooms.models.session import Session, ensure_utc

HOURS_PER_DAY = 24
DAYS_PER_WEEK = 7


def _one_month_before(moment: datetime) -> datetime:
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def resolve_date_range(
    time_range: TimeRange,
    start_date: Optional[datetime],
    end_date: Optional[datetime],
    now: datetime,
) -> Tuple[datetime, datetime]:
    """
    Work out the (start, end) window for an analytics request.

    Explicit dates win. Without a start date the window opens at midnight UTC
    today (daily), seven days ago (weekly) or one calendar month ago (monthly).
    Without an end date it closes at ``now``.
    """
    now = ensure_utc(now)
    end = ensure_utc(end_date) if end_date else now

    if start_date:
        return ensure_utc(start_date), end

    if time_range == TimeRange.WEEKLY:
        start = now - timedelta(days=7)
    elif time_range == TimeRange.MONTHLY:
        start = _one_month_before(now)
    else:
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)

    return start, end


def _first_peak(counts: list[int]) -> Optional[int]:
    """Index of the first maximum of ``counts``, or None when all counts are zero."""
    peak_index, peak_count = None, 0
    for index, count in enumerate(counts):
        if count > peak_count:
            peak_index, peak_count = index, count
    return peak_index


@tracer.capture_method
def calculate_session_analytics(
    sessions: Iterable[Session],
    time_range: TimeRange,
    now: datetime,
) -> SessionAnalyticsOutput:
    """
    Aggregate sessions into analytics.

    Args:
        sessions: Sessions inside the requested window
        time_range: Requested window; the most active weekday is reported for weekly and monthly only
        now: End time used for sessions that are still running

    Returns:
        Aggregated analytics; all-zero when there are no sessions
    """
    sessions = [session for session in sessions if session.start_time is not None]
    analytics = SessionAnalyticsOutput(number_of_sessions=len(sessions))
    if not sessions:
        return analytics

    hour_counts = [0] * HOURS_PER_DAY
    # Sunday first, matching the client's weekday numbering
    day_counts = [0] * DAYS_PER_WEEK
    sessions_per_day: dict[str, int] = {}
    total_minutes = 0.0

    for session in sessions:
        start_time = session.start_time
        total_minutes += session.duration_minutes(now)
        hour_counts[start_time.hour] += 1
        day_counts[(start_time.weekday() + 1) % DAYS_PER_WEEK] += 1
        date_key = start_time.date().isoformat()
        sessions_per_day[date_key] = sessions_per_day.get(date_key, 0) + 1

    analytics.total_session_time = total_minutes
    analytics.average_session_duration = total_minutes / len(sessions)
    analytics.most_active_hour = _first_peak(hour_counts) or 0
    if time_range != TimeRange.DAILY:
        analytics.most_active_day = _first_peak(day_counts)
    analytics.sessions_per_day = sessions_per_day

    logger.debug('Session analytics calculated', extra={
        'number_of_sessions': analytics.number_of_sessions,
        'total_session_time': total_minutes,
        'time_range': time_range.value,
    })
    return analytics
