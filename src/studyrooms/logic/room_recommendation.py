"""
Business logic for room recommendation.

A user's recent sessions are tallied per room type, overall and per time of
day. A strong habit for the current time of day wins, then the overall
favorite, then the least busy room right now.
"""

from datetime import datetime
from enum import Enum
from typing import Iterable, Mapping, Optional

from studyrooms.handlers.utils.observability import logger, tracer
from studyrooms.models.output import RoomRecommendationOutput
from studyrooms.models.session import Session, ensure_utc

# Sessions in the same time of day needed before the habit outranks the overall favorite
TIME_OF_DAY_HABIT_THRESHOLD = 3
# Rooms with fewer active sessions than this are reported as not crowded
CROWDED_THRESHOLD = 3


class TimeOfDay(str, Enum):
    MORNING = 'morning'
    AFTERNOON = 'afternoon'
    EVENING = 'evening'


def time_of_day(hour: int) -> TimeOfDay:
    """Morning is 05:00-11:59, afternoon 12:00-17:59 and evening everything else."""
    if 5 <= hour < 12:
        return TimeOfDay.MORNING
    if 12 <= hour < 18:
        return TimeOfDay.AFTERNOON
    return TimeOfDay.EVENING


def current_time_of_day(now: datetime) -> TimeOfDay:
    return time_of_day(ensure_utc(now).hour)


def _most_used(counts: Mapping[str, int]) -> tuple[Optional[str], int]:
    # first room to reach the highest count wins ties
    best_room, best_count = None, 0
    for room, count in counts.items():
        if count > best_count:
            best_room, best_count = room, count
    return best_room, best_count


def _least_busy(occupancy: Mapping[str, Optional[int]]) -> Optional[str]:
    # untracked rooms rank as empty
    best_room, best_count = None, None
    for room, active in occupancy.items():
        count = active or 0
        if best_count is None or count < best_count:
            best_room, best_count = room, count
    return best_room


@tracer.capture_method
def calculate_room_recommendation(
    sessions: Iterable[Session],
    occupancy: Mapping[str, Optional[int]],
    tod: TimeOfDay,
) -> RoomRecommendationOutput:
    """
    Pick a room type for the user.

    Args:
        sessions: The user's recent sessions
        occupancy: Active sessions per room type (None when not tracked), in the order the rooms were read
        tod: Time of day the recommendation is for

    Returns:
        The recommended room type with one or two reasons and the occupancy it was based on
    """
    room_usage: dict[str, int] = {}
    usage_by_time_of_day: dict[TimeOfDay, dict[str, int]] = {period: {} for period in TimeOfDay}

    for session in sessions:
        if not session.room_type:
            continue
        room_usage[session.room_type] = room_usage.get(session.room_type, 0) + 1
        if session.start_time is not None:
            bucket = usage_by_time_of_day[time_of_day(session.start_time.hour)]
            bucket[session.room_type] = bucket.get(session.room_type, 0) + 1

    most_used_room, _ = _most_used(room_usage)
    habit_room, habit_count = _most_used(usage_by_time_of_day[tod])

    reasons: list[str] = []
    if habit_room and habit_count >= TIME_OF_DAY_HABIT_THRESHOLD:
        recommended_room = habit_room
        reasons.append(f'You frequently use this room during the {tod.value}')
    elif most_used_room:
        recommended_room = most_used_room
        reasons.append('This is your most frequently used room')
    else:
        recommended_room = _least_busy(occupancy) or ''
        reasons.append('This room is currently the least busy')

    active_sessions = occupancy.get(recommended_room)
    if active_sessions == 0:
        reasons.append('This room is currently empty')
    elif active_sessions is not None and active_sessions < CROWDED_THRESHOLD:
        reasons.append('This room is not very crowded right now')

    logger.debug('Room recommendation calculated', extra={
        'recommended_room_type': recommended_room,
        'time_of_day': tod.value,
        'history_size': sum(room_usage.values()),
    })
    return RoomRecommendationOutput(
        recommended_room_type=recommended_room,
        reasons=reasons,
        active_sessions_in_rooms=dict(occupancy),
    )
