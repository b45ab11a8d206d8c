"""
Business Logic Layer Module.

Pure computations over rows returned by the data access layer, plus the
forwarding step of the validation middleware.
"""

from studyrooms.logic.room_recommendation import TimeOfDay, calculate_room_recommendation, time_of_day
from studyrooms.logic.schema_validation import SCHEMAS, ValidationOutcome, validate_data
from studyrooms.logic.session_analytics import calculate_session_analytics, resolve_date_range

__all__ = [
    "TimeOfDay",
    "calculate_room_recommendation",
    "time_of_day",
    "SCHEMAS",
    "ValidationOutcome",
    "validate_data",
    "calculate_session_analytics",
    "resolve_date_range",
]
