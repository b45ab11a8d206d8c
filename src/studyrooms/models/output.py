"""
Output models for API responses using Pydantic.

Responses are serialized with camelCase aliases to match what the mobile
client reads.
"""

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionAnalyticsOutput(BaseModel):
    """Aggregated session statistics for a user and date range."""

    model_config = ConfigDict(populate_by_name=True)

    total_session_time: Annotated[float, Field(
        alias='totalSessionTime',
        description='Total session time in minutes'
    )] = 0.0

    number_of_sessions: Annotated[int, Field(
        alias='numberOfSessions',
        description='Number of sessions in the range'
    )] = 0

    average_session_duration: Annotated[float, Field(
        alias='averageSessionDuration',
        description='Average session duration in minutes'
    )] = 0.0

    most_active_hour: Annotated[int, Field(
        alias='mostActiveHour',
        ge=0,
        le=23,
        description='Hour of day (UTC) with the most session starts'
    )] = 0

    most_active_day: Annotated[Optional[int], Field(
        alias='mostActiveDay',
        ge=0,
        le=6,
        description='Day of week with the most session starts, Sunday is 0 (weekly and monthly ranges only)'
    )] = None

    sessions_per_day: Annotated[Dict[str, int], Field(
        alias='sessionsPerDay',
        default_factory=dict,
        description='Number of sessions started per calendar date (YYYY-MM-DD)'
    )]

    def to_response_body(self) -> Dict[str, Any]:
        """Serialize for the API, leaving out ``mostActiveDay`` when it does not apply."""
        body = self.model_dump(by_alias=True)
        if self.most_active_day is None:
            body.pop('mostActiveDay')
        return body


class RoomRecommendationOutput(BaseModel):
    """Recommended room type and the reasons behind it."""

    model_config = ConfigDict(populate_by_name=True)

    recommended_room_type: Annotated[str, Field(
        alias='recommendedRoomType',
        description='Room type recommended to the user',
        examples=['library']
    )] = ''

    reasons: Annotated[List[str], Field(
        default_factory=list,
        description='Human readable reasons for the recommendation'
    )]

    active_sessions_in_rooms: Annotated[Dict[str, Optional[int]], Field(
        alias='activeSessionsInRooms',
        default_factory=dict,
        description='Current number of active sessions per room type'
    )]

    def to_response_body(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
