"""
Session and room domain models.

Rows of the ``sessions`` and ``rooms`` tables are parsed into these models at
the data access boundary so the business logic works with typed, timezone
aware values.
"""

from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are assumed to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Session(BaseModel):
    """A timed record of a user occupying a room."""

    model_config = ConfigDict(extra='ignore')

    id: Annotated[Optional[str], Field(
        description='Session identifier'
    )] = None

    user_id: Annotated[Optional[str], Field(
        description='Identifier of the user who owns the session'
    )] = None

    room_type: Annotated[Optional[str], Field(
        description='Type of the room the session took place in',
        examples=['library', 'cafe', 'office']
    )] = None

    start_time: Annotated[Optional[datetime], Field(
        description='Timestamp when the session started'
    )] = None

    end_time: Annotated[Optional[datetime], Field(
        description='Timestamp when the session ended, empty while still running'
    )] = None

    @field_validator('start_time', 'end_time')
    @classmethod
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is None:
            return v
        return ensure_utc(v)

    def duration_minutes(self, now: datetime) -> float:
        """Length of the session in minutes; running sessions are measured up to ``now``."""
        if self.start_time is None:
            return 0.0
        end_time = self.end_time or ensure_utc(now)
        return (end_time - self.start_time).total_seconds() / 60


class Room(BaseModel):
    """Current occupancy of a room type."""

    model_config = ConfigDict(extra='ignore')

    type: Annotated[str, Field(
        description='Room type',
        examples=['library']
    )]

    active_sessions: Annotated[Optional[int], Field(
        ge=0,
        description='Number of sessions currently running in the room, empty when not tracked'
    )] = None
