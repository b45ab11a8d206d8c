"""
Data Access Layer (DAL) for the study rooms service.

This module provides the data access layer interfaces used by the handlers.
The ``sessions`` and ``rooms`` tables are owned by the database; this layer
only reads them.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from studyrooms.models.session import Session
from studyrooms.models.user import AuthenticatedUser

SESSIONS_TABLE = 'sessions'
ROOMS_TABLE = 'rooms'


@runtime_checkable
class DalHandler(Protocol):
    """Protocol defining the data access layer interface."""

    def get_user(self, access_token: str) -> AuthenticatedUser | None:
        """Resolve the user owning an access token."""
        ...

    def get_recent_sessions(self, user_id: str, limit: int = 50) -> list[Session]:
        """List a user's most recent sessions, newest first."""
        ...

    def get_room_occupancy(self) -> dict[str, Optional[int]]:
        """Map each room type to its number of active sessions."""
        ...

    def get_sessions_in_range(self, user_id: str, start: datetime, end: datetime) -> list[Session]:
        """List a user's sessions inside a date range, oldest first."""
        ...


class BaseDalHandler(ABC):
    """Abstract base class for data access layer implementations."""

    def __init__(self, sessions_table: str = SESSIONS_TABLE, rooms_table: str = ROOMS_TABLE) -> None:
        """
        Initialize the DAL handler.

        Args:
            sessions_table: Name of the sessions table
            rooms_table: Name of the rooms table
        """
        self.sessions_table = sessions_table
        self.rooms_table = rooms_table

    @abstractmethod
    def get_user(self, access_token: str) -> AuthenticatedUser | None:
        """Resolve the user owning an access token, ``None`` when the token is not accepted."""
        pass

    @abstractmethod
    def get_recent_sessions(self, user_id: str, limit: int = 50) -> list[Session]:
        """List a user's most recent sessions, newest first."""
        pass

    @abstractmethod
    def get_room_occupancy(self) -> dict[str, Optional[int]]:
        """Map each room type to its number of active sessions, in row order."""
        pass

    @abstractmethod
    def get_sessions_in_range(self, user_id: str, start: datetime, end: datetime) -> list[Session]:
        """List sessions with ``start_time >= start`` and ``end_time <= end``, oldest first."""
        pass
