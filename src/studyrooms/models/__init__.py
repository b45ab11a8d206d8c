"""
Service Models Package

This package contains all Pydantic models used throughout the service,
including input validation models, output response models, and domain models.
"""

from .input import RoomRecommendationRequest, SessionAnalyticsRequest, TimeRange
from .output import RoomRecommendationOutput, SessionAnalyticsOutput
from .session import Room, Session
from .user import AuthenticatedUser

__all__ = [
    # Input models
    "SessionAnalyticsRequest",
    "RoomRecommendationRequest",
    "TimeRange",

    # Output models
    "SessionAnalyticsOutput",
    "RoomRecommendationOutput",

    # Domain models
    "Session",
    "Room",
    "AuthenticatedUser",
]
