"""
Study Rooms Service Module.

This package contains the serverless functions behind the study rooms app,
following a three-layer architecture:

- handlers: API handlers and Lambda entry points
- logic: Analytics, recommendation, schema validation and forwarding
- dal: Read access to the Supabase ``sessions`` and ``rooms`` tables
- models: Pydantic request, response and domain models

Every function shares one Powertools logger, tracer and metrics instance.
"""

__version__ = "1.0.0"
__description__ = "Session analytics, room recommendation and request validation functions"

from studyrooms.handlers.utils.observability import logger, metrics, tracer
from studyrooms.models.output import RoomRecommendationOutput, SessionAnalyticsOutput
from studyrooms.models.session import Room, Session

__all__ = [
    "Room",
    "Session",
    "RoomRecommendationOutput",
    "SessionAnalyticsOutput",
    "logger",
    "tracer",
    "metrics",
]
