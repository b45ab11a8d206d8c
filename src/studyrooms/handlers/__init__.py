"""
AWS Lambda Handlers Module.

Each handler module exposes a ``lambda_handler`` entry point behind API Gateway:

- session_analytics_handler: ``POST /session-analytics``
- room_recommendation_handler: ``POST /room-recommendation``
- validation_middleware_handler: ``POST /validation-middleware``

Handlers authenticate and parse the request, delegate to the logic layer and
turn service errors into ``{"error": ...}`` JSON responses.
"""

__version__ = "1.0.0"

from studyrooms.handlers.utils.observability import logger, metrics, tracer
from studyrooms.handlers.utils.rest_api_resolver import (
    ROOM_RECOMMENDATION_PATH,
    SESSION_ANALYTICS_PATH,
    VALIDATION_MIDDLEWARE_PATH,
)

__all__ = [
    "logger",
    "tracer",
    "metrics",
    "SESSION_ANALYTICS_PATH",
    "ROOM_RECOMMENDATION_PATH",
    "VALIDATION_MIDDLEWARE_PATH",
]
