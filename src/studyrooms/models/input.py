"""
Input models for request validation using Pydantic.

This module defines the request bodies accepted by the session analytics and
room recommendation functions. Field names follow the camelCase JSON sent by
the mobile client.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field


class TimeRange(str, Enum):
    """Aggregation window for session analytics."""

    DAILY = 'daily'
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'


class SessionAnalyticsRequest(BaseModel):
    """Request model for session analytics."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Annotated[str, Field(
        alias='userId',
        min_length=1,
        description='User whose sessions are analysed',
        examples=['0f8fad5b-d9cb-469f-a165-70867728950e']
    )]

    time_range: Annotated[TimeRange, Field(
        alias='timeRange',
        description='Aggregation window used when no explicit start date is given'
    )]

    start_date: Annotated[Optional[datetime], Field(
        alias='startDate',
        description='Inclusive lower bound on session start time'
    )] = None

    end_date: Annotated[Optional[datetime], Field(
        alias='endDate',
        description='Inclusive upper bound on session end time'
    )] = None


class RoomRecommendationRequest(BaseModel):
    """Request model for room recommendation."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Annotated[str, Field(
        alias='userId',
        min_length=1,
        description='User asking for a recommendation',
        examples=['0f8fad5b-d9cb-469f-a165-70867728950e']
    )]
