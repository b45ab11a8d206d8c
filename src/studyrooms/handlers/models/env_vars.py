"""
Environment variable models for type-safe configuration.

This module defines the Pydantic model for the environment variables read by
the study rooms handlers: Supabase connection settings, recommendation tuning
and request forwarding for the validation middleware.
"""

from typing import Annotated

from aws_lambda_env_modeler import BaseModel, get_environment_variables
from pydantic import Field


class HandlerEnvVars(BaseModel):
    """Environment variables for Lambda handlers."""

    # Supabase project settings
    SUPABASE_URL: Annotated[str, Field(
        description='Base URL of the Supabase project',
        min_length=1
    )]

    SUPABASE_ANON_KEY: Annotated[str, Field(
        description='Anonymous (publishable) API key of the Supabase project',
        min_length=1
    )]

    # Room recommendation
    RECOMMENDATION_HISTORY_LIMIT: Annotated[int, Field(
        description='Number of most recent sessions used to learn room preferences',
        ge=1,
        le=1000
    )] = 50

    # Validation middleware forwarding
    FORWARD_BASE_URL: Annotated[str | None, Field(
        description='Base URL validated requests are forwarded to; derived from the request when unset'
    )] = None

    FORWARD_TIMEOUT_SECONDS: Annotated[float, Field(
        description='Timeout in seconds for forwarded requests',
        gt=0,
        le=300
    )] = 10.0

    # Service name for observability
    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        description='Service name for AWS Powertools'
    )] = 'study-rooms'

    # Log level for AWS Powertools Logger
    LOG_LEVEL: Annotated[str, Field(
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'


def get_handler_env_vars() -> HandlerEnvVars:
    """
    Get typed environment variables for Lambda handlers.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=HandlerEnvVars)
