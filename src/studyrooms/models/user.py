"""Authenticated caller as resolved from a bearer token."""

from typing import Annotated, Optional

from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """User identity returned by Supabase Auth."""

    id: Annotated[str, Field(
        min_length=1,
        description='Supabase Auth user identifier'
    )]

    email: Annotated[Optional[str], Field(
        description='Email address on the account, when known'
    )] = None
