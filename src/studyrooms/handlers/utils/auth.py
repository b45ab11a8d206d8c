"""
Bearer token authentication for the study rooms handlers.

Tokens are issued by Supabase Auth; the data access layer asks Supabase who
owns a token and callers may only read their own data.
"""

from typing import Optional

from studyrooms.dal import DalHandler
from studyrooms.handlers.utils.errors import AuthenticationError, AuthorizationError
from studyrooms.handlers.utils.observability import logger, tracer
from studyrooms.models.user import AuthenticatedUser

BEARER_SCHEME = 'bearer'


def extract_bearer_token(authorization_header: Optional[str]) -> str:
    """
    Extract the token from an ``Authorization`` header.

    Accepts ``Bearer <token>`` (scheme matched case-insensitively) or a bare token.

    Raises:
        AuthenticationError: If the header is missing or carries no token
    """
    parts = (authorization_header or '').split()
    if parts and parts[0].lower() == BEARER_SCHEME:
        parts = parts[1:]

    if len(parts) != 1:
        raise AuthenticationError()
    return parts[0]


@tracer.capture_method
def authenticate(access_token: str, dal: DalHandler) -> AuthenticatedUser:
    """
    Resolve the caller behind an access token.

    Raises:
        AuthenticationError: If Supabase does not accept the token
    """
    user = dal.get_user(access_token)
    if user is None:
        logger.warning('Request rejected - unknown or expired access token')
        raise AuthenticationError()

    logger.append_keys(user_id=user.id)
    tracer.put_annotation('user_id', user.id)
    return user


def ensure_same_user(requested_user_id: str, user: AuthenticatedUser, message: str) -> None:
    """
    Reject requests for another user's data.

    Raises:
        AuthorizationError: If ``requested_user_id`` is not the authenticated user
    """
    if requested_user_id != user.id:
        logger.warning('Request rejected - user id mismatch', extra={'requested_user_id': requested_user_id})
        raise AuthorizationError(message)
