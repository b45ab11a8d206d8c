"""
Supabase implementation of the Data Access Layer (DAL).

Queries run with the caller's access token so row level security in the
database decides what the user may read.
"""

from datetime import datetime
from typing import Any, Iterable, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from supabase import AuthError, Client, ClientOptions, PostgrestAPIError, create_client

from studyrooms.dal import BaseDalHandler
from studyrooms.handlers.models.env_vars import get_handler_env_vars
from studyrooms.handlers.utils.errors import DataAccessError
from studyrooms.handlers.utils.observability import logger, tracer
from studyrooms.models.session import Room, Session
from studyrooms.models.user import AuthenticatedUser

RowModel = TypeVar('RowModel', bound=BaseModel)


class SupabaseDalHandler(BaseDalHandler):
    """Supabase (PostgREST + Auth) implementation of the data access layer."""

    def __init__(
        self,
        supabase_url: str,
        supabase_key: str,
        access_token: Optional[str] = None,
        client: Optional[Client] = None,
    ) -> None:
        """
        Initialize the Supabase handler.

        Args:
            supabase_url: Base URL of the Supabase project
            supabase_key: Anonymous API key of the project
            access_token: Caller's JWT, forwarded on every query
            client: Preconfigured client, mainly for tests
        """
        super().__init__()
        self.access_token = access_token
        if client is None:
            headers = {'Authorization': f'Bearer {access_token}'} if access_token else {}
            client = create_client(supabase_url, supabase_key, options=ClientOptions(headers=headers))
        self.client = client
        logger.debug('Supabase handler initialized', extra={'supabase_url': supabase_url})

    @classmethod
    def from_environment(cls, access_token: Optional[str] = None) -> 'SupabaseDalHandler':
        """Build a handler from the SUPABASE_URL and SUPABASE_ANON_KEY environment variables."""
        env_vars = get_handler_env_vars()
        return cls(
            supabase_url=env_vars.SUPABASE_URL,
            supabase_key=env_vars.SUPABASE_ANON_KEY,
            access_token=access_token,
        )

    def _parse_rows(self, model: Type[RowModel], rows: Optional[Iterable[Any]], table_name: str) -> list[RowModel]:
        """
        Parse database rows into ``model`` instances.

        Raises:
            DataAccessError: If a row does not match the model
        """
        try:
            return [model.model_validate(row) for row in rows or []]
        except ValidationError as e:
            logger.error('Unexpected row returned by the database', extra={
                'table_name': table_name,
                'errors': e.errors(include_url=False, include_input=False),
            })
            raise DataAccessError(message=f'Unexpected data in table {table_name}', table_name=table_name) from e

    @tracer.capture_method
    def get_user(self, access_token: str) -> AuthenticatedUser | None:
        """
        Resolve the user owning an access token.

        Returns:
            The authenticated user, or None when Supabase Auth rejects the token
        """
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError as e:
            logger.info('Access token rejected by Supabase Auth', extra={'error': str(e)})
            return None

        if response is None or response.user is None:
            return None
        return AuthenticatedUser(id=response.user.id, email=response.user.email)

    @tracer.capture_method
    def get_recent_sessions(self, user_id: str, limit: int = 50) -> list[Session]:
        """
        List a user's most recent sessions, newest first.

        Args:
            user_id: Owner of the sessions
            limit: Maximum number of sessions returned

        Raises:
            DataAccessError: If the query fails
        """
        try:
            response = (
                self.client.table(self.sessions_table)
                .select('room_type, start_time')
                .eq('user_id', user_id)
                .order('start_time', desc=True)
                .limit(limit)
                .execute()
            )
        except PostgrestAPIError as e:
            logger.error('Failed to read recent sessions', extra={'error': str(e), 'user_id': user_id})
            raise DataAccessError(message=e.message or str(e), table_name=self.sessions_table) from e

        sessions = self._parse_rows(Session, response.data, self.sessions_table)
        tracer.put_metadata('recent_sessions_count', len(sessions))
        return sessions

    @tracer.capture_method
    def get_room_occupancy(self) -> dict[str, Optional[int]]:
        """
        Map each room type to its number of active sessions, in row order.

        Raises:
            DataAccessError: If the query fails
        """
        try:
            response = self.client.table(self.rooms_table).select('type, active_sessions').execute()
        except PostgrestAPIError as e:
            logger.error('Failed to read room occupancy', extra={'error': str(e)})
            raise DataAccessError(message=e.message or str(e), table_name=self.rooms_table) from e

        rooms = self._parse_rows(Room, response.data, self.rooms_table)
        return {room.type: room.active_sessions for room in rooms}

    @tracer.capture_method
    def get_sessions_in_range(self, user_id: str, start: datetime, end: datetime) -> list[Session]:
        """
        List a user's sessions inside a date range, oldest first.

        Args:
            user_id: Owner of the sessions
            start: Lower bound on ``start_time`` (inclusive)
            end: Upper bound on ``end_time`` (inclusive)

        Raises:
            DataAccessError: If the query fails
        """
        try:
            response = (
                self.client.table(self.sessions_table)
                .select('*')
                .eq('user_id', user_id)
                .gte('start_time', start.isoformat())
                .lte('end_time', end.isoformat())
                .order('start_time')
                .execute()
            )
        except PostgrestAPIError as e:
            logger.error('Failed to read sessions in range', extra={
                'error': str(e),
                'user_id': user_id,
                'start': start.isoformat(),
                'end': end.isoformat(),
            })
            raise DataAccessError(message=e.message or str(e), table_name=self.sessions_table) from e

        return self._parse_rows(Session, response.data, self.sessions_table)
