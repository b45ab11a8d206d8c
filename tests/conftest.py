"""
Pytest configuration and shared fixtures for the study rooms service.

This module provides common test fixtures and configuration used across
unit and integration tests.
"""

import json
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import pytest

# Handlers read these at import time; set them before any test module imports the package
os.environ.update({
    "AWS_DEFAULT_REGION": "us-east-1",
    "SUPABASE_URL": "https://test-project.supabase.co",
    "SUPABASE_ANON_KEY": "test-anon-key",
    "POWERTOOLS_SERVICE_NAME": "test-study-rooms",
    "POWERTOOLS_METRICS_NAMESPACE": "TestStudyRooms",
    "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
    "LOG_LEVEL": "DEBUG",
})

from studyrooms.dal import BaseDalHandler  # noqa: E402
from studyrooms.models.session import Session  # noqa: E402
from studyrooms.models.user import AuthenticatedUser  # noqa: E402

USER_ID = "0f8fad5b-d9cb-469f-a165-70867728950e"
OTHER_USER_ID = "7c9e6679-7425-40de-944b-e07fc1f90ae7"
VALID_TOKEN = "valid-access-token"


class FakeDalHandler(BaseDalHandler):
    """In-memory data access layer recording the queries it receives."""

    def __init__(
        self,
        users: Optional[Dict[str, AuthenticatedUser]] = None,
        sessions: Optional[List[Session]] = None,
        occupancy: Optional[Dict[str, Optional[int]]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        super().__init__()
        self.users = users if users is not None else {VALID_TOKEN: AuthenticatedUser(id=USER_ID, email="student@example.com")}
        self.sessions = sessions or []
        self.occupancy = occupancy or {}
        self.error = error
        self.calls: List[tuple] = []

    def _maybe_fail(self) -> None:
        if self.error is not None:
            raise self.error

    def get_user(self, access_token: str) -> AuthenticatedUser | None:
        self.calls.append(("get_user", access_token))
        return self.users.get(access_token)

    def get_recent_sessions(self, user_id: str, limit: int = 50) -> list[Session]:
        self.calls.append(("get_recent_sessions", user_id, limit))
        self._maybe_fail()
        return self.sessions[:limit]

    def get_room_occupancy(self) -> dict[str, Optional[int]]:
        self.calls.append(("get_room_occupancy",))
        self._maybe_fail()
        return dict(self.occupancy)

    def get_sessions_in_range(self, user_id: str, start: datetime, end: datetime) -> list[Session]:
        self.calls.append(("get_sessions_in_range", user_id, start, end))
        self._maybe_fail()
        return list(self.sessions)


@dataclass
class FakeLambdaContext:
    function_name: str = "study-rooms-test"
    memory_limit_in_mb: int = 128
    invoked_function_arn: str = "arn:aws:lambda:us-east-1:123456789012:function:study-rooms-test"
    aws_request_id: str = "test-lambda-request-id"

    def get_remaining_time_in_millis(self) -> int:
        return 30000


def utc(*args: int) -> datetime:
    """Shorthand for an aware UTC datetime."""
    return datetime(*args, tzinfo=timezone.utc)


def make_session(room_type: Optional[str], start: Optional[datetime], end: Optional[datetime] = None) -> Session:
    return Session(user_id=USER_ID, room_type=room_type, start_time=start, end_time=end)


def response_header(response: Dict[str, Any], name: str) -> Optional[str]:
    """Read a header from a proxy response, whichever header field the resolver filled."""
    for key, value in (response.get("headers") or {}).items():
        if key.lower() == name.lower():
            return value
    for key, values in (response.get("multiValueHeaders") or {}).items():
        if key.lower() == name.lower():
            return ",".join(values)
    return None


@pytest.fixture
def lambda_context() -> FakeLambdaContext:
    """Fixture providing a Lambda context."""
    return FakeLambdaContext()


@pytest.fixture
def fake_dal() -> FakeDalHandler:
    return FakeDalHandler()


@pytest.fixture
def make_api_event() -> Callable[..., Dict[str, Any]]:
    """Factory building API Gateway REST proxy events."""

    def _make(
        path: str,
        body: Any = None,
        method: str = "POST",
        headers: Optional[Dict[str, str]] = None,
        token: Optional[str] = VALID_TOKEN,
        raw_body: Optional[str] = None,
    ) -> Dict[str, Any]:
        request_headers = {
            "Content-Type": "application/json",
            "Host": "abc123.execute-api.us-east-1.amazonaws.com",
            "X-Forwarded-Proto": "https",
        }
        if token is not None:
            request_headers["Authorization"] = f"Bearer {token}"
        request_headers.update(headers or {})

        if raw_body is not None:
            event_body = raw_body
        elif body is not None:
            event_body = json.dumps(body)
        else:
            event_body = None

        return {
            "resource": path,
            "path": path,
            "httpMethod": method,
            "headers": request_headers,
            "multiValueHeaders": {key: [value] for key, value in request_headers.items()},
            "queryStringParameters": None,
            "multiValueQueryStringParameters": None,
            "pathParameters": None,
            "stageVariables": None,
            "requestContext": {
                "requestId": "test-request-id-123",
                "accountId": "123456789012",
                "stage": "test",
                "resourcePath": path,
                "httpMethod": method,
                "path": f"/test{path}",
                "protocol": "HTTP/1.1",
                "requestTimeEpoch": 1710504000000,
                "identity": {
                    "sourceIp": "127.0.0.1",
                    "userAgent": "test-agent/1.0",
                },
            },
            "body": event_body,
            "isBase64Encoded": False,
        }

    return _make
