"""
Integration tests for the session analytics Lambda handler.

Events go through the full resolver; the data access layer is replaced by an
in-memory fake and the clock is pinned.
"""

import json
from unittest.mock import patch

import pytest

from conftest import OTHER_USER_ID, USER_ID, VALID_TOKEN, FakeDalHandler, make_session, response_header, utc
from studyrooms.handlers.session_analytics_handler import FORBIDDEN_MESSAGE, lambda_handler
from studyrooms.handlers.utils.errors import DataAccessError
from studyrooms.handlers.utils.rest_api_resolver import SESSION_ANALYTICS_PATH

MODULE = "studyrooms.handlers.session_analytics_handler"
NOW = utc(2024, 3, 15, 12)


@pytest.fixture
def invoke(make_api_event, lambda_context, fake_dal):
    """Call the handler with the fake data access layer and a fixed clock."""

    def _invoke(dal=None, **event_kwargs):
        event = make_api_event(SESSION_ANALYTICS_PATH, **event_kwargs)
        with patch(f"{MODULE}.get_dal_handler", return_value=dal or fake_dal) as mock_get_dal, \
                patch(f"{MODULE}.utc_now", return_value=NOW):
            response = lambda_handler(event, lambda_context)
        _invoke.get_dal_handler = mock_get_dal
        return response

    return _invoke


class TestSessionAnalyticsHandler:
    """Test cases for the session analytics endpoint."""

    def test_weekly_analytics(self, invoke):
        dal = FakeDalHandler(sessions=[
            make_session("library", utc(2024, 3, 11, 9), utc(2024, 3, 11, 10, 30)),
            make_session("cafe", utc(2024, 3, 11, 9, 15), utc(2024, 3, 11, 9, 45)),
            make_session("library", utc(2024, 3, 13, 14), utc(2024, 3, 13, 15)),
        ])

        response = invoke(dal=dal, body={"userId": USER_ID, "timeRange": "weekly"})

        assert response["statusCode"] == 200
        assert json.loads(response["body"]) == {
            "totalSessionTime": 180.0,
            "numberOfSessions": 3,
            "averageSessionDuration": 60.0,
            "mostActiveHour": 9,
            "mostActiveDay": 1,
            "sessionsPerDay": {"2024-03-11": 2, "2024-03-13": 1},
        }
        assert ("get_sessions_in_range", USER_ID, utc(2024, 3, 8, 12), NOW) in dal.calls
        invoke.get_dal_handler.assert_called_once_with(VALID_TOKEN)

    def test_daily_analytics_without_sessions(self, invoke, fake_dal):
        response = invoke(body={"userId": USER_ID, "timeRange": "daily"})

        assert response["statusCode"] == 200
        assert json.loads(response["body"]) == {
            "totalSessionTime": 0.0,
            "numberOfSessions": 0,
            "averageSessionDuration": 0.0,
            "mostActiveHour": 0,
            "sessionsPerDay": {},
        }
        assert ("get_sessions_in_range", USER_ID, utc(2024, 3, 15), NOW) in fake_dal.calls

    def test_explicit_dates(self, invoke, fake_dal):
        response = invoke(body={
            "userId": USER_ID,
            "timeRange": "monthly",
            "startDate": "2024-01-01T00:00:00Z",
            "endDate": "2024-01-31T23:59:59Z",
        })

        assert response["statusCode"] == 200
        assert ("get_sessions_in_range", USER_ID, utc(2024, 1, 1), utc(2024, 1, 31, 23, 59, 59)) in fake_dal.calls

    def test_missing_token(self, invoke):
        response = invoke(body={"userId": USER_ID}, token=None)

        assert response["statusCode"] == 401
        assert json.loads(response["body"]) == {"error": "Unauthorized"}
        invoke.get_dal_handler.assert_not_called()

    def test_unknown_token(self, invoke, fake_dal):
        response = invoke(body={"userId": USER_ID}, token="expired-token")

        assert response["statusCode"] == 401
        assert fake_dal.calls == [("get_user", "expired-token")]

    def test_other_user(self, invoke, fake_dal):
        response = invoke(body={"userId": OTHER_USER_ID, "timeRange": "daily"})

        assert response["statusCode"] == 403
        assert json.loads(response["body"]) == {"error": FORBIDDEN_MESSAGE}
        assert [call[0] for call in fake_dal.calls] == ["get_user"]

    def test_invalid_json(self, invoke):
        response = invoke(raw_body="{not json")

        assert response["statusCode"] == 400
        assert json.loads(response["body"]) == {"error": "Invalid JSON in request body"}

    def test_invalid_time_range(self, invoke):
        response = invoke(body={"userId": USER_ID, "timeRange": "yearly"})
        body = json.loads(response["body"])

        assert response["statusCode"] == 400
        assert body["error"] == "Invalid request body"
        assert body["details"][0]["field"] == "timeRange"

    def test_missing_time_range(self, invoke, fake_dal):
        response = invoke(body={"userId": USER_ID, "startDate": "2024-03-01T00:00:00Z"})
        body = json.loads(response["body"])

        assert response["statusCode"] == 400
        assert body["details"] == [{"field": "timeRange", "message": "Field required"}]
        assert not any(call[0] == "get_sessions_in_range" for call in fake_dal.calls)

    def test_data_access_error(self, invoke):
        dal = FakeDalHandler(error=DataAccessError("permission denied for table sessions", table_name="sessions"))

        response = invoke(dal=dal, body={"userId": USER_ID, "timeRange": "daily"})

        assert response["statusCode"] == 500
        assert json.loads(response["body"]) == {"error": "permission denied for table sessions"}

    def test_unexpected_error(self, invoke):
        dal = FakeDalHandler(error=RuntimeError("connection reset"))

        response = invoke(dal=dal, body={"userId": USER_ID, "timeRange": "daily"})

        assert response["statusCode"] == 500
        assert json.loads(response["body"]) == {"error": "connection reset"}

    def test_preflight(self, invoke):
        response = invoke(method="OPTIONS", token=None, headers={"Origin": "http://localhost:8081"})

        assert response["statusCode"] == 204
        assert response_header(response, "Access-Control-Allow-Origin") in ("*", "http://localhost:8081")
        assert "authorization" in response_header(response, "Access-Control-Allow-Headers").lower()

    def test_cors_headers_on_response(self, invoke):
        response = invoke(body={"userId": USER_ID, "timeRange": "daily"}, headers={"Origin": "http://localhost:8081"})

        assert response["statusCode"] == 200
        assert response_header(response, "Access-Control-Allow-Origin") in ("*", "http://localhost:8081")
        assert response_header(response, "Content-Type") == "application/json"
