"""
Session Analytics Handler - Lambda function for a user's session statistics.

Authenticates the caller, loads their sessions inside the requested window
and returns totals, averages and activity peaks.
"""

from typing import Any, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from studyrooms.dal import DalHandler
from studyrooms.dal.supabase_handler import SupabaseDalHandler
from studyrooms.handlers.utils.auth import authenticate, ensure_same_user, extract_bearer_token
from studyrooms.handlers.utils.errors import create_api_response, handle_service_errors
from studyrooms.handlers.utils.observability import logger, metrics, tracer
from studyrooms.handlers.utils.rest_api_resolver import SESSION_ANALYTICS_PATH, build_resolver, parse_json_body
from studyrooms.logic.session_analytics import calculate_session_analytics, resolve_date_range
from studyrooms.models.input import SessionAnalyticsRequest
from studyrooms.models.session import utc_now

FORBIDDEN_MESSAGE = 'Forbidden: You can only view your own analytics'

app = build_resolver()


def get_dal_handler(access_token: str) -> DalHandler:
    """Data access layer acting on behalf of the caller."""
    return SupabaseDalHandler.from_environment(access_token=access_token)


@app.post(SESSION_ANALYTICS_PATH)
@tracer.capture_method
@handle_service_errors
def session_analytics() -> Response:
    """
    Compute analytics for the caller's sessions.

    Returns:
        Analytics for the requested date range
    """
    access_token = extract_bearer_token(app.current_event.get_header_value('Authorization'))
    dal = get_dal_handler(access_token)
    user = authenticate(access_token, dal)

    request = SessionAnalyticsRequest.model_validate(parse_json_body(app.current_event))
    ensure_same_user(request.user_id, user, FORBIDDEN_MESSAGE)

    now = utc_now()
    start, end = resolve_date_range(request.time_range, request.start_date, request.end_date, now)
    tracer.put_annotation('time_range', request.time_range.value)
    logger.info('Session analytics request received', extra={
        'time_range': request.time_range.value,
        'start': start.isoformat(),
        'end': end.isoformat(),
    })

    sessions = dal.get_sessions_in_range(request.user_id, start, end)
    analytics = calculate_session_analytics(sessions, request.time_range, now)

    metrics.add_metric(name='AnalyticsGenerated', unit=MetricUnit.Count, value=1)
    logger.info('Session analytics generated', extra={
        'number_of_sessions': analytics.number_of_sessions,
        'total_session_time': analytics.total_session_time,
    })

    return create_api_response(status_code=200, body=analytics.to_response_body())


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST, clear_state=True)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Main Lambda handler function.

    Args:
        event: API Gateway REST proxy event
        context: Lambda context object

    Returns:
        API Gateway response
    """
    metrics.add_metric(name='RequestCount', unit=MetricUnit.Count, value=1)
    return app.resolve(event, context)
