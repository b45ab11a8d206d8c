"""
Room Recommendation Handler - Lambda function suggesting a room type.

Combines the caller's recent room habits with the current occupancy of each
room and returns a recommendation together with the reasons for it.
"""

from typing import Any, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from studyrooms.dal import DalHandler
from studyrooms.dal.supabase_handler import SupabaseDalHandler
from studyrooms.handlers.models.env_vars import get_handler_env_vars
from studyrooms.handlers.utils.auth import authenticate, ensure_same_user, extract_bearer_token
from studyrooms.handlers.utils.errors import create_api_response, handle_service_errors
from studyrooms.handlers.utils.observability import logger, metrics, tracer
from studyrooms.handlers.utils.rest_api_resolver import ROOM_RECOMMENDATION_PATH, build_resolver, parse_json_body
from studyrooms.logic.room_recommendation import calculate_room_recommendation, current_time_of_day
from studyrooms.models.input import RoomRecommendationRequest
from studyrooms.models.session import utc_now

FORBIDDEN_MESSAGE = 'Forbidden: You can only get recommendations for yourself'

app = build_resolver()


def get_dal_handler(access_token: str) -> DalHandler:
    """Data access layer acting on behalf of the caller."""
    return SupabaseDalHandler.from_environment(access_token=access_token)


@app.post(ROOM_RECOMMENDATION_PATH)
@tracer.capture_method
@handle_service_errors
def room_recommendation() -> Response:
    """
    Recommend a room type to the caller.

    Returns:
        Recommended room type, reasons and current occupancy per room
    """
    access_token = extract_bearer_token(app.current_event.get_header_value('Authorization'))
    dal = get_dal_handler(access_token)
    user = authenticate(access_token, dal)

    request = RoomRecommendationRequest.model_validate(parse_json_body(app.current_event))
    ensure_same_user(request.user_id, user, FORBIDDEN_MESSAGE)

    history_limit = get_handler_env_vars().RECOMMENDATION_HISTORY_LIMIT
    sessions = dal.get_recent_sessions(request.user_id, limit=history_limit)
    occupancy = dal.get_room_occupancy()

    tod = current_time_of_day(utc_now())
    recommendation = calculate_room_recommendation(sessions, occupancy, tod)

    tracer.put_annotation('recommended_room_type', recommendation.recommended_room_type)
    metrics.add_metric(name='RecommendationGenerated', unit=MetricUnit.Count, value=1)
    logger.info('Room recommendation generated', extra={
        'recommended_room_type': recommendation.recommended_room_type,
        'reasons': recommendation.reasons,
        'time_of_day': tod.value,
        'history_size': len(sessions),
    })

    return create_api_response(status_code=200, body=recommendation.to_response_body())


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
