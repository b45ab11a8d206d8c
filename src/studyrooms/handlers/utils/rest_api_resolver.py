"""
REST API resolver utility for the study rooms Lambda handlers.

Each function gets its own API Gateway REST resolver with the permissive CORS
policy the mobile client relies on; pre-flight ``OPTIONS`` requests are
answered by the resolver itself.
"""

import json
from typing import Any, Sequence

from aws_lambda_powertools.event_handler import APIGatewayRestResolver, CORSConfig
from aws_lambda_powertools.utilities.data_classes.common import BaseProxyEvent

from studyrooms.handlers.utils.errors import RequestValidationError

# API path constants
SESSION_ANALYTICS_PATH = '/session-analytics'
ROOM_RECOMMENDATION_PATH = '/room-recommendation'
VALIDATION_MIDDLEWARE_PATH = '/validation-middleware'

# Headers sent by the Supabase client libraries
DEFAULT_ALLOW_HEADERS = ['authorization', 'x-client-info', 'apikey', 'content-type']


def build_resolver(extra_allow_headers: Sequence[str] = ()) -> APIGatewayRestResolver:
    """Create a resolver that allows any origin and the Supabase client headers."""
    cors_config = CORSConfig(
        allow_origin='*',
        allow_headers=[*DEFAULT_ALLOW_HEADERS, *extra_allow_headers],
        max_age=600,
    )
    return APIGatewayRestResolver(cors=cors_config)


def parse_json_body(event: BaseProxyEvent) -> Any:
    """
    Decode the JSON body of a proxy event.

    Raises:
        RequestValidationError: If the body is missing or not valid JSON
    """
    try:
        return json.loads(event.decoded_body or '')
    except json.JSONDecodeError as e:
        raise RequestValidationError(message='Invalid JSON in request body') from e
