"""
Validation Middleware Handler - Lambda function guarding the other functions.

The ``X-Schema`` header names the request schema. Payloads that satisfy it are
forwarded to the matching function and its answer is returned unchanged;
anything else is rejected with the list of violations.
"""

from typing import Any, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from studyrooms.handlers.models.env_vars import get_handler_env_vars
from studyrooms.handlers.utils.errors import RequestValidationError, create_api_response, handle_service_errors
from studyrooms.handlers.utils.observability import logger, metrics, tracer
from studyrooms.handlers.utils.rest_api_resolver import VALIDATION_MIDDLEWARE_PATH, build_resolver, parse_json_body
from studyrooms.logic.forwarding import build_target_url, derive_base_url, forward_request
from studyrooms.logic.schema_validation import get_schema, validate_data

SCHEMA_HEADER = 'X-Schema'

app = build_resolver(extra_allow_headers=['x-schema'])


@app.post(VALIDATION_MIDDLEWARE_PATH)
@tracer.capture_method
@handle_service_errors
def validation_middleware() -> Response:
    """
    Validate the request body and forward it to the function named by the schema.

    Returns:
        The forward target's response, or a 400 describing why the request was rejected
    """
    event = app.current_event
    schema_name = event.get_header_value(SCHEMA_HEADER)
    schema = get_schema(schema_name)
    if schema is None:
        raise RequestValidationError(message=f'Invalid or missing schema name in {SCHEMA_HEADER} header')

    tracer.put_annotation('schema', schema_name)
    data = parse_json_body(event)

    outcome = validate_data(data, schema)
    if not outcome.valid:
        metrics.add_metric(name='ValidationFailed', unit=MetricUnit.Count, value=1)
        logger.info('Request rejected by schema validation', extra={
            'schema': schema_name,
            'errors': outcome.errors,
        })
        raise RequestValidationError(message='Validation failed', details=outcome.errors)

    metrics.add_metric(name='ValidationPassed', unit=MetricUnit.Count, value=1)

    env_vars = get_handler_env_vars()
    headers = dict(event.headers or {})
    # requestContext.path keeps the stage prefix the caller used
    request_path = event.request_context.path or event.path
    base_url = env_vars.FORWARD_BASE_URL or derive_base_url(headers, request_path)
    target_response = forward_request(
        method=event.http_method,
        url=build_target_url(base_url, schema_name),
        headers=headers,
        payload=data,
        timeout=env_vars.FORWARD_TIMEOUT_SECONDS,
    )
    metrics.add_metric(name='RequestForwarded', unit=MetricUnit.Count, value=1)

    return create_api_response(
        status_code=target_response.status_code,
        body=target_response.text,
        content_type=target_response.headers.get('content-type'),
    )


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
