"""
Logger, tracer and metrics shared by the study rooms functions.

Every handler, the business logic and the Supabase data access layer import
these instances, so log keys such as the caller's ``user_id`` and the API
Gateway correlation id appear on every line of a request.
"""

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics
from aws_lambda_powertools.tracing import Tracer

# Analytics, recommendation and validation counters are published here
METRICS_NAMESPACE = 'StudyRooms'

# Level from LOG_LEVEL; state is cleared between invocations by the handlers
logger: Logger = Logger()

# POWERTOOLS_TRACE_DISABLED=true turns X-Ray off, as the tests do
tracer: Tracer = Tracer()

# POWERTOOLS_SERVICE_NAME becomes the metrics "service" dimension
metrics = Metrics(namespace=METRICS_NAMESPACE)
