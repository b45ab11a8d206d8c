"""
Error handling utilities for the study rooms Lambda handlers.

This module defines the service exception hierarchy, the JSON error body
returned to clients (``{"error": ...}``) and the decorator that turns
exceptions raised by route functions into API Gateway responses.
"""

import functools
import json
import uuid
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from aws_lambda_powertools.event_handler import Response, content_types
from aws_lambda_powertools.metrics import MetricUnit
from pydantic import ValidationError

from studyrooms.handlers.utils.observability import logger, metrics, tracer


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    SECURITY = "SECURITY"
    DATA_ACCESS = "DATA_ACCESS"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"
    INFRASTRUCTURE = "INFRASTRUCTURE"


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 500,
        category: ErrorCategory = ErrorCategory.INFRASTRUCTURE,
        details: Optional[Any] = None,
        extra_body: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.category = category
        self.details = details
        self.extra_body = extra_body or {}
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "message": self.message,
            "status_code": self.status_code,
            "category": self.category.value,
            "details": self.details,
        }


class RequestValidationError(BaseServiceError):
    """Raised when the request body or headers are malformed."""

    def __init__(self, message: str, details: Optional[List[Any]] = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            category=ErrorCategory.VALIDATION,
            details=details,
        )


class AuthenticationError(BaseServiceError):
    """Raised when the caller cannot be authenticated."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message=message,
            error_code="UNAUTHORIZED",
            status_code=401,
            category=ErrorCategory.SECURITY,
        )


class AuthorizationError(BaseServiceError):
    """Raised when an authenticated caller asks for another user's data."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(
            message=message,
            error_code="FORBIDDEN",
            status_code=403,
            category=ErrorCategory.SECURITY,
        )


class DataAccessError(BaseServiceError):
    """Raised when the database rejects or fails a query."""

    def __init__(self, message: str, table_name: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="DATA_ACCESS_ERROR",
            status_code=500,
            category=ErrorCategory.DATA_ACCESS,
        )
        self.table_name = table_name


class ForwardingError(BaseServiceError):
    """Raised when a validated request cannot be delivered to its target."""

    def __init__(self, message: str, target_url: Optional[str] = None):
        super().__init__(
            message="Validation error",
            error_code="FORWARDING_ERROR",
            status_code=500,
            category=ErrorCategory.EXTERNAL_SERVICE,
            extra_body={"message": message},
        )
        self.target_url = target_url


@tracer.capture_method
def log_error_metrics(error: BaseServiceError) -> None:
    """Log error metrics for monitoring and alerting."""
    metrics.add_metric(name="ErrorCount", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name=f"Error{error.category.value}Count", unit=MetricUnit.Count, value=1)

    tracer.put_annotation("error_code", error.error_code)
    tracer.put_metadata("error_details", error.to_dict())

    log = logger.error if error.status_code >= 500 else logger.warning
    log(
        "Service error occurred",
        extra={
            "error_id": error.error_id,
            "error_code": error.error_code,
            "error_category": error.category.value,
            "error_message": error.message,
            "status_code": error.status_code,
        }
    )


def format_error_response(error: BaseServiceError) -> Dict[str, Any]:
    """Format error for API response."""
    response: Dict[str, Any] = {"error": error.message}
    if error.details:
        response["details"] = error.details
    response.update(error.extra_body)
    return response


def create_api_response(
    status_code: int,
    body: Any,
    headers: Optional[Dict[str, str]] = None,
    content_type: Optional[str] = content_types.APPLICATION_JSON,
) -> Response:
    """Create a standardized API Gateway response; non-string bodies are JSON encoded."""
    return Response(
        status_code=status_code,
        content_type=content_type,
        body=body if isinstance(body, str) else json.dumps(body),
        headers=headers,
    )


def handle_service_errors(func: Callable[..., Response]) -> Callable[..., Response]:
    """Decorator to handle service errors and convert to HTTP responses."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)

        except BaseServiceError as e:
            log_error_metrics(e)
            return create_api_response(status_code=e.status_code, body=format_error_response(e))

        except ValidationError as e:
            # Pydantic errors raised while parsing a request body
            logger.warning("Request validation failed", extra={
                "validation_errors": str(e),
                "error_count": e.error_count(),
            })
            metrics.add_metric(name="ValidationError", unit=MetricUnit.Count, value=1)

            field_errors = [
                {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
                for error in e.errors()
            ]
            validation_error = RequestValidationError(
                message="Invalid request body",
                details=field_errors,
            )
            return create_api_response(status_code=400, body=format_error_response(validation_error))

        except Exception as e:
            logger.exception("Unexpected error in handler", extra={
                "error": str(e),
                "function_name": func.__name__,
            })
            metrics.add_metric(name="UnexpectedError", unit=MetricUnit.Count, value=1)
            return create_api_response(status_code=500, body={"error": str(e)})

    return wrapper
