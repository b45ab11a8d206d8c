"""
Request schema validation for the validation middleware.

Implements the small JSON-schema subset the client requests need: required
properties, primitive types, enums, string length, pattern and format
(email, date-time, uuid) and numeric bounds. Only the four schemas in
``SCHEMAS`` are supported.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from studyrooms.handlers.utils.observability import tracer

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
UUID_PATTERN = re.compile(r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$', re.IGNORECASE)
DATETIME_ADAPTER = TypeAdapter(datetime)


class SchemaProperty(BaseModel):
    """Constraints on a single property."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: Annotated[str, Field(description='JSON type: string, number, boolean, array or object')]
    format: Optional[str] = None
    enum: Optional[List[str]] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    min_length: Annotated[Optional[int], Field(alias='minLength')] = None
    max_length: Annotated[Optional[int], Field(alias='maxLength')] = None
    pattern: Optional[str] = None


class RequestSchema(BaseModel):
    """Schema of a request body."""

    model_config = ConfigDict(frozen=True)

    type: str = 'object'
    properties: Dict[str, SchemaProperty] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)


@dataclass
class ValidationOutcome:
    """Result of validating a payload against a schema."""

    valid: bool
    errors: List[str] = field(default_factory=list)


def json_type_name(value: Any) -> str:
    """Name of the JSON type of a decoded value."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, list):
        return 'array'
    if isinstance(value, dict):
        return 'object'
    return type(value).__name__


def _is_iso_datetime(value: str) -> bool:
    # same parser the request models use for startDate/endDate
    try:
        DATETIME_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return True


def _check_string(name: str, value: str, prop: SchemaProperty, errors: List[str]) -> None:
    if prop.enum is not None and value not in prop.enum:
        errors.append(f'Property {name} should be one of: {", ".join(prop.enum)}, got {value}')

    if prop.min_length is not None and len(value) < prop.min_length:
        errors.append(f'Property {name} should have a minimum length of {prop.min_length}')
    if prop.max_length is not None and len(value) > prop.max_length:
        errors.append(f'Property {name} should have a maximum length of {prop.max_length}')

    if prop.pattern and not re.search(prop.pattern, value):
        errors.append(f'Property {name} does not match the required pattern')

    if prop.format == 'email' and not EMAIL_PATTERN.fullmatch(value):
        errors.append(f'Property {name} should be a valid email address')
    elif prop.format == 'date-time' and not _is_iso_datetime(value):
        errors.append(f'Property {name} should be a valid date-time string')
    elif prop.format == 'uuid' and not UUID_PATTERN.fullmatch(value):
        errors.append(f'Property {name} should be a valid UUID')


def _format_bound(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)


def _check_number(name: str, value: float, prop: SchemaProperty, errors: List[str]) -> None:
    if prop.minimum is not None and value < prop.minimum:
        errors.append(f'Property {name} should be at least {_format_bound(prop.minimum)}')
    if prop.maximum is not None and value > prop.maximum:
        errors.append(f'Property {name} should be at most {_format_bound(prop.maximum)}')


@tracer.capture_method
def validate_data(data: Any, schema: RequestSchema) -> ValidationOutcome:
    """
    Validate a decoded JSON payload against a schema.

    Every violation is reported; the only early exit is a payload that is not
    an object when the schema expects one.
    """
    errors: List[str] = []

    if schema.type == 'object' and not isinstance(data, dict):
        errors.append(f'Expected an object, got {json_type_name(data)}')
        return ValidationOutcome(valid=False, errors=errors)

    for required in schema.required:
        if required not in data:
            errors.append(f'Missing required property: {required}')

    for name, prop in schema.properties.items():
        if name not in data:
            continue
        value = data[name]
        actual_type = json_type_name(value)

        if prop.type in ('string', 'number', 'boolean', 'array') and actual_type != prop.type:
            errors.append(f'Property {name} should be a{"n" if prop.type == "array" else ""} {prop.type}, got {actual_type}')
            continue

        if prop.type == 'string':
            _check_string(name, value, prop, errors)
        elif prop.type == 'number':
            _check_number(name, value, prop, errors)

    return ValidationOutcome(valid=not errors, errors=errors)


SCHEMAS: Dict[str, RequestSchema] = {
    name: RequestSchema.model_validate(definition)
    for name, definition in {
        'session-analytics': {
            'type': 'object',
            'properties': {
                'userId': {'type': 'string', 'format': 'uuid'},
                'timeRange': {'type': 'string', 'enum': ['daily', 'weekly', 'monthly']},
                'startDate': {'type': 'string', 'format': 'date-time'},
                'endDate': {'type': 'string', 'format': 'date-time'},
            },
            'required': ['userId', 'timeRange'],
        },
        'room-recommendation': {
            'type': 'object',
            'properties': {
                'userId': {'type': 'string', 'format': 'uuid'},
            },
            'required': ['userId'],
        },
        'start-session': {
            'type': 'object',
            'properties': {
                'userId': {'type': 'string', 'format': 'uuid'},
                'status': {'type': 'string'},
                'currentProject': {'type': 'string', 'format': 'uuid'},
                'currentTask': {'type': 'string', 'format': 'uuid'},
                'roomType': {'type': 'string'},
                'startTime': {'type': 'string', 'format': 'date-time'},
            },
            'required': ['userId', 'status'],
        },
        'end-session': {
            'type': 'object',
            'properties': {
                'sessionId': {'type': 'string', 'format': 'uuid'},
                'endTime': {'type': 'string', 'format': 'date-time'},
            },
            'required': ['sessionId', 'endTime'],
        },
    }.items()
}


def get_schema(name: Optional[str]) -> Optional[RequestSchema]:
    """Look up a schema by name; None for unknown or missing names."""
    if not name:
        return None
    return SCHEMAS.get(name)
