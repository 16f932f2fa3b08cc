"""
Contract Validation Utilities

Transfer envelopes and per-call validation shared by the server binder and
the client proxy.
"""

from typing import Any, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, ValidationError, create_model
import structlog

from agreement.contracts.route import Route
from agreement.contracts.schema import NoneType, Schema
from agreement.utils.exceptions import PayloadValidationError

logger = structlog.get_logger(__name__)

SENSITIVE_FIELDS = [
    'password', 'token', 'secret', 'key', 'auth', 'credential', 'signature'
]


def _envelope_field(schema: Optional[Schema]):
    if schema is None or schema.is_nothing:
        return (NoneType, None)
    return (schema.annotation, ...)


def transfer_model(route_name: str, route: Route) -> Type[BaseModel]:
    """Build the ``{headers, params}`` envelope model for a route.

    A declared header or param schema makes the key required; an absent
    one only admits ``None``.
    """
    return create_model(
        f"{route_name}Transfer",
        __config__=ConfigDict(extra="ignore"),
        headers=_envelope_field(route.header),
        params=_envelope_field(route.param),
    )


def validate_transfer(model: Type[BaseModel], route_name: str, payload: Any) -> BaseModel:
    """
    Validate a transfer payload against its envelope model.

    Raises:
        PayloadValidationError: If the payload breaks the contract
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise PayloadValidationError(
            route_name,
            f"Transfer payload for route '{route_name}' must be a mapping, "
            f"got {type(payload).__name__}"
        )

    try:
        return model.model_validate(dict(payload))
    except ValidationError as e:
        error = PayloadValidationError.from_validation_error(route_name, "Transfer", e)
        logger.warning(
            "Transfer validation failed",
            route=route_name,
            errors=sanitize_for_logging(error.errors)
        )
        raise error


def validate_value(schema: Schema, value: Any, route_name: str, stage: str) -> Any:
    """Validate a single value (usually a return value) against ``schema``."""
    try:
        return schema.validate(value)
    except ValidationError as e:
        raise PayloadValidationError.from_validation_error(route_name, stage, e)


def plain_mapping(value: Any) -> Dict[str, Any]:
    """Headers as a plain dict, whatever schema they were validated with."""
    if value is None:
        return {}
    if isinstance(value, BaseModel):
        return value.model_dump()
    return dict(value)


def sanitize_for_logging(data: Any, sensitive_fields: Optional[List[str]] = None) -> Any:
    """
    Sanitize data for logging by redacting sensitive information.

    Args:
        data: Data to sanitize
        sensitive_fields: List of field name fragments to redact

    Returns:
        Sanitized data
    """
    if sensitive_fields is None:
        sensitive_fields = SENSITIVE_FIELDS

    if isinstance(data, Mapping):
        sanitized = {}
        for key, value in data.items():
            if _is_sensitive_field(str(key), sensitive_fields):
                sanitized[key] = '[REDACTED]'
            else:
                sanitized[key] = sanitize_for_logging(value, sensitive_fields)
        return sanitized

    elif isinstance(data, list):
        return [sanitize_for_logging(item, sensitive_fields) for item in data]

    else:
        return data


def _is_sensitive_field(field_name: str, sensitive_fields: List[str]) -> bool:
    """Check if field name indicates sensitive data."""
    field_lower = field_name.lower()
    return any(sensitive in field_lower for sensitive in sensitive_fields)
