"""Exceptions raised by the agreement layer."""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError


def error_details(error: ValidationError) -> List[Dict[str, Any]]:
    """Flatten a pydantic ValidationError into field/message/type/input dicts."""
    details = []
    for item in error.errors():
        details.append({
            'field': '.'.join(str(x) for x in item['loc']),
            'message': item['msg'],
            'type': item['type'],
            'input': item.get('input')
        })
    return details


class AgreementError(Exception):
    """Base exception for the agreement layer."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class AgreementDefinitionError(AgreementError):
    """An agreement or route is malformed. Raised at bind time."""


class ImplementationMismatchError(AgreementDefinitionError):
    """An implementation's signature does not fit its route."""

    def __init__(self, route: str, message: str):
        super().__init__(f"Implementation for route '{route}' {message}")
        self.route = route


class ChannelCapabilityError(AgreementError):
    """The channel does not provide the capabilities binders need."""


class PayloadValidationError(AgreementError):
    """A single call carried a payload (or produced a result) that breaks the contract."""

    def __init__(self, route: str, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, errors)
        self.route = route

    @classmethod
    def from_validation_error(cls, route: str, stage: str, error: ValidationError) -> "PayloadValidationError":
        return cls(
            route,
            f"{stage} validation failed for route '{route}'",
            errors=error_details(error)
        )


class CallerIdentityError(AgreementError):
    """The channel could not report who is calling."""


class MethodNotFoundError(AgreementError):
    """No handler is registered for the requested path."""

    def __init__(self, path: str):
        super().__init__(f"Method not found: {path}")
        self.path = path
