"""Shared utilities: exceptions, settings and logging setup."""

from agreement.utils.exceptions import (
    AgreementError,
    AgreementDefinitionError,
    ImplementationMismatchError,
    ChannelCapabilityError,
    PayloadValidationError,
    CallerIdentityError,
    MethodNotFoundError,
)
from agreement.utils.settings import AgreementSettings, get_settings
from agreement.utils.logging import configure_logging

__all__ = [
    "AgreementError",
    "AgreementDefinitionError",
    "ImplementationMismatchError",
    "ChannelCapabilityError",
    "PayloadValidationError",
    "CallerIdentityError",
    "MethodNotFoundError",
    "AgreementSettings",
    "get_settings",
    "configure_logging",
]
