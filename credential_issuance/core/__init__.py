"""Shared logging and exceptions for the credential issuance service."""

from credential_issuance.core.exceptions import (
    AgentError,
    EncodingError,
    InvalidOfferDefinitionError,
    IssuanceError,
    RegistryLoadError,
    UnknownCredentialTypeError,
)
from credential_issuance.core.logging import JsonFormatter, configure_logging

__all__ = [
    "IssuanceError",
    "UnknownCredentialTypeError",
    "InvalidOfferDefinitionError",
    "EncodingError",
    "RegistryLoadError",
    "AgentError",
    "JsonFormatter",
    "configure_logging",
]
