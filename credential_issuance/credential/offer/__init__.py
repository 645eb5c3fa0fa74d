"""Credential offers: canonical model, display binding, factory and catalog."""

from credential_issuance.credential.offer.display import NOT_FOUND, resolve_field, resolve_path
from credential_issuance.credential.offer.factory import (
    CredentialOfferFactory,
    get_credential_offer_factory,
)
from credential_issuance.credential.offer.models import (
    CredentialOfferRequest,
    DisplayField,
    DisplayTemplate,
    RenderAs,
)
from credential_issuance.credential.offer.static import (
    StaticCredentialOfferProvider,
    get_static_offer_provider,
    reset_static_offer_provider,
)

__all__ = [
    # Model
    "CredentialOfferRequest",
    "DisplayField",
    "DisplayTemplate",
    "RenderAs",
    # Display binding
    "NOT_FOUND",
    "resolve_path",
    "resolve_field",
    # Factory
    "CredentialOfferFactory",
    "get_credential_offer_factory",
    # Catalog
    "StaticCredentialOfferProvider",
    "get_static_offer_provider",
    "reset_static_offer_provider",
]
