"""Descriptor assembly: issuance flows in, {id, jwt, qr} out."""

from credential_issuance.interaction.description import (
    RequestDescription,
    RequestDescriptionFactory,
    get_request_description_factory,
    reset_request_description_factory,
)
from credential_issuance.interaction.pipeline import (
    CatalogOfferFlow,
    CredentialRequestFlow,
    CredentialRequirement,
    CustomOfferFlow,
    DescriptorAssembler,
    IssuanceFlow,
    ResolvedInteraction,
    catalog_offer_flow,
    custom_offer_flow,
    get_descriptor_assembler,
    request_flow,
    reset_descriptor_assembler,
)

__all__ = [
    # Descriptions
    "RequestDescription",
    "RequestDescriptionFactory",
    "get_request_description_factory",
    "reset_request_description_factory",
    # Flows
    "IssuanceFlow",
    "CredentialRequestFlow",
    "CatalogOfferFlow",
    "CustomOfferFlow",
    "request_flow",
    "catalog_offer_flow",
    "custom_offer_flow",
    # Pipeline
    "CredentialRequirement",
    "ResolvedInteraction",
    "DescriptorAssembler",
    "get_descriptor_assembler",
    "reset_descriptor_assembler",
]
