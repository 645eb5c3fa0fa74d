"""Credential issuance endpoints.

Each endpoint returns the request description ({id, jwt, qr}) for one
signed interaction token.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from credential_issuance.api.models import (
    CredentialTypesRequest,
    CredentialTypesResponse,
    CustomOfferDeclaration,
    ErrorResponse,
    RequestDescriptionResponse,
)
from credential_issuance.config import API_ROOT_PATH
from credential_issuance.core.exceptions import (
    EncodingError,
    InvalidOfferDefinitionError,
    UnknownCredentialTypeError,
)
from credential_issuance.credential.metadata import get_claims_metadata_provider
from credential_issuance.credential.offer.static import get_static_offer_provider
from credential_issuance.interaction.pipeline import (
    DescriptorAssembler,
    IssuanceFlow,
    catalog_offer_flow,
    custom_offer_flow,
    get_descriptor_assembler,
    request_flow,
)

log = logging.getLogger(__name__)
router = APIRouter(prefix=f"{API_ROOT_PATH}/credential-issuance", tags=["credential-issuance"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Unknown credential type or invalid offer"},
    500: {"model": ErrorResponse, "description": "Token could not be encoded"},
}


async def _describe(assembler: DescriptorAssembler, flow: IssuanceFlow) -> RequestDescriptionResponse:
    try:
        description = await assembler.assemble(flow)
    except (UnknownCredentialTypeError, InvalidOfferDefinitionError) as e:
        log.info(f"Rejected {flow.name} request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except EncodingError as e:
        log.exception(f"Failed to encode {flow.name} descriptor: {e}")
        raise HTTPException(status_code=500, detail="Internal error encoding interaction token")

    return RequestDescriptionResponse(**description.to_dict())


@router.post("/request", response_model=RequestDescriptionResponse, responses=_ERROR_RESPONSES)
async def request_credentials(
    request: CredentialTypesRequest,
    assembler: DescriptorAssembler = Depends(get_descriptor_assembler),
) -> RequestDescriptionResponse:
    """Receive a credential request description.

    Asks the wallet to present credentials of the given claims metadata types.
    """
    return await _describe(assembler, request_flow(request.types))


@router.post("/offer", response_model=RequestDescriptionResponse, responses=_ERROR_RESPONSES)
async def offer_credentials(
    request: CredentialTypesRequest,
    assembler: DescriptorAssembler = Depends(get_descriptor_assembler),
) -> RequestDescriptionResponse:
    """Receive a credential offer description for catalog credential types."""
    return await _describe(assembler, catalog_offer_flow(request.types))


@router.post("/offer/custom", response_model=RequestDescriptionResponse, responses=_ERROR_RESPONSES)
async def offer_custom_credentials(
    offers: list[CustomOfferDeclaration],
    assembler: DescriptorAssembler = Depends(get_descriptor_assembler),
) -> RequestDescriptionResponse:
    """Receive a credential offer description for custom offer declarations.

    Display fields are bound to each offer's claims: ``path`` wins when it
    resolves, ``text`` is the fallback, and unresolved fields stay unset.
    """
    return await _describe(
        assembler, custom_offer_flow([offer.to_declaration() for offer in offers])
    )


@router.get("/types", response_model=CredentialTypesResponse)
def list_credential_types() -> CredentialTypesResponse:
    """List the type names accepted by the request and catalog offer flows."""
    return CredentialTypesResponse(
        request=get_claims_metadata_provider().types,
        offer=get_static_offer_provider().types,
    )
