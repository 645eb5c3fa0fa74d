"""API models for the credential issuance service.

Pydantic models for API requests and responses.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Request Models
# =============================================================================


class CredentialTypesRequest(BaseModel):
    """Request naming credential types (request and catalog offer flows)."""

    types: list[str] = Field(..., description="Credential type names")


class DisplayFieldModel(BaseModel):
    """One display slot of a custom offer."""

    path: Optional[list[str]] = Field(None, description="Keys into the offer claims")
    text: Optional[str] = Field(None, description="Literal text used when path is unset or unresolved")
    label: Optional[str] = Field(None, description="Rendering label")


class DisplayTemplateModel(BaseModel):
    """Display template of a custom offer."""

    title: Optional[DisplayFieldModel] = None
    subtitle: Optional[DisplayFieldModel] = None
    description: Optional[DisplayFieldModel] = None
    properties: Optional[list[DisplayFieldModel]] = None


class CustomOfferDeclaration(BaseModel):
    """A custom credential offer.

    ``type``, ``schema`` and ``renderAs`` are checked by the offer factory
    so that structural errors surface as 400 rather than 422.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, description="Credential name")
    type: Optional[str] = Field(None, description="Credential type")
    schema_: Optional[str] = Field(None, alias="schema", description="Claim schema identifier")
    claims: dict[str, Any] = Field(default_factory=dict, description="Claim values")
    render_as: Optional[str] = Field(
        None,
        alias="renderAs",
        description="One of: document, permission, claim",
    )
    display: Optional[DisplayTemplateModel] = None

    def to_declaration(self) -> dict[str, Any]:
        """Raw declaration for the offer factory (wire keys, unset omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# Response Models
# =============================================================================


class RequestDescriptionResponse(BaseModel):
    """Interaction token and its QR code."""

    id: str = Field(..., description="The token ID")
    jwt: str = Field(..., description="The token")
    qr: str = Field(..., description="The QR code of the JWT (PNG data URI)")


class CredentialTypesResponse(BaseModel):
    """Credential type names accepted by each flow."""

    request: list[str]
    offer: list[str]


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str


class HealthResponse(BaseModel):
    """Health check response."""

    ok: bool
    service: str = "credential-issuance"
    claims_types_loaded: int = 0
    offer_types_loaded: int = 0
    agent_ready: bool = False
