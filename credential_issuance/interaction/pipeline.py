"""Descriptor assembly pipeline.

Three client flows converge here:

- CredentialRequestFlow: type names resolved via the claims metadata
  registry into credential requirements;
- CatalogOfferFlow: type names resolved via the static offer catalog;
- CustomOfferFlow: raw offer declarations built by the offer factory.

Resolution is all-or-nothing. Once the batch resolves, the identity engine
mints one token for it and the token becomes a RequestDescription.
"""
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from credential_issuance import config
from credential_issuance.agent.engine import IdentityEngine
from credential_issuance.agent.token import CREDENTIAL_OFFER, CREDENTIAL_REQUEST
from credential_issuance.credential.metadata import (
    ClaimsMetadataProvider,
    get_claims_metadata_provider,
)
from credential_issuance.credential.offer.factory import (
    CredentialOfferFactory,
    get_credential_offer_factory,
)
from credential_issuance.credential.offer.models import CredentialOfferRequest
from credential_issuance.credential.offer.static import (
    StaticCredentialOfferProvider,
    get_static_offer_provider,
)
from credential_issuance.interaction.description import (
    RequestDescription,
    RequestDescriptionFactory,
    get_request_description_factory,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CredentialRequirement:
    """Asks the wallet to present a credential of ``type``."""

    type: str
    constraints: tuple = ()

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "constraints": list(self.constraints)}


@dataclass(frozen=True)
class CredentialRequestFlow:
    types: tuple[str, ...]

    name = "request"


@dataclass(frozen=True)
class CatalogOfferFlow:
    types: tuple[str, ...]

    name = "offer"


@dataclass(frozen=True)
class CustomOfferFlow:
    offers: tuple[Mapping[str, Any], ...]

    name = "custom-offer"


IssuanceFlow = Union[CredentialRequestFlow, CatalogOfferFlow, CustomOfferFlow]


@dataclass
class ResolvedInteraction:
    """A flow after resolution, ready for token minting."""

    interaction_type: str  # CREDENTIAL_REQUEST or CREDENTIAL_OFFER
    requirements: list[CredentialRequirement] = field(default_factory=list)
    offers: list[CredentialOfferRequest] = field(default_factory=list)


class DescriptorAssembler:
    """Resolves issuance flows and turns them into request descriptions."""

    def __init__(
        self,
        engine: IdentityEngine,
        callback_url: str,
        metadata_provider: ClaimsMetadataProvider,
        offer_provider: StaticCredentialOfferProvider,
        offer_factory: Optional[CredentialOfferFactory] = None,
        description_factory: Optional[RequestDescriptionFactory] = None,
    ):
        self._engine = engine
        self._callback_url = callback_url
        self._metadata_provider = metadata_provider
        self._offer_provider = offer_provider
        self._offer_factory = offer_factory or get_credential_offer_factory()
        self._description_factory = description_factory or get_request_description_factory()

    @property
    def callback_url(self) -> str:
        return self._callback_url

    def resolve(self, flow: IssuanceFlow) -> ResolvedInteraction:
        """Resolve every element of ``flow``.

        Raises:
            UnknownCredentialTypeError: A type name is not registered.
            InvalidOfferDefinitionError: A custom declaration is invalid.
        """
        if isinstance(flow, CredentialRequestFlow):
            requirements = [
                CredentialRequirement(type=metadata.type)
                for metadata in self._metadata_provider.resolve_all(flow.types)
            ]
            return ResolvedInteraction(CREDENTIAL_REQUEST, requirements=requirements)

        if isinstance(flow, CatalogOfferFlow):
            offers = self._offer_provider.resolve_all(flow.types)
            return ResolvedInteraction(CREDENTIAL_OFFER, offers=offers)

        if isinstance(flow, CustomOfferFlow):
            offers = [self._offer_factory.create(raw) for raw in flow.offers]
            return ResolvedInteraction(CREDENTIAL_OFFER, offers=offers)

        raise TypeError(f"Unsupported issuance flow: {type(flow).__name__}")

    async def assemble(self, flow: IssuanceFlow) -> RequestDescription:
        """Resolve ``flow``, mint its token and describe it.

        Engine failures, cancellation included, propagate unchanged.
        """
        resolved = self.resolve(flow)

        if resolved.interaction_type == CREDENTIAL_REQUEST:
            token = await self._engine.credential_request_token(
                resolved.requirements, self._callback_url
            )
        else:
            token = await self._engine.credential_offer_token(
                resolved.offers, self._callback_url
            )

        description = self._description_factory.create(token)
        log.info(
            f"Assembled {flow.name} descriptor {description.id}",
            extra={"flow": flow.name, "token_id": description.id},
        )
        return description


def request_flow(types: Sequence[str]) -> CredentialRequestFlow:
    return CredentialRequestFlow(types=tuple(types))


def catalog_offer_flow(types: Sequence[str]) -> CatalogOfferFlow:
    return CatalogOfferFlow(types=tuple(types))


def custom_offer_flow(offers: Sequence[Mapping[str, Any]]) -> CustomOfferFlow:
    return CustomOfferFlow(offers=tuple(offers))


# Module-level singleton
_assembler: Optional[DescriptorAssembler] = None


async def get_descriptor_assembler() -> DescriptorAssembler:
    """Get or create the assembler singleton, backed by the issuer agent."""
    global _assembler
    if _assembler is None:
        from credential_issuance.agent.issuer import get_issuer_agent

        if not config.CALLBACK_URL:
            raise RuntimeError("CIS_CALLBACK_URL is not configured")

        _assembler = DescriptorAssembler(
            engine=await get_issuer_agent(),
            callback_url=config.CALLBACK_URL,
            metadata_provider=get_claims_metadata_provider(),
            offer_provider=get_static_offer_provider(),
        )
    return _assembler


def reset_descriptor_assembler() -> None:
    """Reset the singleton (for testing)."""
    global _assembler
    _assembler = None
