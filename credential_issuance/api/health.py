"""Health check endpoints."""
import logging

from fastapi import APIRouter

from credential_issuance.api.models import HealthResponse
from credential_issuance.core.exceptions import RegistryLoadError
from credential_issuance.credential.metadata import get_claims_metadata_provider
from credential_issuance.credential.offer.static import get_static_offer_provider

log = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


def _agent_ready() -> bool:
    from credential_issuance.agent.issuer import is_issuer_agent_ready

    return is_issuer_agent_ready()


@router.get("/healthz", response_model=HealthResponse)
def healthz() -> HealthResponse:
    """Health check endpoint.

    Returns service status, registry sizes and whether the issuer agent
    holds its identity.
    """
    try:
        claims_count = len(get_claims_metadata_provider())
        offer_count = len(get_static_offer_provider())
    except RegistryLoadError as e:
        log.warning(f"Health check warning: {e}")
        return HealthResponse(ok=False)

    return HealthResponse(
        ok=True,
        claims_types_loaded=claims_count,
        offer_types_loaded=offer_count,
        agent_ready=_agent_ready(),
    )
