"""Pytest fixtures for credential issuance tests."""
import base64
import json
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncGenerator, Optional

import pytest
from httpx import AsyncClient, ASGITransport

import credential_issuance
from credential_issuance.agent.token import CREDENTIAL_OFFER, CREDENTIAL_REQUEST
from credential_issuance.credential.metadata import (
    ClaimsMetadataProvider,
    reset_claims_metadata_provider,
)
from credential_issuance.credential.offer.static import (
    StaticCredentialOfferProvider,
    reset_static_offer_provider,
)
from credential_issuance.interaction.description import RequestDescriptionFactory
from credential_issuance.interaction.pipeline import (
    DescriptorAssembler,
    get_descriptor_assembler,
    reset_descriptor_assembler,
)

TEST_CALLBACK_URL = "http://test/api/v1/interaction/callback"

DATA_DIR = Path(credential_issuance.__file__).parent / "credential" / "data"
CLAIMS_METADATA_FILE = DATA_DIR / "claims_metadata.json"
STATIC_OFFERS_FILE = DATA_DIR / "static_offers.json"


def decode_segment(segment: str) -> dict:
    """Decode one base64url JWT segment into JSON."""
    padded = segment + "=" * (-len(segment) % 4)
    return json.loads(base64.urlsafe_b64decode(padded))


# =============================================================================
# Fake identity engine
# =============================================================================

@dataclass(frozen=True)
class FakeToken:
    """Interaction token stand-in with a fixed serialization."""

    id: str
    jwt: str

    def encode(self) -> str:
        return self.jwt


class RecordingEngine:
    """Identity engine that records calls and mints fake tokens.

    Args:
        fail_with: Exception raised from every call (after recording it)
        jwt: Serialized form for minted tokens; derived from the id if None
    """

    def __init__(self, fail_with: Optional[BaseException] = None, jwt: Optional[str] = None):
        self.calls: list[tuple[str, list, str]] = []
        self.fail_with = fail_with
        self.jwt = jwt

    async def credential_request_token(self, credential_requirements, callback_url):
        return self._mint(CREDENTIAL_REQUEST, credential_requirements, callback_url)

    async def credential_offer_token(self, offered_credentials, callback_url):
        return self._mint(CREDENTIAL_OFFER, offered_credentials, callback_url)

    def _mint(self, interaction_type, items, callback_url) -> FakeToken:
        self.calls.append((interaction_type, list(items), callback_url))
        if self.fail_with is not None:
            raise self.fail_with
        token_id = f"token-{len(self.calls)}"
        jwt = self.jwt
        if jwt is None:
            jwt = f"eyJhbGciOiJFZERTQSJ9.{interaction_type}.{token_id}"
        return FakeToken(id=token_id, jwt=jwt)


# =============================================================================
# Registries and pipeline
# =============================================================================

@pytest.fixture
def temp_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def claims_metadata_source() -> dict:
    """Bundled claims metadata as decoded JSON."""
    return json.loads(CLAIMS_METADATA_FILE.read_text(encoding="utf-8"))


@pytest.fixture
def metadata_provider() -> ClaimsMetadataProvider:
    return ClaimsMetadataProvider.from_file(CLAIMS_METADATA_FILE)


@pytest.fixture
def offer_provider() -> StaticCredentialOfferProvider:
    return StaticCredentialOfferProvider.from_file(STATIC_OFFERS_FILE)


@pytest.fixture
def description_factory() -> RequestDescriptionFactory:
    return RequestDescriptionFactory()


@pytest.fixture
def engine() -> RecordingEngine:
    return RecordingEngine()


@pytest.fixture
def make_assembler(metadata_provider, offer_provider, description_factory):
    """Build an assembler around a given engine."""

    def _make(engine) -> DescriptorAssembler:
        return DescriptorAssembler(
            engine=engine,
            callback_url=TEST_CALLBACK_URL,
            metadata_provider=metadata_provider,
            offer_provider=offer_provider,
            description_factory=description_factory,
        )

    return _make


@pytest.fixture
def assembler(make_assembler, engine) -> DescriptorAssembler:
    return make_assembler(engine)


# =============================================================================
# API client
# =============================================================================

@pytest.fixture
async def client(assembler: DescriptorAssembler) -> AsyncGenerator[AsyncClient, None]:
    """Create test client backed by the recording engine.

    The assembler dependency is overridden, so no issuer agent is started.
    """
    reset_claims_metadata_provider()
    reset_static_offer_provider()
    reset_descriptor_assembler()

    from credential_issuance.main import app

    app.dependency_overrides[get_descriptor_assembler] = lambda: assembler

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as async_client:
        yield async_client

    app.dependency_overrides.clear()
    reset_claims_metadata_provider()
    reset_static_offer_provider()
    reset_descriptor_assembler()


# =============================================================================
# Issuer agent
# =============================================================================

@pytest.fixture
async def temp_agent(temp_dir: Path):
    """Issuer agent with temporary keri storage."""
    from credential_issuance.agent.issuer import IssuerAgent, reset_issuer_agent

    reset_issuer_agent()
    agent = IssuerAgent(
        name="test-issuer",
        alias="test-identity",
        base_dir=temp_dir,
        token_validity=600,
        temp=True,
    )
    await agent.initialize()
    yield agent
    await agent.close()
    reset_issuer_agent()
