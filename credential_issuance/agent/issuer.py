"""KERI-backed issuer agent.

Wraps keripy's Habery holding a single issuer identity and mints signed
interaction tokens (credential requests and credential offers) with that
identity's Ed25519 signing key.
"""
import asyncio
import logging
import secrets
import time
import uuid
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Optional

from keri.core import coring
from keri.app import habbing

from credential_issuance import config
from credential_issuance.agent.engine import WireSerializable
from credential_issuance.agent.token import (
    CREDENTIAL_OFFER,
    CREDENTIAL_REQUEST,
    SignedInteractionToken,
    encode_segment,
)
from credential_issuance.core.exceptions import AgentError

log = logging.getLogger(__name__)

# keripy stretches at least 21 characters of passcode into the keystore seed
PASSCODE_LENGTH = 21


def load_or_create_passcode(path: Path) -> str:
    """Read the keystore passcode, generating it on first start."""
    if path.exists():
        passcode = path.read_text(encoding="utf-8").strip()
        if len(passcode) < PASSCODE_LENGTH:
            raise AgentError(
                f"Passcode in {path} must be at least {PASSCODE_LENGTH} characters"
            )
        return passcode

    passcode = secrets.token_urlsafe(16)[:PASSCODE_LENGTH]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(passcode, encoding="utf-8")
    path.chmod(0o600)
    log.info(f"Generated agent passcode at {path}")
    return passcode


class IssuerAgent:
    """Issuer identity and token minting.

    The agent keeps one Habery with one transferable identity (alias from
    config). Tokens are JWTs whose ``kid`` is ``did:keri:<aid>#<key>``.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        alias: Optional[str] = None,
        base_dir: Optional[Path] = None,
        passcode_file: Optional[Path] = None,
        token_validity: Optional[int] = None,
        temp: bool = False,
    ):
        """Initialize the agent.

        Args:
            name: Habery name (used in storage paths)
            alias: Name of the issuer identity inside the Habery
            base_dir: Root directory for keri data
            passcode_file: Keystore passcode file; None in temp mode
            token_validity: Token lifetime in seconds
            temp: If True, use temporary storage (testing)

        Note: Call initialize() to complete setup after construction.
        """
        self._name = name or config.AGENT_NAME
        self._alias = alias or config.AGENT_ALIAS
        self._base_dir = base_dir or config.DATA_DIR
        self._passcode_file = passcode_file
        if passcode_file is None and not temp:
            self._passcode_file = config.AGENT_PASSCODE_FILE
        self._token_validity = token_validity or config.TOKEN_VALIDITY_SECONDS
        self._temp = temp
        self._hby: Optional[habbing.Habery] = None
        self._hab: Optional[habbing.Hab] = None
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Open the Habery and load or create the issuer identity."""
        async with self._lock:
            if self._hby is not None:
                return

            bran = None
            if self._passcode_file is not None:
                bran = load_or_create_passcode(self._passcode_file)

            self._base_dir.mkdir(parents=True, exist_ok=True)
            self._hby = habbing.Habery(
                name=self._name,
                base="",
                temp=self._temp,
                salt=coring.Salter().qb64,
                bran=bran,
                headDirPath=str(self._base_dir),
            )
            log.info(f"Habery initialized: {self._name} at {self._base_dir}")

            hab = self._hby.habByName(self._alias)
            if hab is None:
                hab = self._hby.makeHab(
                    name=self._alias,
                    transferable=True,
                    icount=1,
                    isith="1",
                    ncount=1,
                    nsith="1",
                )
                log.info(f"Created issuer identity: {self._alias} ({hab.pre[:16]}...)")
            else:
                log.info(f"Loaded issuer identity: {self._alias} ({hab.pre[:16]}...)")
            self._hab = hab

    async def close(self) -> None:
        """Close the Habery and release resources."""
        async with self._lock:
            if self._hby is not None:
                self._hby.close(clear=self._temp)
                self._hby = None
                self._hab = None
                log.info("Issuer agent closed")

    @property
    def ready(self) -> bool:
        return self._hab is not None

    @property
    def hab(self) -> habbing.Hab:
        """Issuer identity (raises if not initialized)."""
        if self._hab is None:
            raise AgentError("IssuerAgent not initialized")
        return self._hab

    @property
    def aid(self) -> str:
        return self.hab.pre

    @property
    def did(self) -> str:
        return f"did:keri:{self.aid}"

    @property
    def key_id(self) -> str:
        """Verification method of the current signing key."""
        return f"{self.did}#{self.hab.kever.verfers[0].qb64}"

    async def credential_request_token(
        self,
        credential_requirements: Sequence[WireSerializable],
        callback_url: str,
    ) -> SignedInteractionToken:
        """Mint a token asking the wallet to present credentials."""
        return await self._mint(
            CREDENTIAL_REQUEST,
            {
                "credentialRequirements": [r.to_dict() for r in credential_requirements],
                "callbackURL": callback_url,
            },
        )

    async def credential_offer_token(
        self,
        offered_credentials: Sequence[WireSerializable],
        callback_url: str,
    ) -> SignedInteractionToken:
        """Mint a token offering credentials to the wallet."""
        return await self._mint(
            CREDENTIAL_OFFER,
            {
                "offeredCredentials": [o.to_dict() for o in offered_credentials],
                "callbackURL": callback_url,
            },
        )

    async def _mint(self, interaction_type: str, body: dict[str, Any]) -> SignedInteractionToken:
        async with self._lock:
            hab = self.hab
            kid = self.key_id
            now = int(time.time())

            header = {"alg": "EdDSA", "typ": "JWT", "kid": kid}
            payload = {
                "jti": uuid.uuid4().hex,
                "iss": kid,
                "iat": now,
                "exp": now + self._token_validity,
                "typ": interaction_type,
                "interactionToken": body,
            }
            signing_input = f"{encode_segment(header)}.{encode_segment(payload)}"

            try:
                cigars = hab.sign(ser=signing_input.encode("ascii"), indexed=False)
            except Exception as e:
                log.error(f"Failed to sign {interaction_type} token: {e}")
                raise AgentError(f"Signing failed: {e}") from e
            if not cigars:
                raise AgentError("Signing returned no signatures")

            token = SignedInteractionToken(
                header=header,
                payload=payload,
                signing_input=signing_input,
                signature=cigars[0].raw,
            )

        log.info(f"Minted {interaction_type} token {token.id}")
        return token


# Module-level singleton
_issuer_agent: Optional[IssuerAgent] = None


async def get_issuer_agent() -> IssuerAgent:
    """Get or create the issuer agent singleton."""
    global _issuer_agent
    if _issuer_agent is None:
        _issuer_agent = IssuerAgent()
        await _issuer_agent.initialize()
    return _issuer_agent


def is_issuer_agent_ready() -> bool:
    """Whether the singleton exists and holds its identity."""
    return _issuer_agent is not None and _issuer_agent.ready


async def close_issuer_agent() -> None:
    """Close the issuer agent singleton."""
    global _issuer_agent
    if _issuer_agent is not None:
        await _issuer_agent.close()
        _issuer_agent = None


def reset_issuer_agent() -> None:
    """Reset the singleton without closing (for testing)."""
    global _issuer_agent
    _issuer_agent = None
