"""Interaction tokens minted by the issuer agent.

A token is a compact JWS: base64url(header).base64url(payload).base64url(sig).
Consumers outside the agent only read ``id`` and ``encode()``.
"""

import base64
import json
from dataclasses import dataclass
from typing import Any, Protocol

CREDENTIAL_REQUEST = "credentialRequest"
CREDENTIAL_OFFER = "credentialOffer"


class InteractionToken(Protocol):
    """What the descriptor builder needs from a token."""

    @property
    def id(self) -> str: ...

    def encode(self) -> str: ...


def base64url_encode(data: bytes) -> str:
    """Encode bytes as base64url without padding."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def encode_segment(obj: dict[str, Any]) -> str:
    """Compact JSON, then base64url: one JWT segment."""
    return base64url_encode(json.dumps(obj, separators=(",", ":")).encode("utf-8"))


@dataclass(frozen=True)
class SignedInteractionToken:
    """Signed JWT carrying a credential request or offer.

    Attributes:
        header: Decoded JWT header
        payload: Decoded JWT payload (``jti`` is the token id)
        signing_input: ASCII ``header.payload`` that was signed
        signature: Raw Ed25519 signature bytes
    """

    header: dict
    payload: dict
    signing_input: str
    signature: bytes

    @property
    def id(self) -> str:
        return self.payload["jti"]

    @property
    def interaction_type(self) -> str:
        return self.payload["typ"]

    def encode(self) -> str:
        return f"{self.signing_input}.{base64url_encode(self.signature)}"
