"""Issuer agent: the identity engine that mints signed interaction tokens.

The KERI-backed implementation lives in ``credential_issuance.agent.issuer``
and is imported where the agent singleton is needed.
"""

from credential_issuance.agent.engine import IdentityEngine, WireSerializable
from credential_issuance.agent.token import (
    CREDENTIAL_OFFER,
    CREDENTIAL_REQUEST,
    InteractionToken,
    SignedInteractionToken,
    base64url_encode,
    encode_segment,
)

__all__ = [
    "IdentityEngine",
    "WireSerializable",
    "InteractionToken",
    "SignedInteractionToken",
    "CREDENTIAL_REQUEST",
    "CREDENTIAL_OFFER",
    "base64url_encode",
    "encode_segment",
]
