"""Identity engine interface used by the descriptor pipeline."""
from collections.abc import Sequence
from typing import Any, Protocol

from credential_issuance.agent.token import InteractionToken


class WireSerializable(Protocol):
    def to_dict(self) -> dict[str, Any]: ...


class IdentityEngine(Protocol):
    """Mints signed interaction tokens.

    Errors raised here are the engine's own and reach the caller as-is.
    """

    async def credential_request_token(
        self,
        credential_requirements: Sequence[WireSerializable],
        callback_url: str,
    ) -> InteractionToken: ...

    async def credential_offer_token(
        self,
        offered_credentials: Sequence[WireSerializable],
        callback_url: str,
    ) -> InteractionToken: ...
