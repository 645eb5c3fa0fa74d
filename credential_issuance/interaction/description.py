"""Request descriptions: the {id, jwt, qr} triple returned to clients.

The QR code encodes the token's serialized form and is returned as a PNG
data URI, ready to drop into an ``<img src>``.
"""

import base64
import logging
from dataclasses import asdict, dataclass
from io import BytesIO
from typing import Optional

import qrcode
import qrcode.constants
from qrcode.exceptions import DataOverflowError

from credential_issuance import config
from credential_issuance.agent.token import InteractionToken
from credential_issuance.core.exceptions import EncodingError

log = logging.getLogger(__name__)

PNG_DATA_URI_PREFIX = "data:image/png;base64,"

ERROR_CORRECTION_LEVELS = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


@dataclass(frozen=True)
class RequestDescription:
    """Token id, serialized token and its QR code."""

    id: str
    jwt: str
    qr: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


class RequestDescriptionFactory:
    """Wraps interaction tokens into request descriptions."""

    def __init__(
        self,
        error_correction: str = "L",
        box_size: int = 10,
        border: int = 4,
    ):
        if error_correction not in ERROR_CORRECTION_LEVELS:
            raise ValueError(f"Unknown QR error correction level: {error_correction}")
        self._error_correction = ERROR_CORRECTION_LEVELS[error_correction]
        self._box_size = box_size
        self._border = border

    def create(self, token: InteractionToken) -> RequestDescription:
        """Build the description for ``token``.

        Raises:
            EncodingError: Serialized token is empty, not a string, or too
                large for a QR symbol.
        """
        jwt = token.encode()
        return RequestDescription(id=token.id, jwt=jwt, qr=self.render_qr(jwt))

    def render_qr(self, data: str) -> str:
        """Render ``data`` as a PNG QR code data URI."""
        if not isinstance(data, str) or not data:
            raise EncodingError("Serialized token is empty")

        qr = qrcode.QRCode(
            version=None,
            error_correction=self._error_correction,
            box_size=self._box_size,
            border=self._border,
        )
        try:
            qr.add_data(data)
            qr.make(fit=True)
        except DataOverflowError as e:
            log.error(f"Token of {len(data)} chars does not fit in a QR code")
            raise EncodingError(f"Serialized token too large for QR code ({len(data)} chars)") from e

        img = qr.make_image(fill_color="black", back_color="white")
        buffer = BytesIO()
        img.save(buffer, "PNG")

        return PNG_DATA_URI_PREFIX + base64.b64encode(buffer.getvalue()).decode("ascii")


# Module-level singleton
_description_factory: Optional[RequestDescriptionFactory] = None


def get_request_description_factory() -> RequestDescriptionFactory:
    """Get or create the description factory singleton."""
    global _description_factory
    if _description_factory is None:
        _description_factory = RequestDescriptionFactory(
            error_correction=config.QR_ERROR_CORRECTION,
            box_size=config.QR_BOX_SIZE,
            border=config.QR_BORDER,
        )
    return _description_factory


def reset_request_description_factory() -> None:
    """Reset the singleton (for testing)."""
    global _description_factory
    _description_factory = None
