"""Credential issuance service configuration constants.

Environment-based configuration, read once at import:
- REQUIRED: must be provided by the deployment (callback URL)
- CONFIGURABLE: defaults that can be overridden
- POLICY: implementation choices (token validity, QR rendering)
"""
import os
import tempfile
from pathlib import Path


# =============================================================================
# SERVICE
# =============================================================================

APP_ENV: str = os.getenv("CIS_APP_ENV", "dev")
SERVICE_SCHEME: str = os.getenv("CIS_SCHEME", "http")
SERVICE_HOST: str = os.getenv("CIS_HOST", "localhost")
SERVICE_PORT: int = int(os.getenv("CIS_PORT", "8002"))

API_VERSION: str = os.getenv("CIS_API_VERSION", "v1")
API_ROOT_PATH: str = f"/api/{API_VERSION}"

# Address the wallet posts its response to; embedded in every token
CALLBACK_URL: str | None = os.getenv("CIS_CALLBACK_URL")


# =============================================================================
# PERSISTENCE
# =============================================================================

def _get_data_dir() -> Path:
    """Determine data directory based on environment.

    Priority:
    1. CIS_DATA_DIR env var (explicit override)
    2. /data/credential-issuance if it exists (Docker volume mount)
    3. ~/.credential-issuance (local development)
    4. <tmp>/credential-issuance (container fallback when home unavailable)
    """
    env_path = os.getenv("CIS_DATA_DIR")
    if env_path:
        return Path(env_path)

    docker_path = Path("/data/credential-issuance")
    if docker_path.exists():
        return docker_path

    try:
        home_path = Path.home() / ".credential-issuance"
        home_path.mkdir(parents=True, exist_ok=True)
        return home_path
    except (OSError, PermissionError, RuntimeError):
        return Path(tempfile.gettempdir()) / "credential-issuance"


DATA_DIR: Path = _get_data_dir()


# =============================================================================
# ISSUER AGENT
# =============================================================================

AGENT_NAME: str = os.getenv("CIS_AGENT_NAME", "credential-issuance")
AGENT_ALIAS: str = os.getenv("CIS_AGENT_ALIAS", "issuer")
AGENT_PASSCODE_FILE: Path = Path(
    os.getenv("CIS_AGENT_PASSCODE_FILE", str(DATA_DIR / "passcode.txt"))
)

# Lifetime of minted interaction tokens
TOKEN_VALIDITY_SECONDS: int = int(os.getenv("CIS_TOKEN_VALIDITY", "3600"))


# =============================================================================
# CREDENTIAL REGISTRIES
# =============================================================================

_BUNDLED_DATA_DIR = Path(__file__).parent / "credential" / "data"

CLAIMS_METADATA_FILE: Path = Path(
    os.getenv("CIS_CLAIMS_METADATA_FILE", str(_BUNDLED_DATA_DIR / "claims_metadata.json"))
)
STATIC_OFFERS_FILE: Path = Path(
    os.getenv("CIS_STATIC_OFFERS_FILE", str(_BUNDLED_DATA_DIR / "static_offers.json"))
)


# =============================================================================
# QR RENDERING
# =============================================================================

# One of L, M, Q, H
QR_ERROR_CORRECTION: str = os.getenv("CIS_QR_ERROR_CORRECTION", "L").upper()
QR_BOX_SIZE: int = int(os.getenv("CIS_QR_BOX_SIZE", "10"))
QR_BORDER: int = int(os.getenv("CIS_QR_BORDER", "4"))


# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL: str = os.getenv("CIS_LOG_LEVEL", "INFO").upper()
LOG_DIR: str | None = os.getenv("CIS_LOG_DIR")


def validate_config() -> tuple[bool, str | None]:
    """Validate required configuration.

    Returns:
        Tuple of (is_valid, error_message). If is_valid is False,
        error_message contains the reason.
    """
    missing = []
    if not CALLBACK_URL:
        missing.append("CIS_CALLBACK_URL")
    if QR_ERROR_CORRECTION not in ("L", "M", "Q", "H"):
        return False, f"Invalid CIS_QR_ERROR_CORRECTION: {QR_ERROR_CORRECTION}"

    if missing:
        return False, f"Missing required config: {', '.join(missing)}"

    return True, None


def server_url() -> str:
    """Public base URL of this service."""
    return f"{SERVICE_SCHEME}://{SERVICE_HOST}:{SERVICE_PORT}"
