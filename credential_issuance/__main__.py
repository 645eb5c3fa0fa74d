"""Run the service: ``python -m credential_issuance``."""
import uvicorn

from credential_issuance.config import SERVICE_PORT


def main() -> None:
    uvicorn.run("credential_issuance.main:app", host="0.0.0.0", port=SERVICE_PORT)


if __name__ == "__main__":
    main()
