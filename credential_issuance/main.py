"""Credential issuance FastAPI application."""
import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from credential_issuance.api import credential, health
from credential_issuance.config import (
    LOG_DIR,
    LOG_LEVEL,
    server_url,
    validate_config,
)
from credential_issuance.core.logging import configure_logging
from credential_issuance.credential.metadata import get_claims_metadata_provider
from credential_issuance.credential.offer.static import get_static_offer_provider
from credential_issuance.interaction.pipeline import reset_descriptor_assembler

configure_logging(log_dir=LOG_DIR, log_level=LOG_LEVEL)
log = logging.getLogger("credential-issuance")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    from credential_issuance.agent.issuer import close_issuer_agent, get_issuer_agent

    log.info("Starting credential issuance service...")

    valid, error = validate_config()
    if not valid:
        log.error(error)
        raise RuntimeError(error)

    try:
        metadata = get_claims_metadata_provider()
        offers = get_static_offer_provider()
        log.info(
            f"Registries loaded: {len(metadata)} claims metadata types, "
            f"{len(offers)} catalog offers"
        )

        agent = await get_issuer_agent()
        log.info(f"Issuer agent ready: {agent.did}")
    except Exception as e:
        log.error(f"Failed to initialize service: {e}")
        raise

    log.info(f"Server started at {server_url()}")

    yield

    log.info("Shutting down credential issuance service...")
    reset_descriptor_assembler()
    await close_issuer_agent()
    log.info("Credential issuance service stopped")


app = FastAPI(
    title="Credential Issuance",
    version="0.1.0",
    description="Credential request and offer interaction descriptors",
    lifespan=lifespan,
)


@app.get("/version")
def version():
    """Return service version with commit link."""
    git_sha = os.getenv("GIT_SHA", "unknown")
    repo = os.getenv("GITHUB_REPOSITORY")

    result = {"git_sha": git_sha}
    if git_sha != "unknown":
        result["short_sha"] = git_sha[:7]
        if repo:
            result["github_url"] = f"https://github.com/{repo}/commit/{git_sha}"

    return result


# -----------------------------------------------------------------------------
# API Routers
# -----------------------------------------------------------------------------

app.include_router(health.router)
app.include_router(credential.router)


@app.middleware("http")
async def request_logging(request: Request, call_next):
    """Log all requests with timing."""
    start = time.time()
    response = await call_next(request)
    duration_ms = int((time.time() - start) * 1000)

    log.info(
        f"request_complete status={response.status_code} duration_ms={duration_ms}",
        extra={
            "route": request.url.path,
            "method": request.method,
            "status": response.status_code,
        },
    )
    return response


@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    """JSON 404 for unknown routes."""
    return JSONResponse(
        status_code=404,
        content={"detail": "Not found"}
    )
