"""HTTP API routers and models."""
