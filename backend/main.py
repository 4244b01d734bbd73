"""Backend entrypoint."""

from __future__ import annotations

import logging

from backend.factory import build_transaction_service
from shared import config


def create_backend_services() -> dict[str, object]:
    """Factory for backend service objects used by API or local integrations."""
    return {"transaction_service": build_transaction_service()}


def run() -> None:
    """Serve the HTTP API with uvicorn."""

    import uvicorn

    logging.basicConfig(level=config.log_level())
    port = int(config.get_env("PORT", "8000") or "8000")
    uvicorn.run("backend.api:app", host="0.0.0.0", port=port, log_level=config.log_level().lower())


if __name__ == "__main__":
    run()
