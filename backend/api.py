"""FastAPI entrypoint for transaction HTTP endpoints."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse

from backend.errors import NotFoundError, PersistenceError, ValidationError
from backend.factory import build_transaction_service
from backend.services.transaction_service import TransactionService
from shared import config as _config
from shared.models import TransactionPayload


logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_transaction_service() -> TransactionService:
    """Create and cache the transaction service once per process."""

    return build_transaction_service()


app = FastAPI(title="Personal Finance Tracker API")

ALLOW_ORIGINS = _config.cors_allow_origins()


@app.middleware("http")
async def log_http_requests(request: Request, call_next):
    """Log incoming requests, HTTP status codes and unexpected errors."""

    logger.info("http_request_received method=%s path=%s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "http_request_failed method=%s path=%s",
            request.method,
            request.url.path,
        )
        raise

    logger.info(
        "http_response_sent method=%s path=%s status_code=%s",
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info("cors_allow_origins=%s", ALLOW_ORIGINS)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 like field validation failures."""

    logger.info(
        "request_body_invalid method=%s path=%s errors=%s",
        request.method,
        request.url.path,
        len(exc.errors()),
    )
    return JSONResponse(status_code=400, content={"detail": "Invalid request body"})


@app.exception_handler(Exception)
async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for unhandled exceptions."""

    logger.exception(
        "unhandled_exception method=%s path=%s exception_type=%s message=%s",
        request.method,
        request.url.path,
        type(exc).__name__,
        str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.get("/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""

    return {"status": "ok"}


@app.post("/api/transactions", status_code=201)
def create_transaction(payload: TransactionPayload) -> Any:
    """Validate and store a new transaction."""

    try:
        transaction = get_transaction_service().create_transaction(
            description=payload.description,
            amount=payload.amount,
            date=payload.date,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PersistenceError as exc:
        logger.exception("transaction_create_failed")
        raise HTTPException(status_code=500, detail="Server error") from exc
    return jsonable_encoder(transaction)


@app.get("/api/transactions")
def list_transactions() -> Any:
    """Return every transaction, most recent first."""

    try:
        transactions = get_transaction_service().list_transactions()
    except PersistenceError as exc:
        logger.exception("transaction_list_failed")
        raise HTTPException(status_code=500, detail="Server error") from exc
    return jsonable_encoder(transactions)


@app.put("/api/transactions/{transaction_id}")
def update_transaction(transaction_id: str, payload: TransactionPayload) -> Any:
    """Replace description, amount and date of a transaction."""

    try:
        transaction = get_transaction_service().update_transaction(
            transaction_id,
            description=payload.description,
            amount=payload.amount,
            date=payload.date,
        )
    except NotFoundError as exc:
        logger.warning("transaction_update_not_found id=%s", transaction_id)
        raise HTTPException(status_code=500, detail="Failed to update transaction") from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PersistenceError as exc:
        logger.exception("transaction_update_failed id=%s", transaction_id)
        raise HTTPException(status_code=500, detail="Failed to update transaction") from exc
    return jsonable_encoder(transaction)


@app.delete("/api/transactions/{transaction_id}")
def delete_transaction(transaction_id: str) -> dict[str, str]:
    """Delete a transaction by id."""

    try:
        get_transaction_service().delete_transaction(transaction_id)
    except NotFoundError as exc:
        logger.warning("transaction_delete_not_found id=%s", transaction_id)
        raise HTTPException(status_code=500, detail="Failed to delete") from exc
    except PersistenceError as exc:
        logger.exception("transaction_delete_failed id=%s", transaction_id)
        raise HTTPException(status_code=500, detail="Failed to delete") from exc
    return {"message": "Transaction deleted"}


@app.get("/api/dashboard")
def get_dashboard() -> Any:
    """Return summary figures, monthly totals and the listing they came from."""

    try:
        result = get_transaction_service().get_dashboard()
    except PersistenceError as exc:
        logger.exception("dashboard_failed")
        raise HTTPException(status_code=500, detail="Server error") from exc
    return jsonable_encoder(result)
