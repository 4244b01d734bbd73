"""Composition root for backend services."""

from __future__ import annotations

import logging

from backend.db.supabase_client import SupabaseClient, SupabaseSettings
from backend.repositories.transactions_repository import (
    InMemoryTransactionsRepository,
    SupabaseTransactionsRepository,
    TransactionsRepository,
)
from backend.services.transaction_service import TransactionService
from shared import config


logger = logging.getLogger(__name__)


def build_transactions_repository() -> TransactionsRepository:
    """Build the transaction store selected by configuration.

    Falls back to the in-memory store when Supabase is requested but its URL
    or service role key is missing.
    """

    if config.transactions_store() == "supabase":
        supabase_url = config.supabase_url()
        supabase_key = config.supabase_service_role_key()
        if supabase_url and supabase_key:
            client = SupabaseClient(
                settings=SupabaseSettings(url=supabase_url, service_role_key=supabase_key)
            )
            logger.info("transactions_store=supabase table=%s", config.transactions_table())
            return SupabaseTransactionsRepository(client=client, table=config.transactions_table())

        logger.warning("transactions_store_supabase_not_configured; using in-memory store")

    logger.info("transactions_store=memory")
    return InMemoryTransactionsRepository()


def build_transaction_service() -> TransactionService:
    """Build the transaction service with its configured repository."""

    return TransactionService(repository=build_transactions_repository())
