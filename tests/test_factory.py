"""Tests for the backend composition root."""

from backend.factory import build_transaction_service, build_transactions_repository
from backend.repositories.transactions_repository import (
    InMemoryTransactionsRepository,
    SupabaseTransactionsRepository,
)


def test_build_repository_defaults_to_in_memory(monkeypatch) -> None:
    monkeypatch.delenv("TRANSACTIONS_STORE", raising=False)
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)

    assert isinstance(build_transactions_repository(), InMemoryTransactionsRepository)


def test_build_repository_uses_supabase_when_configured(monkeypatch) -> None:
    monkeypatch.delenv("TRANSACTIONS_STORE", raising=False)
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-role")

    assert isinstance(build_transactions_repository(), SupabaseTransactionsRepository)


def test_build_repository_falls_back_when_supabase_requested_but_missing(monkeypatch, caplog) -> None:
    monkeypatch.setenv("TRANSACTIONS_STORE", "supabase")
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)

    assert isinstance(build_transactions_repository(), InMemoryTransactionsRepository)
    assert "transactions_store_supabase_not_configured" in caplog.text


def test_build_transaction_service_wires_repository(monkeypatch) -> None:
    monkeypatch.setenv("TRANSACTIONS_STORE", "memory")

    service = build_transaction_service()

    assert isinstance(service.repository, InMemoryTransactionsRepository)
