"""Unit tests for Supabase client query encoding and error normalization."""

from __future__ import annotations

import json
from io import BytesIO
from urllib.error import HTTPError, URLError

import pytest

from backend.db.supabase_client import SupabaseClient, SupabaseSettings


def _build_client() -> SupabaseClient:
    return SupabaseClient(
        SupabaseSettings(url="https://example.supabase.co", service_role_key="service-role")
    )


class _Response:
    def __init__(self, body: bytes = b"[]", headers: dict[str, str] | None = None) -> None:
        self._body = body
        self.headers = headers or {}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def read(self) -> bytes:
        return self._body


def test_get_rows_uses_doseq_for_repeated_query_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _build_client()

    def _fake_urlopen(request):
        assert "date=gte.2024-01-01" in request.full_url
        assert "date=lte.2024-01-31" in request.full_url
        return _Response()

    monkeypatch.setattr("backend.db.supabase_client.urlopen", _fake_urlopen)

    rows, total = client.get_rows(
        table="transactions",
        query=[("date", "gte.2024-01-01"), ("date", "lte.2024-01-31")],
        with_count=False,
    )

    assert rows == []
    assert total is None


def test_get_rows_parses_exact_count(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _build_client()

    def _fake_urlopen(request):
        assert request.get_header("Prefer") == "count=exact"
        return _Response(b'[{"id": "a"}]', headers={"content-range": "0-0/7"})

    monkeypatch.setattr("backend.db.supabase_client.urlopen", _fake_urlopen)

    rows, total = client.get_rows(table="transactions", query={"select": "id"}, with_count=True)

    assert rows == [{"id": "a"}]
    assert total == 7


def test_get_rows_includes_status_and_body_on_http_error(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _build_client()

    def _raise_http_error(_request):
        raise HTTPError(
            url="https://example.supabase.co/rest/v1/transactions",
            code=400,
            msg="Bad Request",
            hdrs=None,
            fp=BytesIO(b"Bad Request from Supabase"),
        )

    monkeypatch.setattr("backend.db.supabase_client.urlopen", _raise_http_error)

    with pytest.raises(RuntimeError, match="status 400") as error:
        client.get_rows(table="transactions", query={"select": "*"}, with_count=False)

    assert "Bad Request from Supabase" in str(error.value)


def test_unreachable_host_raises_runtime_error(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _build_client()

    def _raise_url_error(_request):
        raise URLError("Connection refused")

    monkeypatch.setattr("backend.db.supabase_client.urlopen", _raise_url_error)

    with pytest.raises(RuntimeError, match="Connection refused"):
        client.delete_rows(table="transactions", query={"id": "eq.abc"})


def test_post_rows_sends_json_body(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _build_client()

    def _fake_urlopen(request):
        assert request.get_method() == "POST"
        assert request.full_url == "https://example.supabase.co/rest/v1/transactions?select=id"
        assert request.get_header("Prefer") == "return=representation"
        assert request.get_header("Content-type") == "application/json"
        assert json.loads(request.data) == {"description": "Coffee", "amount": -3.5}
        return _Response(b'[{"id": "abc"}]')

    monkeypatch.setattr("backend.db.supabase_client.urlopen", _fake_urlopen)

    rows = client.post_rows(
        table="transactions",
        payload={"description": "Coffee", "amount": -3.5},
        query={"select": "id"},
    )

    assert rows == [{"id": "abc"}]


def test_patch_rows_uses_patch_method(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _build_client()

    def _fake_urlopen(request):
        assert request.get_method() == "PATCH"
        assert request.full_url == "https://example.supabase.co/rest/v1/transactions?id=eq.abc"
        return _Response()

    monkeypatch.setattr("backend.db.supabase_client.urlopen", _fake_urlopen)

    assert client.patch_rows(table="transactions", query={"id": "eq.abc"}, payload={"amount": 1}) == []


def test_delete_rows_uses_delete_method_and_query_params(monkeypatch: pytest.MonkeyPatch) -> None:
    client = _build_client()

    def _fake_urlopen(request):
        assert request.get_method() == "DELETE"
        assert request.full_url == (
            "https://example.supabase.co/rest/v1/transactions?"
            "id=eq.00000000-0000-0000-0000-000000000000"
        )
        assert request.data is None
        return _Response(b"")

    monkeypatch.setattr("backend.db.supabase_client.urlopen", _fake_urlopen)

    rows = client.delete_rows(
        table="transactions",
        query={"id": "eq.00000000-0000-0000-0000-000000000000"},
    )

    assert rows == []
