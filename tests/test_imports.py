from backend.main import create_backend_services
from shared.models import MonthlyTotal, TransactionPayload


def test_imports_succeed(monkeypatch) -> None:
    monkeypatch.setenv("TRANSACTIONS_STORE", "memory")

    services = create_backend_services()

    assert "transaction_service" in services
    assert MonthlyTotal(month_label="Jan", total=1.5).total == 1.5
    assert TransactionPayload(id="ignored", amount="3").amount == "3"
