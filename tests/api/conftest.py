import pytest
from fastapi.testclient import TestClient

from finhealth.api.app import create_app
from finhealth.api.cache import MemoryCache


@pytest.fixture
def cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def client(cache: MemoryCache) -> TestClient:
    return TestClient(create_app(cache=cache))


@pytest.fixture
def snapshot_payload() -> dict:
    """The healthy profile from tests/conftest.py as a request body."""
    transactions = []
    for month in range(1, 7):
        transactions.append({"amount": "6000", "date": f"2024-{month:02d}-01", "category": "salary"})
        transactions.append({"amount": "-3500", "date": f"2024-{month:02d}-05", "category": "living"})
    return {
        "as_of": "2024-06-15",
        "monthly_income": "6000",
        "accounts": [
            {"name": "Checking", "type": "checking", "balance": "5000"},
            {"name": "Savings", "type": "savings", "balance": "20000"},
            {"name": "Brokerage", "type": "investment", "balance": "50000"},
        ],
        "budgets": [{"category": "groceries", "budgeted": "600", "spent": "450"}],
        "transactions": transactions,
        "debts": [
            {
                "type": "mortgage",
                "current_balance": "250000",
                "monthly_payment": "1500",
                "annual_rate_percent": "6.5",
                "payments": [
                    {"amount": "1500", "date": "2024-04-10"},
                    {"amount": "1500", "date": "2024-05-10"},
                    {"amount": "1500", "date": "2024-06-10"},
                ],
            }
        ],
        "savings_goals": [
            {"type": "retirement_401k", "target": "500000", "current": "40000", "monthly_contribution": "800"},
            {"type": "emergency", "target": "21000", "current": "0", "monthly_contribution": "400"},
        ],
        "bill_payments": [{"due_date": f"2024-{m:02d}-01", "status": "on_time"} for m in range(1, 7)],
    }
