"""Canonical snapshots used across engine tests.

Healthy: $6K/month income, 20% saved, mortgage only, 7 months of cash.
Struggling: $3K/month income, overspending, credit card + payday debt, late payments.
Both are taken on 2024-06-15.
"""

from datetime import date
from decimal import Decimal

import pytest

from finhealth.models.snapshot import (
    Account,
    BillPayment,
    Budget,
    Debt,
    DebtPayment,
    FinancialSnapshot,
    SavingsGoal,
    Transaction,
)

AS_OF = date(2024, 6, 15)


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def healthy_snapshot() -> FinancialSnapshot:
    transactions = []
    for month in range(1, 7):
        transactions.append(Transaction(Decimal("6000"), date(2024, month, 1), "salary"))
        transactions.append(Transaction(Decimal("-3500"), date(2024, month, 5), "living"))

    mortgage = Debt(
        type="mortgage",
        current_balance=Decimal("250000"),
        monthly_payment=Decimal("1500"),
        annual_rate_percent=Decimal("6.5"),
        payments=[
            DebtPayment(Decimal("1500"), date(2024, 4, 10)),
            DebtPayment(Decimal("1500"), date(2024, 5, 10)),
            DebtPayment(Decimal("1500"), date(2024, 6, 10)),
        ],
    )

    return FinancialSnapshot(
        as_of=AS_OF,
        monthly_income=Decimal("6000"),
        accounts=[
            Account("Checking", "checking", Decimal("5000")),
            Account("Savings", "savings", Decimal("20000")),
            Account("Brokerage", "investment", Decimal("50000")),
        ],
        budgets=[Budget("groceries", Decimal("600"), Decimal("450"))],
        transactions=transactions,
        debts=[mortgage],
        savings_goals=[
            SavingsGoal("retirement_401k", Decimal("500000"), Decimal("40000"), Decimal("800")),
            SavingsGoal("emergency", Decimal("21000"), Decimal("0"), Decimal("400")),
        ],
        bill_payments=[BillPayment(date(2024, month, 1), "on_time") for month in range(1, 7)],
    )


@pytest.fixture
def struggling_snapshot() -> FinancialSnapshot:
    transactions = []
    for month in range(1, 7):
        transactions.append(Transaction(Decimal("3000"), date(2024, month, 1), "salary"))
        transactions.append(Transaction(Decimal("-3400"), date(2024, month, 5), "living"))

    credit_card = Debt(
        type="credit_card",
        current_balance=Decimal("15000"),
        monthly_payment=Decimal("450"),
        annual_rate_percent=Decimal("24"),
        payments=[
            DebtPayment(Decimal("450"), date(2024, 4, 10)),
            DebtPayment(Decimal("450"), date(2024, 5, 10)),
            DebtPayment(Decimal("450"), date(2024, 6, 10)),
        ],
    )
    payday = Debt(
        type="payday",
        current_balance=Decimal("1000"),
        monthly_payment=Decimal("200"),
        payments=[
            DebtPayment(Decimal("200"), date(2024, 5, 12), days_late=45),
            DebtPayment(Decimal("200"), date(2024, 6, 12), days_late=45),
        ],
    )

    return FinancialSnapshot(
        as_of=AS_OF,
        monthly_income=Decimal("3000"),
        accounts=[Account("Checking", "checking", Decimal("200"))],
        budgets=[Budget("dining", Decimal("200"), Decimal("400"))],
        transactions=transactions,
        debts=[credit_card, payday],
        bill_payments=[
            BillPayment(date(2024, 5, 1), "missed"),
            BillPayment(date(2024, 6, 1), "missed"),
        ],
    )
