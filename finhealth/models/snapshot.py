"""Point-in-time financial snapshot consumed by the scorer.

Assembled by the data-access layer; the scorer never queries storage itself.
Sign convention for transactions: positive = income, negative = spending.
Money fields are typed Decimal but int and float values are accepted;
aggregation coerces them with `to_decimal`.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

LIQUID_ACCOUNT_TYPES = frozenset({"checking", "savings", "money_market", "cash"})
CREDIT_ACCOUNT_TYPES = frozenset({"credit", "credit_card", "loan"})

CASH_GOAL_TYPES = frozenset({"emergency", "general", "custom"})
LIQUID_GOAL_TYPES = frozenset({"emergency", "general", "custom", "hsa"})


@dataclass(frozen=True)
class Account:
    name: str
    type: str  # checking / savings / money_market / cash / investment / retirement / ...
    balance: Decimal


@dataclass(frozen=True)
class Budget:
    category: str
    budgeted: Decimal
    spent: Decimal | None = None  # None = derive from this month's transactions


@dataclass(frozen=True)
class Transaction:
    amount: Decimal
    date: date
    category: str | None = None
    cleared: bool = True


@dataclass(frozen=True)
class DebtPayment:
    amount: Decimal
    date: date
    is_extra: bool = False  # Above the minimum payment
    days_late: int = 0


@dataclass(frozen=True)
class Debt:
    type: str
    current_balance: Decimal
    monthly_payment: Decimal = Decimal("0")
    annual_rate_percent: Decimal = Decimal("0")
    original_balance: Decimal | None = None
    term_months: int | None = None
    origination_date: date | None = None
    in_collections: bool = False
    payments: list[DebtPayment] = field(default_factory=list)


@dataclass(frozen=True)
class SavingsContribution:
    amount: Decimal
    date: date


@dataclass(frozen=True)
class SavingsGoal:
    type: str  # emergency / general / custom / retirement_401k / ira / brokerage / hsa / education_529
    target: Decimal
    current: Decimal = Decimal("0")
    monthly_contribution: Decimal = Decimal("0")
    contributions: list[SavingsContribution] = field(default_factory=list)


@dataclass(frozen=True)
class BillPayment:
    due_date: date
    status: str  # on_time / late_1_30 / late_31_60 / late_61_plus / missed


@dataclass(frozen=True)
class FinancialSnapshot:
    as_of: date
    monthly_income: Decimal = Decimal("0")  # Profile-declared; fallback only
    accounts: list[Account] = field(default_factory=list)
    budgets: list[Budget] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    debts: list[Debt] = field(default_factory=list)
    savings_goals: list[SavingsGoal] = field(default_factory=list)
    bill_payments: list[BillPayment] = field(default_factory=list)
