"""Pydantic schemas for API request/response models."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field


# ---- Request schemas ----

class AccountIn(BaseModel):
    name: str = ""
    type: str
    balance: Decimal


class BudgetIn(BaseModel):
    category: str
    budgeted: Decimal
    spent: Decimal | None = Field(None, description="Omit to derive from this month's transactions")


class TransactionIn(BaseModel):
    amount: Decimal = Field(..., description="Positive = income, negative = spending")
    date: date
    category: str | None = None
    cleared: bool = True


class DebtPaymentIn(BaseModel):
    amount: Decimal
    date: date
    is_extra: bool = False
    days_late: int = Field(0, ge=0)


class DebtIn(BaseModel):
    type: str
    current_balance: Decimal
    monthly_payment: Decimal = Decimal("0")
    annual_rate_percent: Decimal = Decimal("0")
    original_balance: Decimal | None = None
    term_months: int | None = None
    origination_date: date | None = None
    in_collections: bool = False
    payments: list[DebtPaymentIn] = []


class SavingsContributionIn(BaseModel):
    amount: Decimal
    date: date


class SavingsGoalIn(BaseModel):
    type: str = "general"
    target: Decimal
    current: Decimal = Decimal("0")
    monthly_contribution: Decimal = Decimal("0")
    contributions: list[SavingsContributionIn] = []


class BillPaymentIn(BaseModel):
    due_date: date
    status: str


class SnapshotRequest(BaseModel):
    as_of: date = Field(..., description="Snapshot date; all windows are anchored here")
    monthly_income: Decimal = Decimal("0")
    accounts: list[AccountIn] = []
    budgets: list[BudgetIn] = []
    transactions: list[TransactionIn] = []
    debts: list[DebtIn] = []
    savings_goals: list[SavingsGoalIn] = []
    bill_payments: list[BillPaymentIn] = []


class ScoreCompareRequest(BaseModel):
    current: SnapshotRequest
    previous: SnapshotRequest


class LoanRequest(BaseModel):
    original_balance: Decimal
    annual_rate_percent: Decimal = Decimal("0")
    term_months: int


class AmortizationHealthRequest(BaseModel):
    original_balance: Decimal | None = None
    current_balance: Decimal
    annual_rate_percent: Decimal | None = None
    term_months: int | None = None
    origination_date: date | None = None
    today: date


class BudgetPaceRequest(BaseModel):
    spent: Decimal
    budgeted: Decimal
    today: date


# ---- Response schemas ----

class AmortizationPointResponse(BaseModel):
    month: int
    payment: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    balance_after: Decimal


class YearSummaryResponse(BaseModel):
    year: int
    principal: Decimal
    interest: Decimal
    payments: Decimal
    ending_balance: Decimal


class ScheduleResponse(BaseModel):
    monthly_payment: Decimal
    total_payments: Decimal
    total_interest: Decimal
    months: int
    points: list[AmortizationPointResponse]
    years: list[YearSummaryResponse]


class AmortizationHealthResponse(BaseModel):
    months_elapsed: int
    expected_balance: Decimal
    actual_balance: Decimal
    difference: Decimal
    months_ahead_or_behind: int
    status: str
    percent_ahead: Decimal
    expected_payoff_date: date
    projected_payoff_date: date | None = None


class SubComponentResponse(BaseModel):
    key: str
    label: str
    score: Decimal
    max_points: int
    percentage: Decimal
    detail: str


class PillarResponse(BaseModel):
    name: str
    score: Decimal
    max_points: int
    sub_components: list[SubComponentResponse]


class ScoreResponse(BaseModel):
    total_score: int
    level: int
    level_title: str
    confidence: float
    config_version: str
    pillars: list[PillarResponse]
    tips: list[str]


class ScoreChangeResponse(BaseModel):
    current: ScoreResponse
    previous: ScoreResponse
    change: int
    improved: list[str]
    declined: list[str]


class BudgetPaceResponse(BaseModel):
    burn_ratio: Decimal
    status: str
    projected_total: Decimal | None = None
    projected_overspend: Decimal | None = None
    is_over_pace: bool | None = None
    text: str | None = None
