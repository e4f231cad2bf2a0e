"""Reduce a FinancialSnapshot to the monthly metrics the scorer consumes.

All windows are anchored at `snapshot.as_of`; records dated after it are
ignored so historical snapshots score the same way every time.
"""

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date
from decimal import Decimal

from finhealth.engine.dates import add_months, month_start, shift_month_start
from finhealth.engine.numeric import ZERO, to_decimal
from finhealth.models.score import BudgetUsage, ScoreInputs, WealthContributions, WeightedDebt
from finhealth.models.snapshot import (
    CASH_GOAL_TYPES,
    CREDIT_ACCOUNT_TYPES,
    LIQUID_ACCOUNT_TYPES,
    LIQUID_GOAL_TYPES,
    Debt,
    FinancialSnapshot,
)

logger = logging.getLogger(__name__)

# Expenses floor when transaction history is thin
EXPENSE_FLOOR_INCOME_SHARE = Decimal("0.6")

BILL_STATUS_BUCKETS = {
    "on_time": "on_time",
    "late_1_30": "late_1_30",
    "late_31_60": "late_31_60",
    "late_61_plus": "late_61_plus",
    "missed": "late_61_plus",
}


def _late_bucket(days_late: int) -> str:
    if days_late <= 0:
        return "on_time"
    if days_late <= 30:
        return "late_1_30"
    if days_late <= 60:
        return "late_31_60"
    return "late_61_plus"


def _in_window(d: date, start: date, end: date) -> bool:
    return start <= d <= end


def _payments_in_window(debt: Debt, start: date, end: date) -> Decimal:
    return sum((to_decimal(p.amount) for p in debt.payments if _in_window(p.date, start, end)), ZERO)


def _monthly_income(
    snapshot: FinancialSnapshot, this_month_income: Decimal, window_income: Decimal, lookback: int
) -> Decimal:
    """This month's income transactions, else the window average, else the profile figure."""
    if this_month_income > 0:
        return this_month_income
    if window_income > 0:
        logger.debug("No income yet this month, using %d-month average", lookback)
        return window_income / lookback
    logger.debug("No income transactions, falling back to profile income")
    return to_decimal(snapshot.monthly_income)


def build_score_inputs(snapshot: FinancialSnapshot, lookback_months: int = 3) -> ScoreInputs:
    """Aggregate a snapshot into ScoreInputs."""
    lookback = max(1, lookback_months)
    as_of = snapshot.as_of
    current_month = month_start(as_of)
    window_start = add_months(as_of, -lookback)

    transactions = [
        replace(t, amount=to_decimal(t.amount)) for t in snapshot.transactions if t.date <= as_of
    ]
    window_txns = [t for t in transactions if t.date >= window_start]
    month_txns = [t for t in transactions if t.date >= current_month]

    # Income & expenses
    this_month_income = sum((t.amount for t in month_txns if t.amount > 0), ZERO)
    window_income = sum((t.amount for t in window_txns if t.amount > 0), ZERO)
    window_spending = sum((-t.amount for t in window_txns if t.amount < 0), ZERO)

    monthly_income = _monthly_income(snapshot, this_month_income, window_income, lookback)

    txn_expenses = window_spending / lookback
    minimum_payments = sum((to_decimal(d.monthly_payment) for d in snapshot.debts), ZERO)
    if txn_expenses > minimum_payments:
        monthly_expenses = txn_expenses
    else:
        monthly_expenses = max(minimum_payments, monthly_income * EXPENSE_FLOOR_INCOME_SHARE)

    # Wealth building: declared goal contributions vs what was actually logged
    by_type: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for g in snapshot.savings_goals:
        by_type[g.type or "general"] += to_decimal(g.monthly_contribution)
    logged = sum(
        (to_decimal(c.amount) for g in snapshot.savings_goals for c in g.contributions
         if _in_window(c.date, window_start, as_of)),
        ZERO,
    )
    extra_debt = sum(
        (to_decimal(p.amount) for d in snapshot.debts for p in d.payments
         if p.is_extra and _in_window(p.date, window_start, as_of)),
        ZERO,
    )
    contributions = WealthContributions(
        cash_savings=max(sum((by_type[t] for t in CASH_GOAL_TYPES), ZERO), logged / lookback),
        retirement_401k=by_type["retirement_401k"],
        ira=by_type["ira"],
        investments=by_type["brokerage"],
        hsa=by_type["hsa"] + by_type["education_529"],
        extra_debt_payments=extra_debt / lookback,
    )

    # Debts now and at the start of the window (balance + payments made since)
    current_debts = [
        WeightedDebt(d.type, to_decimal(d.current_balance), to_decimal(d.monthly_payment), d.in_collections)
        for d in snapshot.debts
    ]
    earlier_debts = [
        WeightedDebt(
            d.type,
            to_decimal(d.current_balance) + _payments_in_window(d, window_start, as_of),
            to_decimal(d.monthly_payment),
            d.in_collections,
        )
        for d in snapshot.debts
    ]

    # Payment history: bills plus debt payments
    buckets: dict[str, int] = defaultdict(int)
    for bill in snapshot.bill_payments:
        if bill.due_date > as_of:
            continue
        bucket = BILL_STATUS_BUCKETS.get(bill.status)
        if bucket is None:
            logger.debug("Ignoring bill payment with unknown status %r", bill.status)
            continue
        buckets[bucket] += 1
    for d in snapshot.debts:
        for p in d.payments:
            if p.date <= as_of:
                buckets[_late_bucket(p.days_late)] += 1

    # Budgets: explicit spend, else this month's category spending
    spent_by_category: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for t in month_txns:
        if t.amount < 0 and t.category:
            spent_by_category[t.category] += -t.amount
    budgets = [
        BudgetUsage(
            budgeted=to_decimal(b.budgeted),
            spent=to_decimal(b.spent) if b.spent is not None else spent_by_category[b.category],
        )
        for b in snapshot.budgets
        if to_decimal(b.budgeted) > 0
    ]

    # Balances
    liquid_savings = (
        sum((to_decimal(g.current) for g in snapshot.savings_goals if g.type in LIQUID_GOAL_TYPES), ZERO)
        + sum((to_decimal(a.balance) for a in snapshot.accounts if a.type in LIQUID_ACCOUNT_TYPES), ZERO)
    )
    total_assets = (
        sum((to_decimal(a.balance) for a in snapshot.accounts if a.type not in CREDIT_ACCOUNT_TYPES), ZERO)
        + sum((to_decimal(g.current) for g in snapshot.savings_goals), ZERO)
    )

    # Engagement: months with any logged activity, share of cleared transactions
    active_months = sum(
        1 for offset in range(lookback)
        if any(month_start(t.date) == shift_month_start(as_of, -offset) for t in transactions)
    )
    cleared_ratio = (
        sum(1 for t in window_txns if t.cleared) / len(window_txns) if window_txns else 0.0
    )

    data_months = 0
    if transactions:
        oldest = min(t.date for t in transactions)
        data_months = max(1, (as_of - oldest).days // 30)

    return ScoreInputs(
        monthly_income=monthly_income,
        monthly_expenses=monthly_expenses,
        contributions=contributions,
        liquid_savings=liquid_savings,
        total_assets=total_assets,
        current_debts=current_debts,
        debts_at_window_start=earlier_debts,
        paid_on_time=buckets["on_time"],
        paid_late_1_30=buckets["late_1_30"],
        paid_late_31_60=buckets["late_31_60"],
        paid_late_61_plus=buckets["late_61_plus"],
        budgets=budgets,
        window_income=window_income,
        window_spending=window_spending,
        active_months=active_months,
        lookback_months=lookback,
        cleared_ratio=cleared_ratio,
        data_months=data_months,
    )
