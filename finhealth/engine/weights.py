"""Versioned scoring table: pillar budgets, curve constants, debt risk weights, levels.

Changing a weight or threshold means shipping a new table version, not
editing the scorer. A JSON file with the same shape can replace the
built-in table (see `load_scoring_config`).

Debt multipliers are derived from interest-rate risk (30%), asset backing
(40%) and delinquency risk (30%).
"""

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator


class ScoringConfigError(ValueError):
    """Scoring table file is unreadable or fails validation."""


class LevelThreshold(BaseModel):
    min_score: int
    level: int
    title: str


class SubComponentSpec(BaseModel):
    key: str
    label: str
    max_points: int = Field(gt=0)
    tip: str


class PillarSpec(BaseModel):
    name: str
    sub_components: list[SubComponentSpec]

    @property
    def max_points(self) -> int:
        return sum(sc.max_points for sc in self.sub_components)


class CurveConstants(BaseModel):
    wealth_rate_target: float = 0.20  # Savings rate earning full points
    debt_velocity_scale_pct: float = 10.0  # tanh scale on 3-month % change
    new_debt_change_pct: float = 100.0  # Change assumed when debt appears from zero
    cash_flow_margin_scale: float = 0.15
    late_penalty_1_30: float = 0.5
    late_penalty_31_60: float = 1.0
    late_penalty_61_plus: float = 1.5
    overspend_decay_pct: float = 40.0
    engagement_activity_weight: float = 0.7
    emergency_months_target: float = 6.0
    emergency_expense_floor: float = 500.0  # Monthly expenses assumed when fewer are recorded
    dti_zero_point: float = 0.60  # Weighted DTI at which the component bottoms out
    net_worth_unit: float = 1_000.0
    net_worth_target: float = 250_000.0
    cold_start_base: float = 0.5
    cold_start_per_month: float = 0.15
    full_confidence_months: int = 4
    tip_threshold_pct: float = 90.0
    max_tips: int = 3


class ScoringConfig(BaseModel):
    version: str
    pillars: list[PillarSpec]
    curves: CurveConstants = Field(default_factory=CurveConstants)
    debt_multipliers: dict[str, float]
    default_debt_multiplier: float = 1.0
    collections_penalty: float = 1.5
    debt_type_aliases: dict[str, str] = Field(default_factory=dict)
    levels: list[LevelThreshold]
    all_clear_tip: str = "You're doing amazing! Keep up the great work"

    @field_validator("levels")
    @classmethod
    def _levels_descending(cls, levels: list[LevelThreshold]) -> list[LevelThreshold]:
        if not levels:
            raise ValueError("level table is empty")
        mins = [lv.min_score for lv in levels]
        if any(a <= b for a, b in zip(mins, mins[1:])):
            raise ValueError("level thresholds must be strictly descending")
        if mins[-1] > 0:
            raise ValueError("lowest level must start at 0")
        return levels

    @model_validator(mode="after")
    def _total_is_1000(self) -> "ScoringConfig":
        total = sum(p.max_points for p in self.pillars)
        if total != 1000:
            raise ValueError(f"pillar max points must sum to 1000, got {total}")
        return self

    @property
    def max_total(self) -> int:
        return sum(p.max_points for p in self.pillars)

    def debt_multiplier(self, debt_type: str, in_collections: bool = False) -> float:
        normalized = self.debt_type_aliases.get(debt_type, debt_type)
        multiplier = self.debt_multipliers.get(normalized, self.default_debt_multiplier)
        if in_collections:
            multiplier *= self.collections_penalty
        return multiplier

    def level_for(self, total: int) -> LevelThreshold:
        for lv in self.levels:
            if total >= lv.min_score:
                return lv
        return self.levels[-1]


DEFAULT_SCORING_CONFIG = ScoringConfig(
    version="2.0",
    pillars=[
        PillarSpec(name="trajectory", sub_components=[
            SubComponentSpec(
                key="wealth_building", label="Wealth Building", max_points=150,
                tip="Increase your savings rate - even 1% more makes a difference over time",
            ),
            SubComponentSpec(
                key="debt_velocity", label="Debt Progress", max_points=125,
                tip="Focus extra payments on highest-interest debt first (avalanche method)",
            ),
            SubComponentSpec(
                key="cash_flow_trend", label="Cash Flow", max_points=75,
                tip="Aim to spend less than you earn each month, then automate the difference",
            ),
        ]),
        PillarSpec(name="behavior", sub_components=[
            SubComponentSpec(
                key="payment_consistency", label="Payment History", max_points=175,
                tip="Set up autopay for all recurring bills - never miss a payment",
            ),
            SubComponentSpec(
                key="budget_discipline", label="Budget Discipline", max_points=125,
                tip="Review overspent categories - can you trim or reallocate from underspent ones?",
            ),
            SubComponentSpec(
                key="engagement", label="Tracking Consistency", max_points=50,
                tip="Log and review transactions every week so nothing slips through",
            ),
        ]),
        PillarSpec(name="position", sub_components=[
            SubComponentSpec(
                key="emergency_buffer", label="Emergency Fund", max_points=125,
                tip="Build your emergency fund - start with $1,000, then target 3-4 months of expenses",
            ),
            SubComponentSpec(
                key="debt_to_income", label="Debt-to-Income", max_points=100,
                tip="Reduce debt burden - consider consolidating high-interest debts",
            ),
            SubComponentSpec(
                key="net_worth", label="Net Worth", max_points=75,
                tip="Grow assets faster than liabilities - every dollar of net worth compounds",
            ),
        ]),
    ],
    debt_multipliers={
        "payday": 2.5,           # 400%+ APR, high reborrow rate
        "credit_card": 1.5,      # ~24% APR, unsecured
        "bnpl": 1.3,
        "personal": 1.2,
        "auto": 0.7,             # Depreciating but essential asset
        "student": 0.5,          # Federal protections, lower rates
        "medical": 0.4,          # Involuntary
        "mortgage": 0.3,         # Asset-building, lowest default rate
        "zero_pct": 0.2,
        "secured": 0.1,          # Collateral covers it
        "cc_paid_monthly": 0.05,  # Paid in full each month
    },
    debt_type_aliases={
        "heloc": "mortgage",
        "business": "personal",
        "other": "personal",
    },
    levels=[
        LevelThreshold(min_score=900, level=5, title="Financial Freedom"),
        LevelThreshold(min_score=750, level=4, title="Wealth Builder"),
        LevelThreshold(min_score=600, level=3, title="Solid Ground"),
        LevelThreshold(min_score=400, level=2, title="Foundation"),
        LevelThreshold(min_score=200, level=1, title="Getting Started"),
        LevelThreshold(min_score=0, level=0, title="Beginning Journey"),
    ],
)


def load_scoring_config(path: str | Path) -> ScoringConfig:
    """Read a scoring table from JSON."""
    try:
        raw = Path(path).read_text(encoding="utf-8")
        return ScoringConfig.model_validate(json.loads(raw))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise ScoringConfigError(f"Invalid scoring config {path}: {e}") from e

