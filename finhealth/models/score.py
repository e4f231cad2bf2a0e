"""Score inputs and results.

`SubComponent` field order is rendered as-is by the per-pillar progress bars,
so treat it as a public contract.
"""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class WeightedDebt:
    type: str
    balance: Decimal
    monthly_payment: Decimal
    in_collections: bool = False


@dataclass(frozen=True)
class BudgetUsage:
    budgeted: Decimal
    spent: Decimal


@dataclass(frozen=True)
class WealthContributions:
    cash_savings: Decimal = Decimal("0")
    retirement_401k: Decimal = Decimal("0")
    ira: Decimal = Decimal("0")
    investments: Decimal = Decimal("0")
    hsa: Decimal = Decimal("0")
    extra_debt_payments: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return (
            self.cash_savings + self.retirement_401k + self.ira
            + self.investments + self.hsa + self.extra_debt_payments
        )


@dataclass(frozen=True)
class ScoreInputs:
    """Aggregated monthly metrics derived from a FinancialSnapshot."""
    monthly_income: Decimal = Decimal("0")
    monthly_expenses: Decimal = Decimal("0")
    contributions: WealthContributions = field(default_factory=WealthContributions)

    liquid_savings: Decimal = Decimal("0")
    total_assets: Decimal = Decimal("0")

    current_debts: list[WeightedDebt] = field(default_factory=list)
    debts_at_window_start: list[WeightedDebt] = field(default_factory=list)

    # Payment history buckets
    paid_on_time: int = 0
    paid_late_1_30: int = 0
    paid_late_31_60: int = 0
    paid_late_61_plus: int = 0

    budgets: list[BudgetUsage] = field(default_factory=list)

    # Cash flow over the look-back window
    window_income: Decimal = Decimal("0")
    window_spending: Decimal = Decimal("0")

    # Engagement
    active_months: int = 0
    lookback_months: int = 3
    cleared_ratio: float = 0.0

    data_months: int = 0  # 0 = brand new, 4+ = full confidence


@dataclass
class SubComponent:
    key: str
    label: str
    score: Decimal
    max_points: int
    percentage: Decimal
    detail: str


@dataclass
class PillarScore:
    name: str
    score: Decimal
    max_points: int
    sub_components: list[SubComponent] = field(default_factory=list)


@dataclass
class ScoreResult:
    total_score: int
    pillars: list[PillarScore]
    level: int
    level_title: str
    confidence: float
    tips: list[str] = field(default_factory=list)
    config_version: str = ""

    def pillar(self, name: str) -> PillarScore:
        for p in self.pillars:
            if p.name == name:
                return p
        raise KeyError(name)

    def sub_component(self, key: str) -> SubComponent:
        for p in self.pillars:
            for sc in p.sub_components:
                if sc.key == key:
                    return sc
        raise KeyError(key)

    def to_dict(self) -> dict:
        return {
            "total_score": self.total_score,
            "level": self.level,
            "level_title": self.level_title,
            "confidence": self.confidence,
            "config_version": self.config_version,
            "pillars": [
                {
                    "name": p.name,
                    "score": float(p.score),
                    "max_points": p.max_points,
                    "sub_components": [
                        {
                            "key": sc.key,
                            "label": sc.label,
                            "score": float(sc.score),
                            "max_points": sc.max_points,
                            "percentage": float(sc.percentage),
                            "detail": sc.detail,
                        }
                        for sc in p.sub_components
                    ],
                }
                for p in self.pillars
            ],
            "tips": list(self.tips),
        }


@dataclass(frozen=True)
class ScoreChange:
    change: int
    improved: list[str]
    declined: list[str]
