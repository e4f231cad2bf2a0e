"""Tests for the financial health scorer."""

from decimal import Decimal

import pytest

from finhealth.engine.scorer import (
    behavior_confidence,
    calculate_financial_health_score,
    compare_scores,
    score_inputs,
    weighted_debt,
)
from finhealth.engine.weights import DEFAULT_SCORING_CONFIG, CurveConstants
from finhealth.models.score import BudgetUsage, ScoreInputs, WealthContributions, WeightedDebt
from finhealth.models.snapshot import Account, FinancialSnapshot


def _dti_score(debt_type: str) -> Decimal:
    inputs = ScoreInputs(
        monthly_income=Decimal("5000"),
        current_debts=[WeightedDebt(debt_type, Decimal("20000"), Decimal("1000"))],
        data_months=6,
    )
    return score_inputs(inputs).sub_component("debt_to_income").score


class TestScoreShape:
    def test_bounds(self, healthy_snapshot, struggling_snapshot):
        for snapshot in (healthy_snapshot, struggling_snapshot):
            result = calculate_financial_health_score(snapshot)
            assert 0 <= result.total_score <= 1000
            for pillar in result.pillars:
                assert Decimal("0") <= pillar.score <= pillar.max_points
                for sc in pillar.sub_components:
                    assert Decimal("0") <= sc.score <= sc.max_points
                    assert Decimal("0") <= sc.percentage <= Decimal("100")

    def test_pillar_layout(self, healthy_snapshot):
        result = calculate_financial_health_score(healthy_snapshot)
        assert [p.name for p in result.pillars] == ["trajectory", "behavior", "position"]
        assert [p.max_points for p in result.pillars] == [350, 350, 300]
        assert [sc.key for sc in result.pillar("behavior").sub_components] == [
            "payment_consistency",
            "budget_discipline",
            "engagement",
        ]

    def test_pillar_score_is_sum_of_parts(self, struggling_snapshot):
        result = calculate_financial_health_score(struggling_snapshot)
        for pillar in result.pillars:
            assert pillar.score == sum(sc.score for sc in pillar.sub_components)

    def test_deterministic(self, healthy_snapshot):
        first = calculate_financial_health_score(healthy_snapshot)
        second = calculate_financial_health_score(healthy_snapshot)
        assert first.to_dict() == second.to_dict()

    def test_config_version(self, healthy_snapshot):
        assert calculate_financial_health_score(healthy_snapshot).config_version == "2.0"

    def test_unknown_pillar(self, healthy_snapshot):
        result = calculate_financial_health_score(healthy_snapshot)
        with pytest.raises(KeyError):
            result.pillar("luck")


class TestCanonicalSnapshots:
    def test_healthy_scores_high(self, healthy_snapshot):
        result = calculate_financial_health_score(healthy_snapshot)
        assert result.total_score >= 750
        assert result.level >= 4
        assert result.confidence == 1.0

    def test_healthy_full_marks(self, healthy_snapshot):
        result = calculate_financial_health_score(healthy_snapshot)
        assert result.sub_component("wealth_building").score == Decimal("150.0")
        assert result.sub_component("payment_consistency").score == Decimal("175.0")
        assert result.sub_component("emergency_buffer").score == Decimal("125.0")

    def test_struggling_scores_lower(self, healthy_snapshot, struggling_snapshot):
        healthy = calculate_financial_health_score(healthy_snapshot)
        struggling = calculate_financial_health_score(struggling_snapshot)
        assert struggling.total_score < healthy.total_score
        for name in ("trajectory", "behavior", "position"):
            assert struggling.pillar(name).score < healthy.pillar(name).score

    def test_struggling_gets_tips(self, struggling_snapshot):
        result = calculate_financial_health_score(struggling_snapshot)
        assert 1 <= len(result.tips) <= 3
        assert result.tips[0] == DEFAULT_SCORING_CONFIG.pillars[0].sub_components[0].tip


class TestEmptySnapshot:
    def test_neutral_defaults(self, as_of):
        result = calculate_financial_health_score(FinancialSnapshot(as_of=as_of))
        assert result.sub_component("wealth_building").score == Decimal("0.0")
        assert result.sub_component("debt_velocity").score == Decimal("125.0")
        assert result.sub_component("cash_flow_trend").score == Decimal("37.5")
        assert result.sub_component("payment_consistency").score == Decimal("87.5")
        assert result.sub_component("budget_discipline").score == Decimal("62.5")
        assert result.sub_component("engagement").score == Decimal("12.5")
        assert result.sub_component("emergency_buffer").score == Decimal("0.0")
        assert result.sub_component("debt_to_income").score == Decimal("100.0")
        assert result.sub_component("net_worth").score == Decimal("37.5")

    def test_total_and_level(self, as_of):
        result = calculate_financial_health_score(FinancialSnapshot(as_of=as_of))
        assert result.total_score == 463
        assert result.level == 2
        assert result.level_title == "Foundation"
        assert result.confidence == 0.5

    def test_confidence_note(self, as_of):
        result = calculate_financial_health_score(FinancialSnapshot(as_of=as_of))
        assert "50% confidence" in result.sub_component("payment_consistency").detail
        assert "confidence" not in result.sub_component("net_worth").detail


class TestColdStart:
    def test_confidence_curve(self):
        curves = CurveConstants()
        assert behavior_confidence(0, curves) == 0.5
        assert behavior_confidence(1, curves) == pytest.approx(0.65)
        assert behavior_confidence(2, curves) == pytest.approx(0.8)
        assert behavior_confidence(4, curves) == 1.0
        assert behavior_confidence(24, curves) == 1.0

    def test_perfect_behavior_scaled_toward_midpoint(self):
        new_user = score_inputs(ScoreInputs(paid_on_time=10, data_months=0))
        established = score_inputs(ScoreInputs(paid_on_time=10, data_months=4))
        # 0.5 + (1.0 - 0.5) * 0.5 = 0.75 of 175
        assert new_user.sub_component("payment_consistency").score == Decimal("131.3")
        assert established.sub_component("payment_consistency").score == Decimal("175.0")

    def test_bad_behavior_also_pulled_up(self):
        new_user = score_inputs(ScoreInputs(paid_late_61_plus=4, data_months=0))
        established = score_inputs(ScoreInputs(paid_late_61_plus=4, data_months=6))
        assert established.sub_component("payment_consistency").score == Decimal("0.0")
        assert new_user.sub_component("payment_consistency").score == Decimal("43.8")

    def test_other_pillars_unaffected(self):
        new_user = score_inputs(ScoreInputs(data_months=0))
        established = score_inputs(ScoreInputs(data_months=6))
        assert new_user.pillar("position").score == established.pillar("position").score
        assert new_user.pillar("trajectory").score == established.pillar("trajectory").score


class TestDebtWeighting:
    def test_weighted_debt(self):
        debts = [
            WeightedDebt("credit_card", Decimal("1000"), Decimal("50")),
            WeightedDebt("mortgage", Decimal("1000"), Decimal("50")),
        ]
        assert weighted_debt(debts, DEFAULT_SCORING_CONFIG) == Decimal("1800")

    def test_credit_card_worse_than_mortgage(self):
        assert _dti_score("credit_card") < _dti_score("mortgage")

    def test_payday_worst(self):
        assert _dti_score("payday") < _dti_score("credit_card")

    def test_alias_matches_target(self):
        assert _dti_score("heloc") == _dti_score("mortgage")

    def test_collections_penalty(self):
        config = DEFAULT_SCORING_CONFIG
        assert config.debt_multiplier("credit_card", in_collections=True) == 2.25
        assert config.debt_multiplier("credit_card") == 1.5

    def test_unknown_type_uses_default(self):
        assert DEFAULT_SCORING_CONFIG.debt_multiplier("boat") == 1.0

    def test_net_worth_penalizes_risky_debt(self):
        def net_worth(debt_type):
            inputs = ScoreInputs(
                total_assets=Decimal("30000"),
                current_debts=[WeightedDebt(debt_type, Decimal("20000"), Decimal("0"))],
            )
            return score_inputs(inputs).sub_component("net_worth").score

        assert net_worth("credit_card") < net_worth("student")


class TestContinuity:
    def test_wealth_building_increases_smoothly(self):
        scores = [
            score_inputs(ScoreInputs(
                monthly_income=Decimal("5000"),
                contributions=WealthContributions(cash_savings=Decimal(amount)),
            )).sub_component("wealth_building").score
            for amount in range(0, 1001, 100)
        ]
        for a, b in zip(scores, scores[1:]):
            assert b >= a
            assert b - a <= Decimal("15.1")

    def test_emergency_buffer_no_cliffs(self):
        scores = [
            score_inputs(ScoreInputs(
                monthly_expenses=Decimal("1000"),
                liquid_savings=Decimal(amount),
            )).sub_component("emergency_buffer").score
            for amount in range(0, 8001, 250)
        ]
        for a, b in zip(scores, scores[1:]):
            assert b >= a
            assert b - a < Decimal("20")

    def test_emergency_buffer_without_expenses_rises_from_zero(self):
        def buffer(amount):
            inputs = ScoreInputs(monthly_expenses=Decimal("0"), liquid_savings=Decimal(amount))
            return score_inputs(inputs).sub_component("emergency_buffer").score

        assert buffer("0") == Decimal("0.0")
        assert buffer("0.01") == Decimal("0.0")
        scores = [buffer(str(amount)) for amount in range(0, 3001, 100)]
        for a, b in zip(scores, scores[1:]):
            assert b >= a
            assert b - a < Decimal("20")
        # Six months of the $500 expense floor
        assert scores[-1] == Decimal("125.0")

    def test_penny_of_savings_on_a_new_snapshot(self, as_of):
        snapshot = FinancialSnapshot(as_of=as_of, accounts=[Account("Savings", "savings", Decimal("0.01"))])
        result = calculate_financial_health_score(snapshot)
        assert result.sub_component("emergency_buffer").score == Decimal("0.0")

    def test_budget_overspend_decays(self):
        def discipline(spent):
            inputs = ScoreInputs(
                budgets=[BudgetUsage(Decimal("100"), Decimal(spent))], data_months=6
            )
            return score_inputs(inputs).sub_component("budget_discipline").score

        assert discipline("90") == Decimal("125.0")
        assert discipline("100") == Decimal("125.0")
        assert Decimal("0") < discipline("200") < discipline("120") < discipline("100")


class TestZeroIncome:
    def test_no_division_errors(self):
        inputs = ScoreInputs(
            monthly_income=Decimal("0"),
            current_debts=[WeightedDebt("credit_card", Decimal("1000"), Decimal("50"))],
            window_spending=Decimal("300"),
        )
        result = score_inputs(inputs)
        assert result.sub_component("wealth_building").score == Decimal("0.0")
        assert result.sub_component("debt_to_income").score == Decimal("0.0")
        assert result.sub_component("cash_flow_trend").score == Decimal("0.0")


class TestLevels:
    @pytest.mark.parametrize(
        "total,level,title",
        [
            (1000, 5, "Financial Freedom"),
            (900, 5, "Financial Freedom"),
            (899, 4, "Wealth Builder"),
            (600, 3, "Solid Ground"),
            (400, 2, "Foundation"),
            (200, 1, "Getting Started"),
            (199, 0, "Beginning Journey"),
            (0, 0, "Beginning Journey"),
        ],
    )
    def test_level_for(self, total, level, title):
        threshold = DEFAULT_SCORING_CONFIG.level_for(total)
        assert threshold.level == level
        assert threshold.title == title


class TestTips:
    def test_all_clear(self):
        inputs = ScoreInputs(
            monthly_income=Decimal("5000"),
            monthly_expenses=Decimal("2000"),
            contributions=WealthContributions(cash_savings=Decimal("1000")),
            liquid_savings=Decimal("20000"),
            total_assets=Decimal("2000000"),
            paid_on_time=12,
            budgets=[BudgetUsage(Decimal("500"), Decimal("400"))],
            window_income=Decimal("15000"),
            window_spending=Decimal("6000"),
            active_months=3,
            cleared_ratio=1.0,
            data_months=12,
        )
        result = score_inputs(inputs)
        assert result.tips == [DEFAULT_SCORING_CONFIG.all_clear_tip]

    def test_weakest_first(self):
        inputs = ScoreInputs(monthly_income=Decimal("5000"), data_months=6)
        result = score_inputs(inputs)
        tips_by_key = {sc.key: sc.tip for p in DEFAULT_SCORING_CONFIG.pillars for sc in p.sub_components}
        assert result.tips[0] == tips_by_key["wealth_building"]
        assert len(result.tips) == 3


class TestCompareScores:
    def test_change_and_movers(self, healthy_snapshot, struggling_snapshot):
        healthy = calculate_financial_health_score(healthy_snapshot)
        struggling = calculate_financial_health_score(struggling_snapshot)
        change = compare_scores(healthy, struggling)
        assert change.change == healthy.total_score - struggling.total_score
        assert "Wealth Building" in change.improved
        assert "Payment History" in change.improved
        # Paying down a larger share of debt is the one thing the struggling profile does better
        assert change.declined == ["Debt Progress"]

    def test_no_change(self, healthy_snapshot):
        result = calculate_financial_health_score(healthy_snapshot)
        change = compare_scores(result, result)
        assert change.change == 0
        assert change.improved == []
        assert change.declined == []
