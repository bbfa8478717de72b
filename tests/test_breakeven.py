"""Tests for the break-even calculator."""

import pytest

from venue_ops.db.models import FinancialInputs, RiskLevel
from venue_ops.finance.breakeven import (
    assess_risk,
    break_even_attendance,
    compute,
    recommend,
    venue_contribution_per_guest,
    venue_fixed_costs,
)


@pytest.fixture
def scenario():
    """200 guests, $15 ticket all to the act, $10 cover, $25 bar at 30% COGS, $2000 fixed."""
    return FinancialInputs(
        expected_attendance=200,
        ticket_price=15,
        venue_ticket_split_pct=0,
        cover_charge=10,
        bar_revenue=25,
        merchandise_revenue=5,
        bar_cogs_pct=30,
        merchandise_cogs_pct=40,
        staff_costs=800,
        utilities_costs=200,
        facility_costs=300,
        marketing_costs=150,
        other_fixed_costs=50,
        band_guarantee=500,
    )


class TestBreakEven:
    def test_reference_scenario(self, scenario):
        assert venue_fixed_costs(scenario) == 2000
        assert venue_contribution_per_guest(scenario) == pytest.approx(27.5)
        assert break_even_attendance(scenario) == 73

    def test_zero_contribution_gives_zero(self):
        inputs = FinancialInputs(
            expected_attendance=100, cover_charge=0, bar_revenue=0, venue_ticket_split_pct=0
        )
        assert break_even_attendance(inputs) == 0

    def test_ticket_split_raises_contribution(self, scenario):
        split = scenario.model_copy(update={"venue_ticket_split_pct": 100})
        assert venue_contribution_per_guest(split) == pytest.approx(42.5)
        assert break_even_attendance(split) == 48


class TestParties:
    def test_venue_side(self, scenario):
        venue = compute(scenario).venue
        assert venue.total_revenue == pytest.approx(200 * 35)
        assert venue.total_cogs == pytest.approx(200 * 7.5)
        assert venue.total_fixed_costs == 2000
        assert venue.gross_profit == pytest.approx(5500)
        assert venue.net_profit == pytest.approx(3500)
        assert venue.revenue_per_guest == pytest.approx(35)
        assert venue.cost_per_guest == pytest.approx(17.5)
        assert venue.profit_per_guest == pytest.approx(17.5)

    def test_act_side_counts_guarantee(self, scenario):
        act = compute(scenario).act
        # 200 * (15 + 5) + 500 guarantee
        assert act.total_revenue == pytest.approx(4500)
        assert act.total_cogs == pytest.approx(200 * 2)
        assert act.total_fixed_costs == 0
        assert act.net_profit == pytest.approx(4100)

    def test_zero_attendance_per_guest_is_zero(self):
        results = compute(FinancialInputs(expected_attendance=0))
        assert results.venue.revenue_per_guest == 0
        assert results.venue.cost_per_guest == 0
        assert results.venue.profit_per_guest == 0
        assert results.profit_margin == 0


class TestAssessment:
    def test_margin(self, scenario):
        assert compute(scenario).profit_margin == pytest.approx(3500 / 7000 * 100)

    @pytest.mark.parametrize(
        "break_even, attendance, expected",
        [
            (250, 200, RiskLevel.HIGH),
            (240, 200, RiskLevel.MEDIUM),
            (161, 200, RiskLevel.MEDIUM),
            (160, 200, RiskLevel.LOW),
            (73, 200, RiskLevel.LOW),
            (1, 0, RiskLevel.HIGH),
        ],
    )
    def test_risk_tiers(self, break_even, attendance, expected):
        assert assess_risk(break_even, attendance) is expected

    @pytest.mark.parametrize(
        "net, margin, expected",
        [
            (-1, 50, "Not recommended - will result in a loss"),
            (10, 5, "Marginal - consider negotiating lower costs"),
            (10, 15, "Acceptable - reasonable profit expected"),
            (10, 25, "Excellent opportunity - high profit potential!"),
            (10, 30, "Outstanding - very profitable booking!"),
        ],
    )
    def test_recommendation(self, net, margin, expected):
        assert recommend(net, margin) == expected

    def test_compute_fills_everything(self, scenario):
        results = compute(scenario)
        assert results.break_even_attendance == 73
        assert results.risk_level is RiskLevel.LOW
        assert results.recommendation == "Outstanding - very profitable booking!"
