"""Per-event break-even model for the venue and the performing act."""

import math

from venue_ops.db.models import FinancialInputs, FinancialResults, PartyResults, RiskLevel

HIGH_RISK_RATIO = 1.2
MEDIUM_RISK_RATIO = 0.8


def _pct(value: float, pct: float) -> float:
    return value * pct / 100.0


def _party(
    attendance: int,
    revenue_per_guest: float,
    cogs_per_guest: float,
    fixed_costs: float,
    flat_revenue: float = 0.0,
) -> PartyResults:
    total_revenue = attendance * revenue_per_guest + flat_revenue
    total_cogs = attendance * cogs_per_guest
    gross = total_revenue - total_cogs
    net = gross - fixed_costs
    if attendance > 0:
        per_rev = total_revenue / attendance
        per_cost = (total_cogs + fixed_costs) / attendance
        per_profit = net / attendance
    else:
        per_rev = per_cost = per_profit = 0.0
    return PartyResults(
        total_revenue=total_revenue,
        total_cogs=total_cogs,
        total_fixed_costs=fixed_costs,
        gross_profit=gross,
        net_profit=net,
        revenue_per_guest=per_rev,
        cost_per_guest=per_cost,
        profit_per_guest=per_profit,
    )


def venue_fixed_costs(inputs: FinancialInputs) -> float:
    return (
        inputs.staff_costs
        + inputs.utilities_costs
        + inputs.facility_costs
        + inputs.marketing_costs
        + inputs.other_fixed_costs
        + inputs.band_guarantee
    )


def venue_contribution_per_guest(inputs: FinancialInputs) -> float:
    """Ticket share + cover + bar, less bar cost of goods."""
    revenue = (
        _pct(inputs.ticket_price, inputs.venue_ticket_split_pct)
        + inputs.cover_charge
        + inputs.bar_revenue
    )
    return revenue - _pct(inputs.bar_revenue, inputs.bar_cogs_pct)


def break_even_attendance(inputs: FinancialInputs) -> int:
    """Guests needed for the venue to cover fixed costs; 0 if never reachable."""
    contribution = venue_contribution_per_guest(inputs)
    if contribution <= 0:
        return 0
    return math.ceil(venue_fixed_costs(inputs) / contribution)


def assess_risk(break_even: int, attendance: int) -> RiskLevel:
    if break_even > attendance * HIGH_RISK_RATIO:
        return RiskLevel.HIGH
    if break_even > attendance * MEDIUM_RISK_RATIO:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def recommend(net_profit: float, profit_margin: float) -> str:
    if net_profit < 0:
        return "Not recommended - will result in a loss"
    if profit_margin < 10:
        return "Marginal - consider negotiating lower costs"
    if profit_margin < 20:
        return "Acceptable - reasonable profit expected"
    if profit_margin >= 30:
        return "Outstanding - very profitable booking!"
    return "Excellent opportunity - high profit potential!"


def compute(inputs: FinancialInputs) -> FinancialResults:
    attendance = inputs.expected_attendance

    venue = _party(
        attendance,
        revenue_per_guest=_pct(inputs.ticket_price, inputs.venue_ticket_split_pct)
        + inputs.cover_charge
        + inputs.bar_revenue,
        cogs_per_guest=_pct(inputs.bar_revenue, inputs.bar_cogs_pct),
        fixed_costs=venue_fixed_costs(inputs),
    )
    act = _party(
        attendance,
        revenue_per_guest=_pct(inputs.ticket_price, 100.0 - inputs.venue_ticket_split_pct)
        + inputs.merchandise_revenue,
        cogs_per_guest=_pct(inputs.merchandise_revenue, inputs.merchandise_cogs_pct),
        fixed_costs=0.0,
        flat_revenue=inputs.band_guarantee,
    )

    margin = venue.net_profit / venue.total_revenue * 100 if venue.total_revenue > 0 else 0.0
    break_even = break_even_attendance(inputs)
    return FinancialResults(
        venue=venue,
        act=act,
        break_even_attendance=break_even,
        profit_margin=margin,
        risk_level=assess_risk(break_even, attendance),
        recommendation=recommend(venue.net_profit, margin),
    )
