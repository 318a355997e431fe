from __future__ import annotations

from typing import Any, Dict, List, Tuple

from .common import safe_ratio
from .profile import HouseholdProfile
from .totals import DerivedTotals, derive_totals

PILLAR_MAX = {
    "savings": 30,
    "debt": 20,
    "emergency_fund": 20,
    "protection": 20,
    "investments": 10,
}

# (lower bound, points); first match wins.
SAVINGS_STEPS: Tuple[Tuple[float, float], ...] = ((0.30, 30), (0.20, 24), (0.15, 18), (0.10, 12))
EMERGENCY_STEPS: Tuple[Tuple[float, float], ...] = ((6, 20), (4, 15), (3, 12), (2, 8), (1, 4))
INVESTMENT_STEPS: Tuple[Tuple[float, float], ...] = ((1.0, 10), (0.5, 7), (0.25, 5), (0.10, 3))
# (upper bound inclusive, points) for the EMI-to-income ratio.
EMI_STEPS: Tuple[Tuple[float, float], ...] = ((0.10, 18), (0.20, 15), (0.30, 10), (0.40, 6))
EMI_CUTOFF = 0.50

HEALTH_COVER_BASE = {"metro": 1_000_000.0, "tier2": 750_000.0, "tier3": 500_000.0}
HEALTH_COVER_PER_DEPENDENT = 250_000.0
MAX_COUNTED_DEPENDENTS = 4
INVESTMENT_TARGET_YEARS = 10
ADEQUACY_CAP = 2.0

BANDS: Tuple[Tuple[int, str, str], ...] = (
    (85, "strong", "Strong"),
    (70, "secure", "Secure"),
    (55, "stable", "Stable"),
    (30, "vulnerable", "Vulnerable"),
    (0, "critical", "Critical"),
)

FALLBACK_ACTION = "Maintain your current discipline and review these numbers every quarter."


def _stepped(value: float, steps: Tuple[Tuple[float, float], ...], floor_points: float = 0.0) -> float:
    for bound, points in steps:
        if value >= bound:
            return points
    return floor_points if value > 0 else 0.0


def savings_points(savings_rate: float) -> float:
    return _stepped(savings_rate, SAVINGS_STEPS, floor_points=6)


def debt_points(emi_ratio: float, has_income: bool) -> float:
    # Without income there is nothing to measure the EMI burden against.
    if not has_income:
        return 0.0
    if emi_ratio <= 0:
        return 20.0
    for bound, points in EMI_STEPS:
        if emi_ratio <= bound:
            return points
    return 3.0 if emi_ratio < EMI_CUTOFF else 0.0


def emergency_points(ef_months: float) -> float:
    return _stepped(ef_months, EMERGENCY_STEPS)


def protection_points(health_adequacy: float, life_adequacy: float) -> float:
    half = PILLAR_MAX["protection"] / 2
    return half * min(health_adequacy, 1.0) + half * min(life_adequacy, 1.0)


def investment_points(coverage: float) -> float:
    return _stepped(coverage, INVESTMENT_STEPS, floor_points=1)


def health_cover_benchmark(profile: HouseholdProfile) -> float:
    base = HEALTH_COVER_BASE.get(profile.city_tier, HEALTH_COVER_BASE["metro"])
    return base + HEALTH_COVER_PER_DEPENDENT * min(profile.dependents, MAX_COUNTED_DEPENDENTS)


def life_cover_multiple(dependents: int) -> int:
    if dependents >= 3:
        return 15
    if dependents >= 1:
        return 12
    return 10


def band_for(score: int) -> Tuple[str, str]:
    for threshold, band, label in BANDS:
        if score >= threshold:
            return band, label
    return BANDS[-1][1], BANDS[-1][2]


def compute_metrics(profile: HouseholdProfile, totals: DerivedTotals) -> Dict[str, float]:
    health_benchmark = health_cover_benchmark(profile)
    life_benchmark = totals.total_income * 12 * life_cover_multiple(profile.dependents)
    investment_target = totals.total_expenses * 12 * INVESTMENT_TARGET_YEARS
    return {
        "total_income": totals.total_income,
        "total_expenses": totals.total_expenses,
        "monthly_savings": totals.monthly_savings,
        "savings_rate": totals.savings_rate,
        "emi_ratio": safe_ratio(profile.total_emi, totals.total_income),
        "ef_months": safe_ratio(profile.emergency_fund, totals.total_expenses),
        "health_benchmark": health_benchmark,
        "health_adequacy": min(safe_ratio(profile.health_cover, health_benchmark), ADEQUACY_CAP),
        "life_benchmark": life_benchmark,
        "life_adequacy": min(safe_ratio(profile.life_cover, life_benchmark), ADEQUACY_CAP),
        "investment_target": investment_target,
        "investment_coverage": min(safe_ratio(totals.total_investments, investment_target), ADEQUACY_CAP),
        "needs_share": safe_ratio(totals.fixed_total, totals.total_income),
        "wants_share": safe_ratio(totals.variable_total, totals.total_income),
    }


def _comments(metrics: Dict[str, float], has_income: bool) -> Dict[str, str]:
    rate = metrics["savings_rate"]
    if not has_income:
        savings = "Add your income to measure how much you save each month."
    elif rate >= 0.30:
        savings = f"Excellent: you save {rate:.0%} of your income."
    elif rate >= 0.20:
        savings = f"Healthy savings rate of {rate:.0%}; 30% would put you in the top tier."
    elif rate > 0:
        savings = f"You save {rate:.0%} of income; aim for at least 20%."
    else:
        savings = "Expenses absorb all of your income, so nothing is left to save."

    emi = metrics["emi_ratio"]
    if not has_income:
        debt = "EMI burden cannot be assessed without income."
    elif emi <= 0:
        debt = "No EMIs: your income is free of loan repayments."
    elif emi <= 0.20:
        debt = f"EMIs take {emi:.0%} of income, comfortably within limits."
    elif emi <= 0.40:
        debt = f"EMIs take {emi:.0%} of income; avoid adding new loans."
    else:
        debt = f"EMIs take {emi:.0%} of income, which is a heavy burden."

    months = metrics["ef_months"]
    if months >= 6:
        emergency = f"Emergency fund covers {months:.1f} months of expenses."
    elif months >= 3:
        emergency = f"Emergency fund covers {months:.1f} months; build it to 6."
    elif months > 0:
        emergency = f"Only {months:.1f} months of expenses are covered by your emergency fund."
    else:
        emergency = "No emergency fund measured against your expenses yet."

    health, life = metrics["health_adequacy"], metrics["life_adequacy"]
    if health >= 1 and life >= 1:
        protection = "Health and life cover both meet their benchmarks."
    elif health >= 1:
        protection = f"Health cover is adequate but life cover is at {life:.0%} of the benchmark."
    elif life >= 1:
        protection = f"Life cover is adequate but health cover is at {health:.0%} of the benchmark."
    else:
        protection = f"Health cover at {health:.0%} and life cover at {life:.0%} of their benchmarks."

    coverage = metrics["investment_coverage"]
    if coverage >= 1:
        investments = "Investments already match ten years of expenses."
    elif coverage > 0:
        investments = f"Investments cover {coverage:.0%} of a ten-year expense target."
    else:
        investments = "No long-term investments recorded yet."

    return {
        "savings": savings,
        "debt": debt,
        "emergency_fund": emergency,
        "protection": protection,
        "investments": investments,
    }


def _recommended_actions(metrics: Dict[str, float], has_income: bool, has_expenses: bool) -> List[str]:
    actions: List[str] = []
    if has_expenses and metrics["ef_months"] < 6:
        target = metrics["total_expenses"] * 6
        actions.append(f"Build your emergency fund towards 6 months of expenses ({target:,.0f}).")
    if has_income and metrics["emi_ratio"] > 0.30:
        actions.append("Bring EMIs below 30% of income by prepaying the costliest loan first.")
    if has_income and metrics["savings_rate"] < 0.20:
        actions.append("Increase your savings rate to at least 20% by automating a transfer on payday.")
    if metrics["health_adequacy"] < 1:
        actions.append(f"Raise health cover to at least {metrics['health_benchmark']:,.0f}.")
    if has_income and metrics["life_adequacy"] < 1:
        actions.append(f"Get term life cover of about {metrics['life_benchmark']:,.0f}.")
    if has_expenses and metrics["investment_coverage"] < 0.5:
        actions.append("Start or step up a monthly SIP towards your long-term corpus.")
    if metrics["wants_share"] > 0.30:
        actions.append("Trim discretionary spending to under 30% of income.")
    if not actions:
        actions.append(FALLBACK_ACTION)
    return actions


def compute_health_index(profile: HouseholdProfile, totals: DerivedTotals | None = None) -> Dict[str, Any]:
    totals = totals or derive_totals(profile)
    metrics = compute_metrics(profile, totals)
    has_income = totals.total_income > 0
    has_expenses = totals.total_expenses > 0

    pillars = {
        "savings": savings_points(metrics["savings_rate"]),
        "debt": debt_points(metrics["emi_ratio"], has_income),
        "emergency_fund": emergency_points(metrics["ef_months"]),
        "protection": protection_points(metrics["health_adequacy"], metrics["life_adequacy"]),
        "investments": investment_points(metrics["investment_coverage"]),
    }
    pillars = {name: round(value, 1) for name, value in pillars.items()}
    score = max(0, min(100, int(round(sum(pillars.values())))))
    band, band_label = band_for(score)

    return {
        "score": score,
        "band": band,
        "band_label": band_label,
        "pillars": pillars,
        "pillar_max": dict(PILLAR_MAX),
        "metrics": {name: round(value, 4) for name, value in metrics.items()},
        "comments": _comments(metrics, has_income),
        "recommended_actions": _recommended_actions(metrics, has_income, has_expenses),
    }
