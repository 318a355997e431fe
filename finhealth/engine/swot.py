from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Tuple

from .actions import ACTION_BLUEPRINTS, ActionBlueprint
from .common import safe_ratio
from .health import life_cover_multiple
from .profile import INVESTMENT_FIELDS, VARIABLE_FIELDS, HouseholdProfile

CATEGORIES = ("strengths", "weaknesses", "opportunities", "threats")
IRREGULAR_EMPLOYMENT = {"business", "freelancer"}


@dataclass(frozen=True)
class SwotRule:
    id: str
    category: str
    condition: Callable[[Mapping[str, Any]], bool]
    template: str
    action_keys: Tuple[str, ...] = ()


def _has_data(ctx: Mapping[str, Any]) -> bool:
    return ctx["total_income"] > 0 or ctx["total_expenses"] > 0


def _with_data(condition: Callable[[Mapping[str, Any]], bool]) -> Callable[[Mapping[str, Any]], bool]:
    return lambda ctx: _has_data(ctx) and condition(ctx)


# Evaluated top to bottom; several rules may fire for one profile.
SWOT_RULES: Tuple[SwotRule, ...] = (
    # strengths
    SwotRule(
        "high_savings_rate", "strengths",
        _with_data(lambda c: c["savings_rate"] >= 0.20),
        "Saving about {savings_pct}% of income every month",
        ("step_up_sip",),
    ),
    SwotRule(
        "debt_free", "strengths",
        _with_data(lambda c: c["total_income"] > 0 and c["total_emi"] == 0 and c["loan_outstanding"] == 0),
        "No EMIs or outstanding loans",
    ),
    SwotRule(
        "manageable_emi", "strengths",
        _with_data(lambda c: 0 < c["emi_ratio"] <= 0.20),
        "EMIs are a manageable {emi_pct}% of income",
    ),
    SwotRule(
        "strong_emergency_fund", "strengths",
        _with_data(lambda c: c["ef_months"] >= 6),
        "Emergency fund covers about {ef_months_text} months of expenses",
    ),
    SwotRule(
        "health_cover_adequate", "strengths",
        _with_data(lambda c: c["health_adequacy"] >= 1),
        "Health cover is at {health_pct}% of the benchmark for your family",
    ),
    SwotRule(
        "life_cover_adequate", "strengths",
        _with_data(lambda c: c["total_income"] > 0 and c["life_adequacy"] >= 1),
        "Life cover meets {life_multiple}x annual income",
    ),
    SwotRule(
        "investments_on_track", "strengths",
        _with_data(lambda c: c["investment_coverage"] >= 0.5),
        "Investments already cover {investment_pct}% of a ten-year expense target",
        ("step_up_sip",),
    ),
    # weaknesses
    SwotRule(
        "low_savings_rate", "weaknesses",
        _with_data(lambda c: c["total_income"] > 0 and c["savings_rate"] < 0.10),
        "Saving only {savings_pct}% of income",
        ("automate_savings", "cut_wants"),
    ),
    SwotRule(
        "thin_emergency_fund", "weaknesses",
        _with_data(lambda c: c["total_expenses"] > 0 and c["ef_months"] < 3),
        "Emergency fund lasts only {ef_months_text} months",
        ("build_emergency_fund",),
    ),
    SwotRule(
        "health_cover_gap", "weaknesses",
        _with_data(lambda c: c["health_adequacy"] < 1),
        "Health cover is {health_pct}% of the {health_benchmark_text} benchmark",
        ("buy_health_cover",),
    ),
    SwotRule(
        "life_cover_gap", "weaknesses",
        _with_data(lambda c: c["total_income"] > 0 and c["life_adequacy"] < 1),
        "Life cover is {life_pct}% of {life_multiple}x annual income",
        ("buy_term_cover",),
    ),
    SwotRule(
        "low_investments", "weaknesses",
        _with_data(lambda c: c["total_expenses"] > 0 and c["investment_coverage"] < 0.25),
        "Investments cover just {investment_pct}% of a ten-year expense target",
        ("start_sip",),
    ),
    SwotRule(
        "high_discretionary_spend", "weaknesses",
        _with_data(lambda c: c["wants_share"] > 0.30),
        "Discretionary spending takes {wants_pct}% of income",
        ("cut_wants",),
    ),
    # opportunities
    SwotRule(
        "surplus_for_sip", "opportunities",
        _with_data(lambda c: c["monthly_savings"] > 0 and c["ef_months"] >= 3),
        "Redirect part of the {monthly_savings_text} monthly surplus into a SIP",
        ("start_sip", "step_up_sip"),
    ),
    SwotRule(
        "prepay_loan", "opportunities",
        _with_data(lambda c: c["loan_outstanding"] > 0 and c["savings_rate"] >= 0.20),
        "Surplus can prepay the {loan_outstanding_text} loan balance faster",
        ("prepay_costliest_loan",),
    ),
    SwotRule(
        "long_compounding_runway", "opportunities",
        _with_data(lambda c: c["age"] < 35),
        "At {age} you have a long runway for compounding",
        ("start_sip",),
    ),
    SwotRule(
        "dual_income", "opportunities",
        _with_data(lambda c: c["income_spouse"] > 0),
        "A second income lets one salary fund goals outright",
        ("automate_savings",),
    ),
    SwotRule(
        "trim_wants", "opportunities",
        _with_data(lambda c: c["variable_total"] > 0 and c["wants_share"] > 0.15),
        "Trimming wants could free up to {variable_total_text} a month",
        ("cut_wants",),
    ),
    # threats
    SwotRule(
        "heavy_emi_burden", "threats",
        _with_data(lambda c: c["emi_ratio"] >= 0.40),
        "EMIs consume {emi_pct}% of income",
        ("prepay_costliest_loan", "avoid_new_debt"),
    ),
    SwotRule(
        "spending_exceeds_income", "threats",
        _with_data(lambda c: c["total_expenses"] > c["total_income"]),
        "Expenses exceed income by {deficit_text} a month",
        ("cut_wants",),
    ),
    SwotRule(
        "no_emergency_buffer", "threats",
        _with_data(lambda c: c["total_expenses"] > 0 and c["ef_months"] < 1),
        "A single emergency could force new debt",
        ("build_emergency_fund",),
    ),
    SwotRule(
        "medical_cost_exposure", "threats",
        _with_data(lambda c: c["health_adequacy"] < 0.5),
        "A hospital stay could wipe out savings",
        ("buy_health_cover",),
    ),
    SwotRule(
        "dependents_unprotected", "threats",
        _with_data(lambda c: c["dependents"] > 0 and c["life_adequacy"] < 1),
        "{dependents} dependents rely on income that is not fully insured",
        ("buy_term_cover",),
    ),
    SwotRule(
        "irregular_income", "threats",
        _with_data(lambda c: c["variable_income_share"] > 0.40 or c["employment_type"] in IRREGULAR_EMPLOYMENT),
        "Income depends on irregular sources",
        ("stabilise_income", "build_emergency_fund"),
    ),
    SwotRule(
        "concentrated_portfolio", "threats",
        _with_data(lambda c: c["max_asset_share"] > 0.70 and c["total_investments"] > 0),
        "{max_asset_pct}% of investments sit in a single asset class",
        ("diversify_portfolio",),
    ),
)

FALLBACKS: Dict[str, Tuple[str, str]] = {
    "strengths": ("strengths_fallback", "Add your income and expenses to surface your strengths"),
    "weaknesses": ("weaknesses_fallback", "No weaknesses detected yet; keep your numbers up to date"),
    "opportunities": ("opportunities_fallback", "Review your plan every year to spot new opportunities"),
    "threats": ("threats_fallback", "Inflation steadily erodes the value of idle cash"),
}

_RULES_BY_ID = {rule.id: rule for rule in SWOT_RULES}


def _pct(value: float) -> int:
    return int(round(value * 100))


def _amount(value: float) -> str:
    return f"{value:,.0f}"


def build_context(health_index: Mapping[str, Any], profile: HouseholdProfile) -> Dict[str, Any]:
    metrics = dict(health_index.get("metrics") or {})
    total_income = float(metrics.get("total_income", 0.0))
    total_expenses = float(metrics.get("total_expenses", 0.0))
    investments = [getattr(profile, name) for name in INVESTMENT_FIELDS]
    total_investments = sum(investments)
    variable_total = sum(getattr(profile, name) for name in VARIABLE_FIELDS)
    max_asset_share = safe_ratio(max(investments), total_investments)
    life_multiple = life_cover_multiple(profile.dependents)

    ctx: Dict[str, Any] = {
        "age": profile.age,
        "dependents": profile.dependents,
        "employment_type": profile.employment_type,
        "total_emi": profile.total_emi,
        "loan_outstanding": profile.loan_outstanding,
        "income_spouse": profile.income_spouse,
        "variable_income_share": safe_ratio(profile.income_variable, total_income),
        "total_income": total_income,
        "total_expenses": total_expenses,
        "variable_total": variable_total,
        "total_investments": total_investments,
        "max_asset_share": max_asset_share,
        "life_multiple": life_multiple,
    }
    for key in (
        "savings_rate",
        "emi_ratio",
        "ef_months",
        "health_adequacy",
        "life_adequacy",
        "investment_coverage",
        "wants_share",
        "monthly_savings",
        "health_benchmark",
    ):
        ctx[key] = float(metrics.get(key, 0.0))

    ctx.update(
        {
            "savings_pct": _pct(ctx["savings_rate"]),
            "emi_pct": _pct(ctx["emi_ratio"]),
            "health_pct": _pct(ctx["health_adequacy"]),
            "life_pct": _pct(ctx["life_adequacy"]),
            "investment_pct": _pct(ctx["investment_coverage"]),
            "wants_pct": _pct(ctx["wants_share"]),
            "max_asset_pct": _pct(max_asset_share),
            "ef_months_text": f"{ctx['ef_months']:.1f}",
            "health_benchmark_text": _amount(ctx["health_benchmark"]),
            "monthly_savings_text": _amount(ctx["monthly_savings"]),
            "loan_outstanding_text": _amount(profile.loan_outstanding),
            "variable_total_text": _amount(variable_total),
            "deficit_text": _amount(max(total_expenses - total_income, 0.0)),
        }
    )
    return ctx


def derive_swot(health_index: Mapping[str, Any], profile: HouseholdProfile) -> Dict[str, List[Dict[str, Any]]]:
    ctx = build_context(health_index, profile)
    result: Dict[str, List[Dict[str, Any]]] = {category: [] for category in CATEGORIES}
    for rule in SWOT_RULES:
        if rule.condition(ctx):
            result[rule.category].append(
                {
                    "id": rule.id,
                    "label": rule.template.format(**ctx),
                    "actions": list(rule.action_keys),
                }
            )
    for category in CATEGORIES:
        if not result[category]:
            finding_id, label = FALLBACKS[category]
            result[category].append({"id": finding_id, "label": label, "actions": []})
    return result


def suggestions_for_finding(finding_id: str) -> List[ActionBlueprint]:
    rule = _RULES_BY_ID.get(finding_id)
    if rule is None:
        return []
    return [ACTION_BLUEPRINTS[key] for key in rule.action_keys]
