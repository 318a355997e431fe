from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping

from finhealth import config

from .common import round_money, safe_amount, safe_float
from .profile import HouseholdProfile
from .totals import DerivedTotals, derive_totals

FIRE_MULTIPLES = {"lean": 20.0, "normal": 25.0, "fat": 30.0}
MAX_YEARS = 100
MAX_RATE_PCT = 100.0
MAX_MULTIPLE = 100.0


def _rate_pct(value: Any, default: float) -> float:
    rate = safe_float(value, default)
    return max(0.0, min(MAX_RATE_PCT, rate))


@dataclass(frozen=True)
class FireAssumptions:
    """Projection inputs. Rates are annual percentages (12 means 12%)."""

    fire_multiple: float = config.FIRE_DEFAULT_MULTIPLE
    target_age: int = config.FIRE_DEFAULT_TARGET_AGE
    years_to_target: int | None = None
    expected_annual_return: float = config.FIRE_DEFAULT_RETURN_PCT
    annual_inflation: float = config.FIRE_DEFAULT_INFLATION_PCT

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "FireAssumptions":
        data = dict(data or {})
        defaults = cls()
        multiple = safe_float(data.get("fire_multiple"), 0.0)
        if multiple <= 0:
            fire_type = str(data.get("fire_type") or "").strip().lower()
            multiple = FIRE_MULTIPLES.get(fire_type, defaults.fire_multiple)
        years = data.get("years_to_target")
        return cls(
            fire_multiple=min(MAX_MULTIPLE, multiple),
            target_age=min(MAX_YEARS * 2, int(safe_amount(data.get("target_age", defaults.target_age)))),
            years_to_target=None if years is None else min(MAX_YEARS, int(safe_amount(years))),
            expected_annual_return=_rate_pct(data.get("expected_annual_return"), defaults.expected_annual_return),
            annual_inflation=_rate_pct(data.get("annual_inflation"), defaults.annual_inflation),
        )

    def horizon_years(self, age: int) -> int:
        if self.years_to_target is not None:
            return max(0, min(MAX_YEARS, self.years_to_target))
        return max(0, min(MAX_YEARS, self.target_age - age))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def annuity_factor(monthly_rate: float, months: int) -> float:
    """Future value of 1 paid at the end of each month for ``months`` months."""
    if months <= 0:
        return 0.0
    if monthly_rate <= 0:
        return float(months)
    return ((1 + monthly_rate) ** months - 1) / monthly_rate


def project_corpus(
    current_investments: float,
    monthly_contribution: float,
    annual_return_pct: float,
    years: int,
) -> float:
    annual_rate = annual_return_pct / 100
    fv_existing = current_investments * (1 + annual_rate) ** years
    return fv_existing + monthly_contribution * annuity_factor(annual_rate / 12, years * 12)


def _target_corpus(annual_expenses_today: float, assumptions: FireAssumptions, years: int) -> tuple[float, float]:
    inflation = assumptions.annual_inflation / 100
    at_horizon = annual_expenses_today * (1 + inflation) ** years
    return at_horizon, at_horizon * assumptions.fire_multiple


def project_fire(
    profile: HouseholdProfile,
    totals: DerivedTotals | None = None,
    assumptions: FireAssumptions | None = None,
) -> Dict[str, Any]:
    totals = totals or derive_totals(profile)
    assumptions = assumptions or FireAssumptions()
    years = assumptions.horizon_years(profile.age)
    annual_return = assumptions.expected_annual_return / 100

    annual_expenses_today = totals.total_expenses * 12
    annual_expenses_at_horizon, target_corpus = _target_corpus(annual_expenses_today, assumptions, years)

    invested = totals.total_investments
    fv_existing = invested * (1 + annual_return) ** years
    gap = max(0.0, target_corpus - fv_existing)
    factor = annuity_factor(annual_return / 12, years * 12)
    required_monthly = gap / factor if factor > 0 else 0.0
    lump_sum = max(0.0, target_corpus / (1 + annual_return) ** years - invested)

    return {
        "target_corpus": round_money(target_corpus),
        "required_monthly_contribution": round_money(required_monthly),
        "required_lump_sum_today": round_money(lump_sum),
        "years_to_target": years,
        "already_funded": fv_existing >= target_corpus,
        "fire_age": profile.age + years,
        "annual_expenses_today": round_money(annual_expenses_today),
        "annual_expenses_at_horizon": round_money(annual_expenses_at_horizon),
        "fv_existing": round_money(fv_existing),
        "corpus_gap": round_money(gap),
        "current_monthly_sip": round_money(totals.monthly_savings),
        "projected_corpus": round_money(
            project_corpus(invested, totals.monthly_savings, assumptions.expected_annual_return, years)
        ),
        "assumptions": assumptions.to_dict(),
    }


def default_variants(assumptions: FireAssumptions, base_contribution: float, required: float) -> List[Dict[str, Any]]:
    return [
        {
            "name": "return_minus_2pct",
            "expected_annual_return": max(0.0, assumptions.expected_annual_return - 2),
        },
        {
            "name": "return_plus_2pct",
            "expected_annual_return": assumptions.expected_annual_return + 2,
        },
        {
            "name": "sip_plus_25pct",
            "monthly_contribution": base_contribution * 1.25,
        },
        {
            "name": "sip_at_required",
            "monthly_contribution": required,
        },
    ]


def _variant_row(
    name: str,
    profile: HouseholdProfile,
    totals: DerivedTotals,
    assumptions: FireAssumptions,
    contribution: float,
) -> Dict[str, Any]:
    years = assumptions.horizon_years(profile.age)
    _, target = _target_corpus(totals.total_expenses * 12, assumptions, years)
    projected = project_corpus(totals.total_investments, contribution, assumptions.expected_annual_return, years)
    return {
        "name": name,
        "expected_annual_return": assumptions.expected_annual_return,
        "annual_inflation": assumptions.annual_inflation,
        "monthly_contribution": round_money(contribution),
        "years_to_target": years,
        "projected_corpus": round_money(projected),
        "target_corpus": round_money(target),
        "shortfall": round_money(target - projected),
        "surplus": round_money(projected - target),
    }


def fire_what_if(
    profile: HouseholdProfile,
    totals: DerivedTotals | None = None,
    assumptions: FireAssumptions | None = None,
    variants: List[Mapping[str, Any]] | None = None,
) -> Dict[str, Any]:
    """Compare projected corpora when one or more assumptions change.

    The base row invests current monthly savings. Each variant overrides
    ``expected_annual_return``, ``annual_inflation``, ``fire_multiple``,
    ``years_to_target`` or ``monthly_contribution``; anything it does not
    name is held fixed.
    """
    totals = totals or derive_totals(profile)
    assumptions = assumptions or FireAssumptions()
    base_contribution = totals.monthly_savings
    base = _variant_row("base", profile, totals, assumptions, base_contribution)

    if variants is None:
        required = project_fire(profile, totals, assumptions)["required_monthly_contribution"]
        variants = default_variants(assumptions, base_contribution, required)

    rows: List[Dict[str, Any]] = []
    for index, variant in enumerate(variants):
        name = str(variant.get("name") or f"variant_{index + 1}")
        overrides = {**assumptions.to_dict(), **{k: v for k, v in variant.items() if k in assumptions.to_dict()}}
        variant_assumptions = FireAssumptions.from_mapping(overrides)
        contribution = base_contribution
        if variant.get("monthly_contribution") is not None:
            contribution = safe_amount(variant.get("monthly_contribution"))
        row = _variant_row(name, profile, totals, variant_assumptions, contribution)
        row["delta_vs_base"] = round(row["projected_corpus"] - base["projected_corpus"], 2)
        rows.append(row)

    best = base
    for row in rows:
        if row["shortfall"] < best["shortfall"]:
            best = row

    return {
        "base": base,
        "variants": rows,
        "best_variant": best["name"],
    }
