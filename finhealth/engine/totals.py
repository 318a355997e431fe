from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from .common import safe_ratio
from .profile import FIXED_FIELDS, INCOME_FIELDS, INVESTMENT_FIELDS, VARIABLE_FIELDS, HouseholdProfile


@dataclass(frozen=True)
class DerivedTotals:
    total_income: float
    fixed_total: float
    variable_total: float
    total_expenses: float
    monthly_savings: float
    monthly_deficit: float
    savings_rate: float
    total_investments: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _sum_fields(profile: HouseholdProfile, names: tuple[str, ...]) -> float:
    return sum(getattr(profile, name) for name in names)


def derive_totals(profile: HouseholdProfile) -> DerivedTotals:
    total_income = _sum_fields(profile, INCOME_FIELDS)
    fixed_total = _sum_fields(profile, FIXED_FIELDS)
    variable_total = _sum_fields(profile, VARIABLE_FIELDS)
    total_expenses = fixed_total + variable_total
    # A deficit floors savings at zero; it is reported, never compounded.
    monthly_savings = max(total_income - total_expenses, 0.0)
    return DerivedTotals(
        total_income=total_income,
        fixed_total=fixed_total,
        variable_total=variable_total,
        total_expenses=total_expenses,
        monthly_savings=monthly_savings,
        monthly_deficit=max(total_expenses - total_income, 0.0),
        savings_rate=safe_ratio(monthly_savings, total_income),
        total_investments=_sum_fields(profile, INVESTMENT_FIELDS),
    )
