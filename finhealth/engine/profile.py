from __future__ import annotations

import re
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping

from .common import safe_amount, safe_count

EMPLOYMENT_TYPES = ("unset", "salaried", "business", "freelancer", "student", "other")
CITY_TIERS = ("metro", "tier2", "tier3")

DEFAULT_AGE = 30
INCOME_FIELDS = ("income_self", "income_spouse", "income_other", "income_variable")
FIXED_FIELDS = ("fixed_rent", "fixed_food", "fixed_utilities", "fixed_medical")
VARIABLE_FIELDS = ("var_wifi", "var_entertainment", "var_shopping", "var_misc")
INVESTMENT_FIELDS = ("inv_bonds", "inv_mf", "inv_stocks", "inv_gold", "inv_others")

# Wire keys that do not survive a plain camelCase -> snake_case conversion.
_WIRE_OVERRIDES = {"inv_mf": "invMF"}


def _to_camel(name: str) -> str:
    if name in _WIRE_OVERRIDES:
        return _WIRE_OVERRIDES[name]
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _to_snake(key: str) -> str:
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", key).lower()


def _enum_value(value: Any, allowed: tuple[str, ...], default: str) -> str:
    text = str(value or "").strip().lower().replace("-", "").replace(" ", "")
    return text if text in allowed else default


@dataclass(frozen=True)
class HouseholdProfile:
    """Flat snapshot of a household's monthly finances.

    Construct through ``from_mapping`` so every field is coerced; the
    profile never carries derived values.
    """

    age: int = DEFAULT_AGE
    dependents: int = 0
    employment_type: str = "unset"
    city_tier: str = "metro"

    income_self: float = 0.0
    income_spouse: float = 0.0
    income_other: float = 0.0
    income_variable: float = 0.0

    fixed_rent: float = 0.0
    fixed_food: float = 0.0
    fixed_utilities: float = 0.0
    fixed_medical: float = 0.0

    var_wifi: float = 0.0
    var_entertainment: float = 0.0
    var_shopping: float = 0.0
    var_misc: float = 0.0

    total_emi: float = 0.0
    loan_outstanding: float = 0.0

    emergency_fund: float = 0.0
    health_cover: float = 0.0
    life_cover: float = 0.0

    inv_bonds: float = 0.0
    inv_mf: float = 0.0
    inv_stocks: float = 0.0
    inv_gold: float = 0.0
    inv_others: float = 0.0

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(item.name for item in fields(cls))

    @classmethod
    def _coerce(cls, values: Mapping[str, Any]) -> Dict[str, Any]:
        known = set(cls.field_names())
        coerced: Dict[str, Any] = {}
        for key, value in values.items():
            name = _to_snake(str(key))
            if name not in known:
                continue
            if name == "age":
                coerced[name] = safe_count(value, DEFAULT_AGE)
            elif name == "dependents":
                coerced[name] = safe_count(value)
            elif name == "employment_type":
                coerced[name] = _enum_value(value, EMPLOYMENT_TYPES, "unset")
            elif name == "city_tier":
                coerced[name] = _enum_value(value, CITY_TIERS, "metro")
            else:
                coerced[name] = safe_amount(value)
        return coerced

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "HouseholdProfile":
        return cls(**cls._coerce(data or {}))

    def with_updates(self, patch: Mapping[str, Any] | None) -> "HouseholdProfile":
        return replace(self, **self._coerce(patch or {}))

    def to_dict(self) -> Dict[str, Any]:
        return {_to_camel(name): getattr(self, name) for name in self.field_names()}
