from __future__ import annotations

import json
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from finhealth.engine import HouseholdProfile, compute_health_index, derive_totals  # noqa: E402
from finhealth.engine.common import MAX_AMOUNT  # noqa: E402


class HouseholdProfileTests(unittest.TestCase):
    def test_defaults_for_missing_input(self) -> None:
        profile = HouseholdProfile.from_mapping(None)
        self.assertEqual(profile.age, 30)
        self.assertEqual(profile.city_tier, "metro")
        self.assertEqual(profile.employment_type, "unset")
        self.assertEqual(profile.income_self, 0.0)

    def test_invalid_numbers_coerce_to_zero(self) -> None:
        profile = HouseholdProfile.from_mapping(
            {
                "incomeSelf": "abc",
                "incomeSpouse": -5000,
                "incomeOther": float("nan"),
                "incomeVariable": float("inf"),
                "fixedRent": None,
                "fixedFood": "",
                "varMisc": True,
            }
        )
        for name in ("income_self", "income_spouse", "income_other", "income_variable", "fixed_rent", "fixed_food", "var_misc"):
            self.assertEqual(getattr(profile, name), 0.0, name)

    def test_numeric_strings_and_aliases(self) -> None:
        profile = HouseholdProfile.from_mapping(
            {"incomeSelf": "1,20,000", "fixed_rent": "25000", "invMF": 5000, "age": "41.9", "dependents": "2"}
        )
        self.assertEqual(profile.income_self, 120000.0)
        self.assertEqual(profile.fixed_rent, 25000.0)
        self.assertEqual(profile.inv_mf, 5000.0)
        self.assertEqual(profile.age, 41)
        self.assertEqual(profile.dependents, 2)

    def test_unknown_keys_and_enum_values(self) -> None:
        profile = HouseholdProfile.from_mapping(
            {"somethingElse": 42, "cityTier": "Tier 2", "employmentType": "astronaut"}
        )
        self.assertEqual(profile.city_tier, "tier2")
        self.assertEqual(profile.employment_type, "unset")
        self.assertNotIn("somethingElse", profile.to_dict())

    def test_huge_amounts_are_capped(self) -> None:
        profile = HouseholdProfile.from_mapping({"incomeSelf": 1e308})
        self.assertEqual(profile.income_self, MAX_AMOUNT)

    def test_integers_beyond_float_range_coerce_to_zero(self) -> None:
        raw = json.loads('{"incomeSelf": 1' + "0" * 400 + ', "fixedRent": -1' + "0" * 400 + ', "age": 1' + "0" * 400 + "}")
        profile = HouseholdProfile.from_mapping(raw)
        self.assertEqual(profile.income_self, 0.0)
        self.assertEqual(profile.fixed_rent, 0.0)
        self.assertEqual(profile.age, 30)
        score = compute_health_index(profile)["score"]
        self.assertTrue(0 <= score <= 100)

    def test_with_updates_returns_new_profile(self) -> None:
        original = HouseholdProfile.from_mapping({"incomeSelf": 50000})
        updated = original.with_updates({"incomeSelf": 80000, "fixedRent": "bad"})
        self.assertEqual(original.income_self, 50000.0)
        self.assertEqual(updated.income_self, 80000.0)
        self.assertEqual(updated.fixed_rent, 0.0)

    def test_to_dict_uses_wire_keys(self) -> None:
        data = HouseholdProfile.from_mapping({"invMF": 10, "emergencyFund": 5}).to_dict()
        self.assertEqual(data["invMF"], 10.0)
        self.assertEqual(data["emergencyFund"], 5.0)
        self.assertEqual(HouseholdProfile.from_mapping(data), HouseholdProfile.from_mapping({"invMF": 10, "emergencyFund": 5}))


class DerivedTotalsTests(unittest.TestCase):
    def test_totals_for_sample_household(self) -> None:
        profile = HouseholdProfile.from_mapping(
            {
                "incomeSelf": 80000,
                "incomeSpouse": 20000,
                "fixedRent": 20000,
                "fixedFood": 15000,
                "varShopping": 5000,
                "varWifi": 1000,
                "invStocks": 100000,
                "invGold": 50000,
            }
        )
        totals = derive_totals(profile)
        self.assertEqual(totals.total_income, 100000)
        self.assertEqual(totals.fixed_total, 35000)
        self.assertEqual(totals.variable_total, 6000)
        self.assertEqual(totals.total_expenses, 41000)
        self.assertEqual(totals.monthly_savings, 59000)
        self.assertAlmostEqual(totals.savings_rate, 0.59)
        self.assertEqual(totals.total_investments, 150000)

    def test_deficit_floors_savings_at_zero(self) -> None:
        totals = derive_totals(HouseholdProfile.from_mapping({"incomeSelf": 30000, "fixedRent": 45000}))
        self.assertEqual(totals.monthly_savings, 0)
        self.assertEqual(totals.monthly_deficit, 15000)
        self.assertEqual(totals.savings_rate, 0)

    def test_zero_income_has_zero_savings_rate(self) -> None:
        totals = derive_totals(HouseholdProfile.from_mapping({"fixedRent": 10000}))
        self.assertEqual(totals.savings_rate, 0.0)


if __name__ == "__main__":
    unittest.main()
