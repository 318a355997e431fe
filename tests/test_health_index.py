from __future__ import annotations

import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from finhealth.engine import HouseholdProfile, compute_health_index  # noqa: E402
from finhealth.engine.health import (  # noqa: E402
    FALLBACK_ACTION,
    PILLAR_MAX,
    band_for,
    debt_points,
    health_cover_benchmark,
    life_cover_multiple,
)

SAMPLE_PROFILE = {
    "incomeSelf": 100000,
    "fixedRent": 20000,
    "fixedFood": 15000,
    "fixedUtilities": 5000,
    "fixedMedical": 2000,
    "totalEmi": 0,
    "emergencyFund": 300000,
    "healthCover": 1000000,
    "lifeCover": 12000000,
}


class HealthIndexScenarioTests(unittest.TestCase):
    def test_sample_household(self) -> None:
        result = compute_health_index(HouseholdProfile.from_mapping(SAMPLE_PROFILE))
        metrics = result["metrics"]

        self.assertEqual(metrics["total_income"], 100000)
        self.assertEqual(metrics["total_expenses"], 42000)
        self.assertEqual(metrics["monthly_savings"], 58000)
        self.assertAlmostEqual(metrics["savings_rate"], 0.58)
        self.assertAlmostEqual(metrics["ef_months"], 7.1429, places=4)
        self.assertGreaterEqual(metrics["health_adequacy"], 1.0)
        self.assertGreaterEqual(metrics["life_adequacy"], 1.0)
        self.assertEqual(metrics["investment_coverage"], 0)

        pillars = result["pillars"]
        self.assertEqual(pillars["savings"], PILLAR_MAX["savings"])
        self.assertEqual(pillars["debt"], PILLAR_MAX["debt"])
        self.assertEqual(pillars["emergency_fund"], PILLAR_MAX["emergency_fund"])
        self.assertEqual(pillars["protection"], PILLAR_MAX["protection"])
        self.assertEqual(pillars["investments"], 0)
        self.assertEqual(result["score"], 90)
        self.assertEqual(result["band"], "strong")

    def test_all_zero_profile(self) -> None:
        result = compute_health_index(HouseholdProfile.from_mapping({}))
        self.assertEqual(result["score"], 0)
        self.assertEqual(result["band"], "critical")
        self.assertEqual(result["band_label"], "Critical")
        self.assertTrue(all(value == 0 for value in result["pillars"].values()))
        self.assertTrue(result["recommended_actions"])

    def test_zero_income_with_expenses(self) -> None:
        result = compute_health_index(HouseholdProfile.from_mapping({"fixedRent": 10000, "totalEmi": 5000}))
        self.assertEqual(result["metrics"]["savings_rate"], 0)
        self.assertEqual(result["metrics"]["emi_ratio"], 0)
        self.assertEqual(result["pillars"]["debt"], 0)
        self.assertEqual(result["pillars"]["savings"], 0)

    def test_zero_expenses_with_income(self) -> None:
        result = compute_health_index(
            HouseholdProfile.from_mapping({"incomeSelf": 50000, "emergencyFund": 10000, "invMF": 500000})
        )
        self.assertEqual(result["metrics"]["ef_months"], 0)
        self.assertEqual(result["metrics"]["investment_target"], 0)
        self.assertEqual(result["metrics"]["investment_coverage"], 0)
        self.assertEqual(result["pillars"]["investments"], 0)
        self.assertEqual(result["pillars"]["emergency_fund"], 0)
        self.assertEqual(result["pillars"]["savings"], PILLAR_MAX["savings"])

    def test_comments_cover_every_pillar(self) -> None:
        result = compute_health_index(HouseholdProfile.from_mapping(SAMPLE_PROFILE))
        self.assertEqual(set(result["comments"]), set(PILLAR_MAX))
        self.assertTrue(all(result["comments"].values()))

    def test_fallback_action_when_nothing_to_fix(self) -> None:
        profile = dict(SAMPLE_PROFILE, invMF=6000000)
        result = compute_health_index(HouseholdProfile.from_mapping(profile))
        self.assertEqual(result["score"], 100)
        self.assertEqual(result["recommended_actions"], [FALLBACK_ACTION])


class HealthIndexPropertyTests(unittest.TestCase):
    def test_score_is_bounded_integer_for_extreme_input(self) -> None:
        raw = {name: 1e300 for name in HouseholdProfile.field_names() if name not in {"age", "dependents", "employment_type", "city_tier"}}
        for profile in (
            HouseholdProfile.from_mapping(raw),
            HouseholdProfile.from_mapping({key: "nan" for key in raw}),
            HouseholdProfile.from_mapping({key: -1e9 for key in raw}),
            HouseholdProfile.from_mapping({"incomeSelf": 1, "fixedRent": 1e15}),
        ):
            result = compute_health_index(profile)
            self.assertIsInstance(result["score"], int)
            self.assertGreaterEqual(result["score"], 0)
            self.assertLessEqual(result["score"], 100)

    def test_more_emergency_fund_never_lowers_score(self) -> None:
        previous_score, previous_pillar = -1, -1.0
        for fund in (0, 10000, 42000, 90000, 130000, 170000, 260000, 400000, 10_000_000):
            profile = HouseholdProfile.from_mapping(dict(SAMPLE_PROFILE, emergencyFund=fund))
            result = compute_health_index(profile)
            self.assertGreaterEqual(result["pillars"]["emergency_fund"], previous_pillar)
            self.assertGreaterEqual(result["score"], previous_score)
            previous_score, previous_pillar = result["score"], result["pillars"]["emergency_fund"]

    def test_more_emi_never_raises_score(self) -> None:
        previous_score, previous_pillar = 101, 21.0
        for emi in (0, 5000, 10000, 15000, 20000, 30000, 45000, 50000, 80000):
            profile = HouseholdProfile.from_mapping(dict(SAMPLE_PROFILE, totalEmi=emi))
            result = compute_health_index(profile)
            self.assertLessEqual(result["pillars"]["debt"], previous_pillar)
            self.assertLessEqual(result["score"], previous_score)
            previous_score, previous_pillar = result["score"], result["pillars"]["debt"]

    def test_debt_points_at_cutoffs(self) -> None:
        self.assertEqual(debt_points(0.0, True), 20)
        self.assertEqual(debt_points(0.10, True), 18)
        self.assertEqual(debt_points(0.45, True), 3)
        self.assertEqual(debt_points(0.50, True), 0)
        self.assertEqual(debt_points(0.0, False), 0)

    def test_band_thresholds(self) -> None:
        cases = {
            0: "critical",
            29: "critical",
            30: "vulnerable",
            54: "vulnerable",
            55: "stable",
            69: "stable",
            70: "secure",
            84: "secure",
            85: "strong",
            100: "strong",
        }
        for score, band in cases.items():
            self.assertEqual(band_for(score)[0], band, score)

    def test_benchmarks_follow_city_and_dependents(self) -> None:
        metro = HouseholdProfile.from_mapping({"cityTier": "metro", "dependents": 2})
        tier3 = HouseholdProfile.from_mapping({"cityTier": "tier3", "dependents": 9})
        self.assertEqual(health_cover_benchmark(metro), 1_500_000)
        self.assertEqual(health_cover_benchmark(tier3), 1_500_000)
        self.assertEqual(life_cover_multiple(0), 10)
        self.assertEqual(life_cover_multiple(2), 12)
        self.assertEqual(life_cover_multiple(3), 15)

    def test_deterministic(self) -> None:
        profile = HouseholdProfile.from_mapping(dict(SAMPLE_PROFILE, totalEmi=12000, invStocks=40000))
        self.assertEqual(compute_health_index(profile), compute_health_index(profile))


if __name__ == "__main__":
    unittest.main()
