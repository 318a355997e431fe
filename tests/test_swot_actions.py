from __future__ import annotations

import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from finhealth.engine import (  # noqa: E402
    ACTION_BLUEPRINTS,
    SWOT_RULES,
    ActionItem,
    HouseholdProfile,
    accept_action,
    clear_completed,
    compute_health_index,
    derive_swot,
    suggestions_for_finding,
    toggle_action,
)
from finhealth.engine.swot import CATEGORIES  # noqa: E402

SAMPLE_PROFILE = {
    "incomeSelf": 100000,
    "fixedRent": 20000,
    "fixedFood": 15000,
    "fixedUtilities": 5000,
    "fixedMedical": 2000,
    "emergencyFund": 300000,
    "healthCover": 1000000,
    "lifeCover": 12000000,
}

STRAINED_PROFILE = {
    "age": 42,
    "dependents": 3,
    "employmentType": "freelancer",
    "incomeSelf": 60000,
    "incomeVariable": 50000,
    "fixedRent": 55000,
    "fixedFood": 20000,
    "varShopping": 30000,
    "varEntertainment": 15000,
    "totalEmi": 50000,
    "loanOutstanding": 2500000,
    "emergencyFund": 20000,
    "healthCover": 200000,
    "invStocks": 90000,
    "invGold": 10000,
}


def _swot(raw):
    profile = HouseholdProfile.from_mapping(raw)
    return derive_swot(compute_health_index(profile), profile)


def _ids(findings):
    return [item["id"] for item in findings]


class SwotTests(unittest.TestCase):
    def test_every_category_is_populated(self) -> None:
        for raw in ({}, SAMPLE_PROFILE, STRAINED_PROFILE):
            result = _swot(raw)
            self.assertEqual(tuple(result), CATEGORIES)
            for category in CATEGORIES:
                self.assertGreaterEqual(len(result[category]), 1, category)

    def test_all_zero_profile_only_has_fallbacks(self) -> None:
        result = _swot({})
        for category in CATEGORIES:
            self.assertEqual(_ids(result[category]), [f"{category}_fallback"])
        self.assertTrue(result["weaknesses"][0]["label"])
        self.assertTrue(result["threats"][0]["label"])

    def test_sample_household_findings(self) -> None:
        result = _swot(SAMPLE_PROFILE)
        self.assertEqual(
            _ids(result["strengths"]),
            ["high_savings_rate", "debt_free", "strong_emergency_fund", "health_cover_adequate", "life_cover_adequate"],
        )
        self.assertEqual(_ids(result["weaknesses"]), ["low_investments"])
        self.assertEqual(_ids(result["opportunities"]), ["surplus_for_sip", "long_compounding_runway"])
        self.assertEqual(_ids(result["threats"]), ["threats_fallback"])
        self.assertEqual(result["strengths"][0]["label"], "Saving about 58% of income every month")

    def test_strained_household_threats(self) -> None:
        result = _swot(STRAINED_PROFILE)
        threats = _ids(result["threats"])
        for finding in (
            "heavy_emi_burden",
            "spending_exceeds_income",
            "no_emergency_buffer",
            "medical_cost_exposure",
            "dependents_unprotected",
            "irregular_income",
            "concentrated_portfolio",
        ):
            self.assertIn(finding, threats)
        self.assertIn("Expenses exceed income by", result["threats"][1]["label"])
        self.assertEqual(_ids(result["strengths"]), ["strengths_fallback"])

    def test_deterministic(self) -> None:
        self.assertEqual(_swot(STRAINED_PROFILE), _swot(STRAINED_PROFILE))

    def test_rule_actions_reference_known_blueprints(self) -> None:
        for rule in SWOT_RULES:
            self.assertIn(rule.category, CATEGORIES)
            for key in rule.action_keys:
                self.assertIn(key, ACTION_BLUEPRINTS, rule.id)

    def test_suggestions_for_finding(self) -> None:
        keys = [item.key for item in suggestions_for_finding("heavy_emi_burden")]
        self.assertEqual(keys, ["prepay_costliest_loan", "avoid_new_debt"])
        self.assertEqual(suggestions_for_finding("debt_free"), [])
        self.assertEqual(suggestions_for_finding("no_such_finding"), [])


class ActionListTests(unittest.TestCase):
    def test_accept_is_idempotent(self) -> None:
        blueprint = ACTION_BLUEPRINTS["start_sip"]
        items = accept_action((), blueprint)
        items = accept_action(items, blueprint)
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].title, blueprint.title)
        self.assertFalse(items[0].done)

    def test_toggle_and_clear_completed(self) -> None:
        items = accept_action((), ACTION_BLUEPRINTS["start_sip"])
        items = accept_action(items, ACTION_BLUEPRINTS["cut_wants"])
        items = toggle_action(items, "start_sip")
        self.assertEqual([item.done for item in items], [True, False])

        remaining = clear_completed(items)
        self.assertEqual([item.key for item in remaining], ["cut_wants"])
        self.assertEqual(len(items), 2)

    def test_toggle_unknown_key(self) -> None:
        with self.assertRaises(KeyError):
            toggle_action((), "start_sip")

    def test_item_round_trips_through_mapping(self) -> None:
        item = ActionItem.from_blueprint(ACTION_BLUEPRINTS["buy_term_cover"])
        self.assertEqual(ActionItem.from_mapping(item.to_dict()), item)


if __name__ == "__main__":
    unittest.main()
