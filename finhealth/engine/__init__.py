from .actions import (
    ACTION_BLUEPRINTS,
    ActionBlueprint,
    ActionItem,
    accept_action,
    clear_completed,
    toggle_action,
)
from .fire import FireAssumptions, annuity_factor, fire_what_if, project_corpus, project_fire
from .health import compute_health_index
from .profile import HouseholdProfile
from .swot import SWOT_RULES, derive_swot, suggestions_for_finding
from .totals import DerivedTotals, derive_totals

__all__ = [
    "HouseholdProfile",
    "DerivedTotals",
    "derive_totals",
    "compute_health_index",
    "FireAssumptions",
    "project_fire",
    "project_corpus",
    "annuity_factor",
    "fire_what_if",
    "SWOT_RULES",
    "derive_swot",
    "suggestions_for_finding",
    "ACTION_BLUEPRINTS",
    "ActionBlueprint",
    "ActionItem",
    "accept_action",
    "toggle_action",
    "clear_completed",
]
