from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Mapping, Tuple


@dataclass(frozen=True)
class ActionBlueprint:
    key: str
    title: str
    detail: str
    tag: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ActionItem:
    key: str
    title: str
    detail: str
    tag: str
    done: bool = False

    @classmethod
    def from_blueprint(cls, blueprint: ActionBlueprint) -> "ActionItem":
        return cls(key=blueprint.key, title=blueprint.title, detail=blueprint.detail, tag=blueprint.tag)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ActionItem":
        return cls(
            key=str(data.get("key") or ""),
            title=str(data.get("title") or ""),
            detail=str(data.get("detail") or ""),
            tag=str(data.get("tag") or ""),
            done=bool(data.get("done", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_BLUEPRINTS = (
    ActionBlueprint(
        key="build_emergency_fund",
        title="Build a 6-month emergency fund",
        detail="Park one month of expenses at a time in a liquid fund or sweep FD until six months are covered.",
        tag="safety",
    ),
    ActionBlueprint(
        key="automate_savings",
        title="Automate savings on payday",
        detail="Set a standing instruction that moves at least 20% of take-home pay to savings the day salary lands.",
        tag="savings",
    ),
    ActionBlueprint(
        key="cut_wants",
        title="Trim discretionary spending",
        detail="Review entertainment, shopping and subscriptions and cap wants at 30% of income.",
        tag="spending",
    ),
    ActionBlueprint(
        key="prepay_costliest_loan",
        title="Prepay the costliest loan",
        detail="Direct surplus towards the loan with the highest interest rate to cut the EMI burden faster.",
        tag="debt",
    ),
    ActionBlueprint(
        key="avoid_new_debt",
        title="Pause new borrowing",
        detail="Hold off on new EMIs until total repayments fall below 30% of income.",
        tag="debt",
    ),
    ActionBlueprint(
        key="buy_health_cover",
        title="Top up family health insurance",
        detail="Buy a family floater or super top-up so cover meets the benchmark for your city and dependents.",
        tag="protection",
    ),
    ActionBlueprint(
        key="buy_term_cover",
        title="Buy pure term life cover",
        detail="A term plan sized to 10-15 times annual income protects dependents at low cost.",
        tag="protection",
    ),
    ActionBlueprint(
        key="start_sip",
        title="Start a monthly SIP",
        detail="Invest a fixed amount every month in a diversified index fund towards your FIRE corpus.",
        tag="investing",
    ),
    ActionBlueprint(
        key="step_up_sip",
        title="Step up your SIP every year",
        detail="Raise the SIP amount by 10% each year in line with income growth.",
        tag="investing",
    ),
    ActionBlueprint(
        key="diversify_portfolio",
        title="Diversify across asset classes",
        detail="Rebalance so no single asset class dominates; add debt and gold alongside equity.",
        tag="investing",
    ),
    ActionBlueprint(
        key="stabilise_income",
        title="Smooth irregular income",
        detail="Pay yourself a fixed monthly salary from a separate income buffer account.",
        tag="income",
    ),
)

ACTION_BLUEPRINTS: Dict[str, ActionBlueprint] = {item.key: item for item in _BLUEPRINTS}


def accept_action(items: Tuple[ActionItem, ...], blueprint: ActionBlueprint) -> Tuple[ActionItem, ...]:
    if any(item.key == blueprint.key for item in items):
        return items
    return items + (ActionItem.from_blueprint(blueprint),)


def toggle_action(items: Tuple[ActionItem, ...], key: str) -> Tuple[ActionItem, ...]:
    if not any(item.key == key for item in items):
        raise KeyError(key)
    return tuple(replace(item, done=not item.done) if item.key == key else item for item in items)


def clear_completed(items: Tuple[ActionItem, ...]) -> Tuple[ActionItem, ...]:
    return tuple(item for item in items if not item.done)
