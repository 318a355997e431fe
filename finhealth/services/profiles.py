from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Tuple, TypeVar

from finhealth.engine import HouseholdProfile
from finhealth.supabase_rest import SupabaseRestError

from .store import FinHealthStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

PERSISTENCE_NOTICE = "Could not reach storage; results are computed from the data in this request."


def guarded(action: str, call: Callable[[], T], fallback: T) -> Tuple[T, str | None]:
    """Run a storage call; a persistence failure becomes a notice, never an error."""
    try:
        return call(), None
    except SupabaseRestError as exc:
        logger.warning("Storage %s failed: %s", action, exc)
        return fallback, PERSISTENCE_NOTICE


def resolve_profile(
    store: FinHealthStore,
    user_id: str,
    inline: Mapping[str, Any] | None = None,
) -> Tuple[HouseholdProfile, str | None]:
    if inline is not None:
        return HouseholdProfile.from_mapping(inline), None
    stored, notice = guarded("load profile", lambda: store.get_profile(user_id), None)
    return HouseholdProfile.from_mapping(stored), notice


def respond(payload: Dict[str, Any], *notices: str | None) -> Dict[str, Any]:
    messages = [notice for notice in notices if notice]
    body = {"status": "degraded" if messages else "ok", **payload}
    if messages:
        body["notice"] = messages[0]
    return body
