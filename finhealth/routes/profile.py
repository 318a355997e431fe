from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from finhealth.auth import current_user
from finhealth.engine import HouseholdProfile, derive_totals
from finhealth.services.profiles import guarded, resolve_profile, respond
from finhealth.services.store import get_store

router = APIRouter(prefix="/profile", tags=["profile"])


def _profile_body(profile: HouseholdProfile) -> Dict[str, Any]:
    return {"profile": profile.to_dict(), "totals": derive_totals(profile).to_dict()}


@router.get("")
def get_profile(user=Depends(current_user)):
    profile, notice = resolve_profile(get_store(), user.get("sub"))
    return respond(_profile_body(profile), notice)


@router.put("")
def replace_profile(payload: Dict[str, Any], user=Depends(current_user)):
    store = get_store()
    profile = HouseholdProfile.from_mapping(payload)
    _, notice = guarded("save profile", lambda: store.save_profile(user.get("sub"), profile.to_dict()), None)
    return respond(_profile_body(profile), notice)


@router.patch("")
def patch_profile(payload: Dict[str, Any], user=Depends(current_user)):
    store = get_store()
    current, load_notice = resolve_profile(store, user.get("sub"))
    profile = current.with_updates(payload)
    _, save_notice = guarded("save profile", lambda: store.save_profile(user.get("sub"), profile.to_dict()), None)
    return respond(_profile_body(profile), load_notice, save_notice)
