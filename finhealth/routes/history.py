from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from finhealth.auth import current_user
from finhealth.engine import compute_health_index
from finhealth.services.history import history_trend
from finhealth.services.profiles import guarded, resolve_profile, respond
from finhealth.services.store import get_store

router = APIRouter(prefix="/history", tags=["history"])


class CheckpointRequest(BaseModel):
    profile: Dict[str, Any] | None = None


@router.get("")
def list_history(user=Depends(current_user)):
    entries, notice = guarded("list checkpoints", lambda: get_store().list_checkpoints(user.get("sub")), [])
    return respond({"entries": entries, "trend": history_trend(entries)}, notice)


@router.post("")
def save_checkpoint(payload: CheckpointRequest, user=Depends(current_user)):
    store = get_store()
    user_id = user.get("sub")
    profile, load_notice = resolve_profile(store, user_id, payload.profile)
    pfi = compute_health_index(profile)["score"]
    checkpoint_id, save_notice = guarded("append checkpoint", lambda: store.append_checkpoint(user_id, pfi), None)
    return respond({"checkpoint_id": checkpoint_id, "pfi": pfi, "saved": bool(checkpoint_id)}, load_notice, save_notice)


@router.delete("/last")
def delete_last_checkpoint(user=Depends(current_user)):
    removed, notice = guarded("delete checkpoint", lambda: get_store().delete_last_checkpoint(user.get("sub")), None)
    return respond({"removed": removed}, notice)
