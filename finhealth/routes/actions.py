from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from finhealth.auth import current_user
from finhealth.engine import ACTION_BLUEPRINTS, ActionItem, accept_action, clear_completed, toggle_action
from finhealth.services.profiles import guarded, respond
from finhealth.services.store import get_store

router = APIRouter(prefix="/actions", tags=["actions"])


class AcceptPayload(BaseModel):
    key: str


def _load(user_id: str):
    rows, notice = guarded("load actions", lambda: get_store().get_actions(user_id), [])
    return tuple(ActionItem.from_mapping(row) for row in rows), notice


def _save(user_id: str, items):
    _, notice = guarded("save actions", lambda: get_store().save_actions(user_id, [item.to_dict() for item in items]), None)
    return notice


@router.get("")
def list_actions(user=Depends(current_user)):
    items, notice = _load(user.get("sub"))
    return respond({"actions": [item.to_dict() for item in items]}, notice)


@router.post("")
def accept(payload: AcceptPayload, user=Depends(current_user)):
    blueprint = ACTION_BLUEPRINTS.get(payload.key)
    if blueprint is None:
        raise HTTPException(status_code=404, detail=f"Unknown action: {payload.key}")
    items, load_notice = _load(user.get("sub"))
    items = accept_action(items, blueprint)
    save_notice = _save(user.get("sub"), items)
    return respond({"actions": [item.to_dict() for item in items]}, load_notice, save_notice)


@router.post("/{key}/toggle")
def toggle(key: str, user=Depends(current_user)):
    items, load_notice = _load(user.get("sub"))
    try:
        items = toggle_action(items, key)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Action not accepted: {key}") from exc
    save_notice = _save(user.get("sub"), items)
    return respond({"actions": [item.to_dict() for item in items]}, load_notice, save_notice)


@router.delete("/completed")
def clear(user=Depends(current_user)):
    items, load_notice = _load(user.get("sub"))
    items = clear_completed(items)
    save_notice = _save(user.get("sub"), items)
    return respond({"actions": [item.to_dict() for item in items]}, load_notice, save_notice)
