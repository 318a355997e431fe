from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from finhealth.auth import current_user
from finhealth.engine import (
    FireAssumptions,
    compute_health_index,
    derive_swot,
    derive_totals,
    fire_what_if,
    project_fire,
    suggestions_for_finding,
)
from finhealth.services.profiles import resolve_profile, respond
from finhealth.services.store import get_store

router = APIRouter(prefix="/insights", tags=["insights"])


class ScoreRequest(BaseModel):
    profile: Dict[str, Any] | None = None


class FireRequest(BaseModel):
    profile: Dict[str, Any] | None = None
    assumptions: Dict[str, Any] = {}
    variants: list[Dict[str, Any]] | None = None


@router.post("/score")
def score(payload: ScoreRequest, user=Depends(current_user)):
    profile, notice = resolve_profile(get_store(), user.get("sub"), payload.profile)
    totals = derive_totals(profile)
    health = compute_health_index(profile, totals)
    return respond(
        {
            "totals": totals.to_dict(),
            "health_index": health,
            "swot": derive_swot(health, profile),
        },
        notice,
    )


@router.post("/fire")
def fire(payload: FireRequest, user=Depends(current_user)):
    profile, notice = resolve_profile(get_store(), user.get("sub"), payload.profile)
    totals = derive_totals(profile)
    assumptions = FireAssumptions.from_mapping(payload.assumptions)
    return respond(
        {
            "projection": project_fire(profile, totals, assumptions),
            "what_if": fire_what_if(profile, totals, assumptions, payload.variants),
        },
        notice,
    )


@router.get("/findings/{finding_id}/suggestions")
def finding_suggestions(finding_id: str, user=Depends(current_user)):
    suggestions = suggestions_for_finding(finding_id)
    if not suggestions and not finding_id.endswith("_fallback"):
        raise HTTPException(status_code=404, detail=f"Unknown finding: {finding_id}")
    return {
        "status": "ok",
        "finding_id": finding_id,
        "suggestions": [item.to_dict() for item in suggestions],
    }
