from __future__ import annotations

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Header
from pydantic import BaseModel, Field, ValidationError

from finhealth.auth import verify_jwt
from finhealth.engine import (
    FireAssumptions,
    compute_health_index,
    derive_swot,
    derive_totals,
    fire_what_if,
    project_fire,
)
from finhealth.engine.common import build_output, new_trace_id, now_utc
from finhealth.services.profiles import resolve_profile
from finhealth.services.store import get_store

router = APIRouter(tags=["mcp"])
logger = logging.getLogger(__name__)


class ScoreInput(BaseModel):
    profile: Dict[str, Any] | None = None
    trace_id: str | None = None


class FireInput(BaseModel):
    profile: Dict[str, Any] | None = None
    fire_multiple: float | None = Field(default=None, gt=0, le=100)
    fire_type: str | None = Field(default=None, pattern=r"^(lean|normal|fat)$")
    target_age: int | None = Field(default=None, ge=0, le=120)
    years_to_target: int | None = Field(default=None, ge=0, le=100)
    expected_annual_return: float | None = Field(default=None, ge=0, le=100)
    annual_inflation: float | None = Field(default=None, ge=0, le=100)
    trace_id: str | None = None

    def assumptions(self) -> FireAssumptions:
        return FireAssumptions.from_mapping(
            self.model_dump(exclude={"profile", "trace_id"}, exclude_none=True)
        )


class WhatIfInput(FireInput):
    variants: list[Dict[str, Any]] | None = None


_PROFILE_SCHEMA = {"type": "object", "description": "Household profile; stored profile is used when omitted."}
_FIRE_PROPERTIES = {
    "profile": _PROFILE_SCHEMA,
    "fire_multiple": {"type": "number"},
    "fire_type": {"type": "string", "enum": ["lean", "normal", "fat"]},
    "target_age": {"type": "integer"},
    "years_to_target": {"type": "integer"},
    "expected_annual_return": {"type": "number", "description": "Percent, e.g. 12"},
    "annual_inflation": {"type": "number", "description": "Percent, e.g. 6"},
    "trace_id": {"type": "string"},
}

TOOL_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "finhealth_score_v1": {
        "type": "object",
        "properties": {"profile": _PROFILE_SCHEMA, "trace_id": {"type": "string"}},
    },
    "swot_analysis_v1": {
        "type": "object",
        "properties": {"profile": _PROFILE_SCHEMA, "trace_id": {"type": "string"}},
    },
    "fire_projection_v1": {
        "type": "object",
        "properties": dict(_FIRE_PROPERTIES),
    },
    "fire_what_if_v1": {
        "type": "object",
        "properties": {**_FIRE_PROPERTIES, "variants": {"type": "array", "items": {"type": "object"}}},
    },
}


TOOLS_LIST = [
    {
        "name": "finhealth_score_v1",
        "description": "Composite 0-100 FinHealth score with pillars, band, comments and actions.",
        "inputSchema": TOOL_SCHEMAS["finhealth_score_v1"],
    },
    {
        "name": "swot_analysis_v1",
        "description": "Rule-based strengths, weaknesses, opportunities and threats with linked actions.",
        "inputSchema": TOOL_SCHEMAS["swot_analysis_v1"],
    },
    {
        "name": "fire_projection_v1",
        "description": "FIRE target corpus, required monthly SIP and lump sum needed today.",
        "inputSchema": TOOL_SCHEMAS["fire_projection_v1"],
    },
    {
        "name": "fire_what_if_v1",
        "description": "Compare projected corpora across return and contribution variants.",
        "inputSchema": TOOL_SCHEMAS["fire_what_if_v1"],
    },
]


def _jsonrpc_ok(id_value: Any, result: Dict[str, Any]) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": id_value, "result": result}


def _jsonrpc_error(id_value: Any, code: int, message: str, data: Any = None) -> Dict[str, Any]:
    payload = {"jsonrpc": "2.0", "id": id_value, "error": {"code": code, "message": message}}
    if data is not None:
        payload["error"]["data"] = data
    return payload


def _resolve_tool_name(name: str) -> str:
    if name in TOOL_SCHEMAS:
        return name
    if "___" in name:
        suffix = name.split("___")[-1]
        if suffix in TOOL_SCHEMAS:
            return suffix
    return name


def _run_tool(tool_name: str, arguments: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    started_at = now_utc()
    if tool_name in {"finhealth_score_v1", "swot_analysis_v1"}:
        args = ScoreInput.model_validate(arguments)
    elif tool_name == "fire_projection_v1":
        args = FireInput.model_validate(arguments)
    else:
        args = WhatIfInput.model_validate(arguments)

    profile, notice = resolve_profile(get_store(), user_id, args.profile)
    totals = derive_totals(profile)

    if tool_name == "finhealth_score_v1":
        payload: Dict[str, Any] = {"totals": totals.to_dict(), **compute_health_index(profile, totals)}
    elif tool_name == "swot_analysis_v1":
        payload = derive_swot(compute_health_index(profile, totals), profile)
    elif tool_name == "fire_projection_v1":
        payload = project_fire(profile, totals, args.assumptions())
    else:
        payload = fire_what_if(profile, totals, args.assumptions(), args.variants)

    if notice:
        payload["notice"] = notice
    return build_output(
        tool_name=tool_name,
        tool_input={"profile": profile.to_dict(), **args.model_dump(exclude={"profile", "trace_id"})},
        payload=payload,
        trace_id=new_trace_id(args.trace_id),
        started_at=started_at,
    )


@router.get("/mcp")
def mcp_health() -> str:
    return "MCP endpoint ready. Use POST /mcp for JSON-RPC."


@router.post("/mcp")
def mcp_jsonrpc(payload: Dict[str, Any], authorization: str | None = Header(default=None)) -> Dict[str, Any]:
    req_id = payload.get("id")
    method = payload.get("method")

    if payload.get("jsonrpc") != "2.0" or not method:
        return _jsonrpc_error(req_id, -32600, "Invalid Request")

    if method == "initialize":
        return _jsonrpc_ok(
            req_id,
            {
                "protocolVersion": "2025-06-18",
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": {"name": "finhealth-mcp-server", "version": "0.1.0"},
            },
        )

    if method == "tools/list":
        return _jsonrpc_ok(req_id, {"tools": TOOLS_LIST})

    if method != "tools/call":
        return _jsonrpc_error(req_id, -32601, f"Method not found: {method}")

    try:
        user = verify_jwt(authorization)
    except Exception as exc:
        return _jsonrpc_error(req_id, -32001, "Unauthorized", str(exc))

    params = payload.get("params") or {}
    requested_name = str(params.get("name") or "")
    arguments = params.get("arguments") or {}
    tool_name = _resolve_tool_name(requested_name)
    if tool_name not in TOOL_SCHEMAS:
        return _jsonrpc_error(req_id, -32601, f"Unknown tool: {requested_name}")

    try:
        result = _run_tool(tool_name, arguments, user.get("sub", ""))
    except ValidationError as exc:
        return _jsonrpc_error(req_id, -32602, "Invalid tool arguments", exc.errors(include_url=False))
    except Exception as exc:
        logger.exception("MCP tool execution failed: tool=%s error=%s", tool_name, exc)
        return _jsonrpc_error(
            req_id,
            -32000,
            "Tool execution failed",
            {"tool": tool_name, "error_type": type(exc).__name__, "message": str(exc)},
        )

    return _jsonrpc_ok(req_id, {"content": [{"type": "text", "text": json.dumps(result)}]})
