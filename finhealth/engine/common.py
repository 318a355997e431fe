from __future__ import annotations

import hashlib
import json
import math
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

UTC = timezone.utc
ENGINE_VERSION = "finhealth-engine-v1.0.0"
# Upper bound for any single amount so sums and compounding stay finite.
MAX_AMOUNT = 1e15


def new_trace_id(trace_id: str | None = None) -> str:
    return trace_id or f"trc_{uuid.uuid4().hex[:10]}"


def canonical_hash(payload: Dict[str, Any]) -> str:
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


def now_utc() -> datetime:
    return datetime.now(tz=UTC)


def iso_utc(value: datetime | None = None) -> str:
    dt = (value or now_utc()).astimezone(UTC).replace(microsecond=0)
    return dt.isoformat().replace("+00:00", "Z")


def safe_float(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # ints beyond float range are treated like infinity
            return default
    else:
        text = str(value).strip().replace(",", "").replace(" ", "")
        if not text:
            return default
        try:
            number = float(text)
        except ValueError:
            return default
    if not math.isfinite(number):
        return default
    return number


def safe_amount(value: Any) -> float:
    """Coerce user input to a non-negative finite number, 0 when unusable."""
    return min(MAX_AMOUNT, max(0.0, safe_float(value)))


def safe_count(value: Any, default: int = 0) -> int:
    number = safe_float(value, float(default))
    return max(0, int(number))


def safe_ratio(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def round_money(value: float) -> float:
    return round(max(0.0, value), 2)


def build_output(
    *,
    tool_name: str,
    tool_input: Dict[str, Any],
    payload: Dict[str, Any],
    trace_id: str,
    started_at: datetime,
) -> Dict[str, Any]:
    duration_ms = max(0, int((now_utc() - started_at).total_seconds() * 1000))
    output = dict(payload)
    output.update(
        {
            "trace_id": trace_id,
            "version": ENGINE_VERSION,
            "params_hash": canonical_hash(tool_input),
            "audit": {
                "tool_name": tool_name,
                "duration_ms": duration_ms,
            },
        }
    )
    return output
