from __future__ import annotations

import statistics
from typing import Any, Dict, List

from finhealth.engine.common import safe_float


def history_trend(entries: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Summarize checkpoints ordered oldest to newest."""
    scores = [safe_float(item.get("pfi")) for item in entries]
    if not scores:
        return {
            "count": 0,
            "first": None,
            "latest": None,
            "change": 0,
            "best": None,
            "worst": None,
            "average": None,
            "direction": "none",
        }

    change = scores[-1] - scores[0]
    if len(scores) < 2 or change == 0:
        direction = "flat"
    else:
        direction = "up" if change > 0 else "down"

    return {
        "count": len(scores),
        "first": int(scores[0]),
        "latest": int(scores[-1]),
        "change": int(change),
        "best": int(max(scores)),
        "worst": int(min(scores)),
        "average": round(statistics.fmean(scores), 1),
        "direction": direction,
    }
