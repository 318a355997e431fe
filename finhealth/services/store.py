from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Protocol

from finhealth import config
from finhealth.engine.common import iso_utc

logger = logging.getLogger(__name__)


def clamp_pfi(value: Any) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if number != number:
        return 0
    return max(0, min(100, int(round(number))))


class FinHealthStore(Protocol):
    def get_profile(self, user_id: str) -> Dict[str, Any] | None: ...

    def save_profile(self, user_id: str, profile: Dict[str, Any]) -> None: ...

    def append_checkpoint(self, user_id: str, pfi: Any, created_at: datetime | None = None) -> str: ...

    def list_checkpoints(self, user_id: str) -> List[Dict[str, Any]]: ...

    def delete_last_checkpoint(self, user_id: str) -> Dict[str, Any] | None: ...

    def get_actions(self, user_id: str) -> List[Dict[str, Any]]: ...

    def save_actions(self, user_id: str, actions: List[Dict[str, Any]]) -> None: ...


@dataclass
class InMemoryStore:
    profiles: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    checkpoints: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    actions: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    _sequence: int = 0

    def get_profile(self, user_id: str) -> Dict[str, Any] | None:
        profile = self.profiles.get(user_id)
        return dict(profile) if profile is not None else None

    def save_profile(self, user_id: str, profile: Dict[str, Any]) -> None:
        self.profiles[user_id] = dict(profile)

    def append_checkpoint(self, user_id: str, pfi: Any, created_at: datetime | None = None) -> str:
        self._sequence += 1
        record = {
            "id": f"chk_{self._sequence}",
            "pfi": clamp_pfi(pfi),
            "created_at": iso_utc(created_at),
        }
        self.checkpoints.setdefault(user_id, []).append(record)
        return record["id"]

    def list_checkpoints(self, user_id: str) -> List[Dict[str, Any]]:
        return [dict(item) for item in self.checkpoints.get(user_id, [])]

    def delete_last_checkpoint(self, user_id: str) -> Dict[str, Any] | None:
        entries = self.checkpoints.get(user_id)
        if not entries:
            return None
        return entries.pop()

    def get_actions(self, user_id: str) -> List[Dict[str, Any]]:
        return [dict(item) for item in self.actions.get(user_id, [])]

    def save_actions(self, user_id: str, actions: List[Dict[str, Any]]) -> None:
        self.actions[user_id] = [dict(item) for item in actions]


store = InMemoryStore()
_supabase_store: FinHealthStore | None = None


def get_store() -> FinHealthStore:
    global _supabase_store
    if config.STORAGE_BACKEND != "supabase":
        return store
    if _supabase_store is None:
        from finhealth.services.supabase_store import SupabaseStore

        _supabase_store = SupabaseStore()
        logger.info("Using Supabase storage backend")
    return _supabase_store
