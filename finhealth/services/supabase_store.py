from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from finhealth.engine.common import iso_utc
from finhealth.supabase_rest import SupabaseRestClient, SupabaseRestError, get_supabase_client

from .store import clamp_pfi

PROFILE_TABLE = "household_profiles"
CHECKPOINT_TABLE = "score_checkpoints"
ACTION_TABLE = "action_items"


class SupabaseStore:
    """PostgREST-backed storage. Errors surface as ``SupabaseRestError``."""

    def __init__(self, client: SupabaseRestClient | None = None) -> None:
        self.client = client or get_supabase_client()

    def get_profile(self, user_id: str) -> Dict[str, Any] | None:
        rows = self.client.fetch_rows(
            PROFILE_TABLE,
            select="user_id,data,updated_at",
            filters={"user_id": f"eq.{user_id}"},
            limit=1,
        )
        if not rows:
            return None
        data = rows[0].get("data")
        return dict(data) if isinstance(data, dict) else {}

    def save_profile(self, user_id: str, profile: Dict[str, Any]) -> None:
        self.client.upsert_rows(
            PROFILE_TABLE,
            [{"user_id": user_id, "data": profile, "updated_at": iso_utc()}],
            on_conflict="user_id",
        )

    def append_checkpoint(self, user_id: str, pfi: Any, created_at: datetime | None = None) -> str:
        created = self.client.insert_rows(
            CHECKPOINT_TABLE,
            [{"user_id": user_id, "pfi": clamp_pfi(pfi), "created_at": iso_utc(created_at)}],
        )
        checkpoint_id = str(created[0].get("id") or "") if created else ""
        if not checkpoint_id:
            raise SupabaseRestError(f"Insert into {CHECKPOINT_TABLE} returned no id")
        return checkpoint_id

    def list_checkpoints(self, user_id: str) -> List[Dict[str, Any]]:
        rows = self.client.fetch_rows(
            CHECKPOINT_TABLE,
            select="id,pfi,created_at",
            filters={"user_id": f"eq.{user_id}"},
            order="created_at.asc,id.asc",
        )
        return [
            {"id": str(row.get("id") or ""), "pfi": clamp_pfi(row.get("pfi")), "created_at": row.get("created_at")}
            for row in rows
        ]

    def delete_last_checkpoint(self, user_id: str) -> Dict[str, Any] | None:
        rows = self.client.fetch_rows(
            CHECKPOINT_TABLE,
            select="id,pfi,created_at",
            filters={"user_id": f"eq.{user_id}"},
            order="created_at.desc,id.desc",
            limit=1,
        )
        if not rows:
            return None
        last = rows[0]
        self.client.delete_rows(
            CHECKPOINT_TABLE,
            filters={"user_id": f"eq.{user_id}", "id": f"eq.{last.get('id')}"},
        )
        return {"id": str(last.get("id") or ""), "pfi": clamp_pfi(last.get("pfi")), "created_at": last.get("created_at")}

    def get_actions(self, user_id: str) -> List[Dict[str, Any]]:
        rows = self.client.fetch_rows(
            ACTION_TABLE,
            select="key,title,detail,tag,done,position",
            filters={"user_id": f"eq.{user_id}"},
            order="position.asc",
        )
        return [{key: row.get(key) for key in ("key", "title", "detail", "tag", "done")} for row in rows]

    def save_actions(self, user_id: str, actions: List[Dict[str, Any]]) -> None:
        self.client.delete_rows(ACTION_TABLE, filters={"user_id": f"eq.{user_id}"})
        self.client.insert_rows(
            ACTION_TABLE,
            [{**item, "user_id": user_id, "position": index} for index, item in enumerate(actions)],
        )
