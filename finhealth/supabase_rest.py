from __future__ import annotations

from typing import Any, Dict, List

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from finhealth import config

DEFAULT_TIMEOUT = 20


class SupabaseRestError(RuntimeError):
    pass


class SupabaseRestClient:
    def __init__(
        self,
        *,
        supabase_url: str | None = None,
        service_key: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        url = (supabase_url or config.SUPABASE_URL).strip().rstrip("/")
        key = (service_key or config.SUPABASE_SERVICE_ROLE_KEY).strip()
        self.base_url = f"{url}/rest/v1" if url else ""
        self.timeout = timeout
        self._configured = bool(url and key)
        self.common_headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }

    @property
    def configured(self) -> bool:
        return self._configured

    def _ensure_configured(self) -> None:
        if not self.configured:
            raise SupabaseRestError(
                "Supabase is not configured. Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY."
            )

    @retry(
        retry=retry_if_exception_type(requests.RequestException),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
        reraise=True,
    )
    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """Send one HTTP request, retrying transient network failures."""
        return requests.request(method=method, url=url, timeout=self.timeout, **kwargs)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        payload: Any = None,
        headers: Dict[str, str] | None = None,
    ) -> Any:
        self._ensure_configured()
        merged_headers = dict(self.common_headers)
        if headers:
            merged_headers.update(headers)
        try:
            response = self._send(
                method,
                f"{self.base_url}{path}",
                params=params,
                json=payload,
                headers=merged_headers,
            )
        except requests.RequestException as exc:
            raise SupabaseRestError(f"Supabase {method} {path} failed: {exc}") from exc
        if response.status_code >= 400:
            snippet = response.text[:1200]
            raise SupabaseRestError(f"Supabase {method} {path} failed ({response.status_code}): {snippet}")
        content_type = response.headers.get("content-type", "")
        if response.text and "application/json" in content_type:
            return response.json()
        return None

    def fetch_rows(
        self,
        table: str,
        *,
        select: str = "*",
        filters: Dict[str, str] | None = None,
        order: str | None = None,
        limit: int | None = None,
        page_size: int = 1000,
    ) -> List[Dict[str, Any]]:
        filters = filters or {}
        rows: list[Dict[str, Any]] = []
        offset = 0
        while True:
            size = page_size if limit is None else min(page_size, limit - len(rows))
            params: Dict[str, Any] = {"select": select, "limit": size, "offset": offset}
            if order:
                params["order"] = order
            params.update(filters)
            page = self._request("GET", f"/{table}", params=params)
            if not isinstance(page, list):
                raise SupabaseRestError(f"Unexpected response type for table {table}")
            rows.extend(page)
            if len(page) < size or (limit is not None and len(rows) >= limit):
                break
            offset += size
        return rows

    def insert_rows(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if not rows:
            return []
        created = self._request(
            "POST",
            f"/{table}",
            payload=rows,
            headers={"Prefer": "return=representation"},
        )
        return created if isinstance(created, list) else []

    def upsert_rows(self, table: str, rows: List[Dict[str, Any]], *, on_conflict: str) -> None:
        if not rows:
            return
        self._request(
            "POST",
            f"/{table}",
            params={"on_conflict": on_conflict},
            payload=rows,
            headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
        )

    def delete_rows(self, table: str, *, filters: Dict[str, str]) -> None:
        if not filters:
            raise SupabaseRestError(f"Refusing to delete from {table} without filters")
        self._request(
            "DELETE",
            f"/{table}",
            params=filters,
            headers={"Prefer": "return=minimal"},
        )


_client: SupabaseRestClient | None = None


def get_supabase_client() -> SupabaseRestClient:
    global _client
    if _client is None:
        _client = SupabaseRestClient(timeout=config.SQL_TIMEOUT_SEC)
    return _client
