from __future__ import annotations

from typing import Any, Dict, Optional

from config.settings import Settings
from services.api_client import CandidateApiClient
from stores.registry import register


class ApiCandidateStore:
    """Candidate store backed by the candidate REST API."""

    name = "api"

    def __init__(self, client: CandidateApiClient):
        self.client = client

    def exists(self, member_id: str) -> bool:
        return self.client.check(member_id) is not None

    def get(self, member_id: str) -> Optional[Dict[str, Any]]:
        return self.client.check(member_id)

    def append(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.upsert(record)

    def update(self, member_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        # The API has no partial update; re-post the stored record with the edits applied
        current = self.client.check(member_id)
        if current is None:
            return None
        merged = {**current, **{k: v for k, v in fields.items() if v is not None}}
        return self.client.upsert(merged)

    def delete(self, member_id: str) -> bool:
        return self.client.delete(member_id) is not None

    def count(self) -> int:
        body = self.client.list(page=1, limit=1)
        return int((body.get("pagination") or {}).get("totalCount") or 0)


def _from_settings(settings: Settings) -> ApiCandidateStore:
    if not settings.api_base_url:
        raise RuntimeError("API_BASE_URL required for the api store")
    client = CandidateApiClient(
        settings.api_base_url,
        timeout=settings.http_timeout_seconds,
        blocked_fragments=settings.blocked_url_fragments,
        allow_private_hosts=settings.allow_private_hosts,
    )
    return ApiCandidateStore(client)


def _register():
    register(ApiCandidateStore.name, _from_settings)


_register()
