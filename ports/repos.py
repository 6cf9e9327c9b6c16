from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol


class CandidatesRepoPort(Protocol):
    def upsert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def get(self, member_id: str) -> Optional[Dict[str, Any]]:
        ...

    def exists(self, member_id: str) -> bool:
        ...

    def count(self) -> int:
        ...

    def list_page(self, page: int = 1, limit: int = 50) -> List[Dict[str, Any]]:
        ...

    def update_fields(self, member_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ...

    def delete(self, member_id: str) -> Optional[Dict[str, Any]]:
        ...
