from __future__ import annotations

from typing import Any, Dict, Optional, Protocol


class CandidateStorePort(Protocol):
    """Anything that can hold captured candidates: the REST API, a local database, memory."""

    name: str

    def exists(self, member_id: str) -> bool:
        ...

    def get(self, member_id: str) -> Optional[Dict[str, Any]]:
        ...

    def append(self, record: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def update(self, member_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ...

    def delete(self, member_id: str) -> bool:
        ...

    def count(self) -> int:
        ...
