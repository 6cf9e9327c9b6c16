from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from stores.registry import register

_EDITABLE = ("designation", "notes", "processed_by", "years_at_current", "total_experience")


class MemoryCandidateStore:
    """Process-local store; used by tests and dry runs."""

    name = "memory"

    def __init__(self):
        self._rows: Dict[str, Dict[str, Any]] = {}

    def exists(self, member_id: str) -> bool:
        return member_id in self._rows

    def get(self, member_id: str) -> Optional[Dict[str, Any]]:
        row = self._rows.get(member_id)
        return dict(row) if row is not None else None

    def append(self, record: Dict[str, Any]) -> Dict[str, Any]:
        member_id = record["member_id"]
        now = datetime.now(timezone.utc).isoformat()
        row = self._rows.get(member_id) or {"created_at": now}
        # Same rule as the database upsert: None and an empty skill list never overwrite
        for key, value in record.items():
            if value is not None and value != []:
                row[key] = value
        row["updated_at"] = now
        self._rows[member_id] = row
        return dict(row)

    def update(self, member_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        row = self._rows.get(member_id)
        if row is None:
            return None
        for key in _EDITABLE:
            if fields.get(key) is not None:
                row[key] = fields[key]
        row["updated_at"] = datetime.now(timezone.utc).isoformat()
        return dict(row)

    def delete(self, member_id: str) -> bool:
        return self._rows.pop(member_id, None) is not None

    def count(self) -> int:
        return len(self._rows)


def _register():
    register(MemoryCandidateStore.name, lambda settings: MemoryCandidateStore())


_register()
