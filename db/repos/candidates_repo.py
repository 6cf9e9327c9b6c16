from __future__ import annotations

import json
import sqlite3
from typing import Any, Dict, List, Optional

from utils.number_parsing import parse_count

# Record fields in column order; top_skills is stored as JSON text
_FIELDS = (
    "member_id",
    "full_name",
    "profile_url",
    "headline",
    "location",
    "designation",
    "current_title",
    "industry",
    "school",
    "degree",
    "qualification",
    "passout_year",
    "years_at_current",
    "total_experience",
    "top_skills_json",
    "connections",
    "connections_num",
    "processed_by",
    "notes",
    "extracted_at",
)

# Columns a recruiter may edit after capture, keyed by update field name
_UPDATABLE = {
    "designation": "designation",
    "notes": "notes",
    "processed_by": "processed_by",
    "years_at_current": "years_at_current",
    "total_experience": "total_experience",
}

_SORT_ORDERS = {
    "recent": "created_at DESC, id DESC",
    "connections": "connections_num IS NULL, connections_num DESC, created_at DESC, id DESC",
}


def _row_to_dict(row: Optional[sqlite3.Row]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    data = dict(row)
    raw = data.pop("top_skills_json", None)
    try:
        data["top_skills"] = json.loads(raw) if raw else []
    except ValueError:
        data["top_skills"] = []
    return data


class CandidatesRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    def upsert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert or update a candidate by member_id; returns the stored row.

        On conflict a column is only overwritten when the new value is not
        NULL; an empty string is a value and replaces what was stored.
        """
        values = {key: record.get(key) for key in _FIELDS}
        skills = record.get("top_skills")
        if skills:
            # Preserve non-ASCII characters in stored JSON text
            values["top_skills_json"] = json.dumps(list(skills), ensure_ascii=False)
        if values["connections_num"] is None:
            values["connections_num"] = parse_count(values["connections"])

        updates = ", ".join(
            f"{key} = COALESCE(excluded.{key}, candidates.{key})" for key in _FIELDS if key != "member_id"
        )
        sql = (
            f"INSERT INTO candidates ({', '.join(_FIELDS)}) "
            f"VALUES ({', '.join('?' for _ in _FIELDS)}) "
            "ON CONFLICT(member_id) DO UPDATE SET "
            f"{updates}, updated_at = datetime('now') "
            "RETURNING *;"
        )
        cur = self.conn.cursor()
        cur.execute(sql, tuple(values[key] for key in _FIELDS))
        row = cur.fetchone()
        self.conn.commit()
        return _row_to_dict(row)

    def get(self, member_id: str) -> Optional[Dict[str, Any]]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM candidates WHERE member_id = ?", (member_id,))
        return _row_to_dict(cur.fetchone())

    def exists(self, member_id: str) -> bool:
        cur = self.conn.cursor()
        cur.execute("SELECT 1 FROM candidates WHERE member_id = ?", (member_id,))
        return cur.fetchone() is not None

    def count(self) -> int:
        cur = self.conn.cursor()
        cur.execute("SELECT COUNT(*) FROM candidates")
        return int(cur.fetchone()[0])

    def list_page(self, page: int = 1, limit: int = 50) -> List[Dict[str, Any]]:
        """Newest first; ``page`` is 1-based."""
        offset = (page - 1) * limit
        cur = self.conn.cursor()
        cur.execute(
            "SELECT * FROM candidates ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
            (limit, offset),
        )
        return [_row_to_dict(r) for r in cur.fetchall()]

    def list_recent(self, limit: int = 10, sort_by: str = "recent") -> List[Dict[str, Any]]:
        order = _SORT_ORDERS.get(sort_by)
        if order is None:
            raise ValueError(f"Unknown sort: {sort_by}")
        cur = self.conn.cursor()
        cur.execute(f"SELECT * FROM candidates ORDER BY {order} LIMIT ?", (limit,))
        return [_row_to_dict(r) for r in cur.fetchall()]

    def update_fields(self, member_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply recruiter edits; unknown keys are ignored. Returns the updated row or None."""
        columns = []
        values: List[Any] = []
        for key, column in _UPDATABLE.items():
            if key in fields and fields[key] is not None:
                columns.append(f"{column} = ?")
                values.append(fields[key])
        if not columns:
            return self.get(member_id)
        columns.append("updated_at = datetime('now')")
        sql = f"UPDATE candidates SET {', '.join(columns)} WHERE member_id = ? RETURNING *;"
        values.append(member_id)
        cur = self.conn.cursor()
        cur.execute(sql, tuple(values))
        row = cur.fetchone()
        self.conn.commit()
        return _row_to_dict(row)

    def delete(self, member_id: str) -> Optional[Dict[str, Any]]:
        """Remove a candidate; returns the deleted row, or None when absent."""
        cur = self.conn.cursor()
        cur.execute("DELETE FROM candidates WHERE member_id = ? RETURNING *;", (member_id,))
        row = cur.fetchone()
        self.conn.commit()
        return _row_to_dict(row)
