from __future__ import annotations

import sqlite3

# Columns added after the first release; bootstrap adds them to older databases
_BACKFILL_COLUMNS = (
    ("industry", "TEXT"),
    ("top_skills_json", "TEXT"),
    ("connections", "TEXT"),
    ("connections_num", "INTEGER"),
    ("extracted_at", "TEXT"),
)


def bootstrap(conn: sqlite3.Connection) -> None:
    """Create the candidates table and its indexes (idempotent)."""
    cur = conn.cursor()

    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS candidates (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  member_id TEXT NOT NULL UNIQUE,\n"
            "  full_name TEXT NOT NULL,\n"
            "  profile_url TEXT NOT NULL,\n"
            "  headline TEXT,\n"
            "  location TEXT,\n"
            "  designation TEXT,\n"
            "  current_title TEXT,\n"
            "  industry TEXT,\n"
            "  school TEXT,\n"
            "  degree TEXT,\n"
            "  qualification TEXT,\n"
            "  passout_year TEXT,\n"
            "  years_at_current TEXT,\n"
            "  total_experience TEXT,\n"
            "  top_skills_json TEXT,\n"
            "  connections TEXT,\n"
            "  connections_num INTEGER,\n"
            "  processed_by TEXT,\n"
            "  notes TEXT,\n"
            "  extracted_at TEXT,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  updated_at TEXT NOT NULL DEFAULT (datetime('now'))\n"
            ")"
        )
    )
    for column, kind in _BACKFILL_COLUMNS:
        try:
            cur.execute(f"ALTER TABLE candidates ADD COLUMN {column} {kind};")
        except sqlite3.OperationalError:
            pass

    cur.execute("CREATE INDEX IF NOT EXISTS idx_candidates_created_at ON candidates(created_at);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_candidates_full_name ON candidates(full_name);")

    conn.commit()
