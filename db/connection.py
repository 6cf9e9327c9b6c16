from __future__ import annotations

import sqlite3
from typing import Optional


def get_connection(db_path: str, timeout: Optional[float] = 30.0, check_same_thread: bool = True) -> sqlite3.Connection:
    """Open a SQLite connection for the candidates database.

    - WAL journal for fewer writer blocks
    - NORMAL synchronous for performance
    - rows come back as sqlite3.Row so repos can turn them into dicts
    """
    conn = sqlite3.connect(db_path, timeout=timeout or 30.0, check_same_thread=check_same_thread)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    return conn
