from __future__ import annotations

from typing import Any, Dict, Optional

from db.connection import get_connection
from db.repos.candidates_repo import CandidatesRepo
from db.schema import bootstrap
from ports.repos import CandidatesRepoPort
from stores.registry import register


class SqliteCandidateStore:
    """Candidate store on the local SQLite database (same schema the API serves)."""

    name = "sqlite"

    def __init__(self, db_path: str):
        self.conn = get_connection(db_path)
        bootstrap(self.conn)
        self.repo: CandidatesRepoPort = CandidatesRepo(self.conn)

    def exists(self, member_id: str) -> bool:
        return self.repo.exists(member_id)

    def get(self, member_id: str) -> Optional[Dict[str, Any]]:
        return self.repo.get(member_id)

    def append(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return self.repo.upsert(record)

    def update(self, member_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self.repo.update_fields(member_id, fields)

    def delete(self, member_id: str) -> bool:
        return self.repo.delete(member_id) is not None

    def count(self) -> int:
        return self.repo.count()

    def close(self) -> None:
        self.conn.close()


def _register():
    register(SqliteCandidateStore.name, lambda settings: SqliteCandidateStore(settings.db_path))


_register()
