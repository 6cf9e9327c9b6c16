from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
import requests

from services.api_client import BlockedRequestError, CandidateApiClient, CandidateApiError


class _Response:
    def __init__(self, status_code: int, data: Optional[Any] = None, text: str = ""):
        self.status_code = status_code
        self._data = data
        self.text = text

    def json(self):
        if self._data is None:
            raise ValueError("no json")
        return self._data


class _Session:
    def __init__(self, responses: List[_Response] = None, error: Exception = None):
        self.responses = list(responses or [])
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def request(self, method, url, timeout=None, **kwargs):
        self.calls.append({"method": method, "url": url, "timeout": timeout, **kwargs})
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


def _client(session: _Session, base_url: str = "https://api.example.com") -> CandidateApiClient:
    return CandidateApiClient(base_url, timeout=5, session=session)


def test_check_found_and_missing():
    session = _Session([
        _Response(200, {"exists": True, "candidate": {"member_id": "a b"}}),
        _Response(404, {"exists": False}),
    ])
    client = _client(session)
    assert client.check("a b") == {"member_id": "a b"}
    assert client.check("zzz") is None
    assert session.calls[0]["url"] == "https://api.example.com/api/candidates/a%20b"
    assert session.calls[0]["timeout"] == 5


def test_upsert_posts_json_and_returns_candidate():
    session = _Session([_Response(201, {"success": True, "candidate": {"member_id": "m1"}})])
    client = _client(session)
    assert client.upsert({"member_id": "m1"}) == {"member_id": "m1"}
    assert session.calls[0]["method"] == "POST"
    assert session.calls[0]["json"] == {"member_id": "m1"}


def test_server_error_raises_with_status():
    session = _Session([_Response(500, {"error": "Database error", "message": "disk full"})])
    with pytest.raises(CandidateApiError) as exc:
        _client(session).upsert({"member_id": "m1"})
    assert exc.value.status_code == 500
    assert "disk full" in str(exc.value)


def test_invalid_json_raises():
    session = _Session([_Response(200, None, text="<html>")])
    with pytest.raises(CandidateApiError):
        _client(session).health()


def test_connection_error_is_wrapped():
    session = _Session(error=requests.exceptions.ConnectionError("refused"))
    with pytest.raises(CandidateApiError) as exc:
        _client(session).health()
    assert not isinstance(exc.value, BlockedRequestError)


def test_blocked_base_url_sends_nothing():
    session = _Session()
    client = _client(session, base_url="https://api.example.com/invalid")
    with pytest.raises(BlockedRequestError):
        client.check("m1")
    assert session.calls == []


def test_list_and_delete():
    session = _Session([
        _Response(200, {"success": True, "data": [], "pagination": {"totalCount": 0}}),
        _Response(200, {"success": True, "candidate": {"member_id": "m1"}}),
        _Response(404, {"error": "Candidate not found"}),
    ])
    client = _client(session)
    assert client.list(page=2, limit=10)["pagination"]["totalCount"] == 0
    assert session.calls[0]["params"] == {"page": 2, "limit": 10}
    assert client.delete("m1") == {"member_id": "m1"}
    assert client.delete("m1") is None
