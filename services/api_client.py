from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional
from urllib.parse import quote

import requests

from services.request_guard import is_allowed_url


logger = logging.getLogger(__name__)


class CandidateApiError(RuntimeError):
    """The candidate API could not be reached or answered with an unexpected status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BlockedRequestError(CandidateApiError):
    """The outbound request validator rejected the URL; nothing was sent."""


class CandidateApiClient:
    """Thin HTTP client for the candidate REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 20,
        session: Optional[requests.Session] = None,
        blocked_fragments: Optional[Iterable[str]] = None,
        allow_private_hosts: bool = True,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.blocked_fragments = list(blocked_fragments) if blocked_fragments is not None else None
        self.allow_private_hosts = allow_private_hosts

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = self._url(path)
        if not is_allowed_url(url, self.blocked_fragments, self.allow_private_hosts):
            raise BlockedRequestError(f"Blocked outbound request: {method} {url}")
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error: {method} {url}: {e}", extra={"step": "api", "status": "error"})
            raise CandidateApiError(f"{method} {url} failed: {e}") from e

    @staticmethod
    def _json(resp: requests.Response) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError as e:
            raise CandidateApiError(f"Invalid JSON from API (status {resp.status_code})", resp.status_code) from e
        return data if isinstance(data, dict) else {}

    def _fail(self, resp: requests.Response, action: str) -> CandidateApiError:
        try:
            body = resp.json()
            detail = body.get("message") or body.get("error") if isinstance(body, dict) else None
        except ValueError:
            detail = None
        return CandidateApiError(f"{action} failed with status {resp.status_code}: {detail or resp.text}", resp.status_code)

    def health(self) -> Dict[str, Any]:
        resp = self._request("GET", "/health")
        if resp.status_code != 200:
            raise self._fail(resp, "Health check")
        return self._json(resp)

    def check(self, member_id: str) -> Optional[Dict[str, Any]]:
        """Stored candidate for ``member_id``, or None when the API reports 404."""
        resp = self._request("GET", f"/api/candidates/{quote(member_id, safe='')}")
        if resp.status_code == 404:
            return None
        if resp.status_code != 200:
            raise self._fail(resp, "Existence check")
        return self._json(resp).get("candidate")

    def upsert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        resp = self._request("POST", "/api/candidates", json=record)
        if resp.status_code not in (200, 201):
            raise self._fail(resp, "Save")
        return self._json(resp).get("candidate") or {}

    def list(self, page: int = 1, limit: int = 50) -> Dict[str, Any]:
        resp = self._request("GET", "/api/candidates", params={"page": page, "limit": limit})
        if resp.status_code != 200:
            raise self._fail(resp, "List")
        return self._json(resp)

    def delete(self, member_id: str) -> Optional[Dict[str, Any]]:
        """Deleted candidate, or None when it did not exist."""
        resp = self._request("DELETE", f"/api/candidates/{quote(member_id, safe='')}")
        if resp.status_code == 404:
            return None
        if resp.status_code != 200:
            raise self._fail(resp, "Delete")
        return self._json(resp).get("candidate")
