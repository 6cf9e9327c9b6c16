"""Outbound request validation.

Every HTTP call made by the candidate API client passes through
``is_allowed_url`` first. Malformed or placeholder URLs are rejected before a
socket is ever opened.
"""

from __future__ import annotations

import ipaddress
from typing import Iterable, Optional, Union
from urllib.parse import urlparse

import tldextract


DEFAULT_BLOCKED_FRAGMENTS = ("/invalid",)
_LOCAL_HOSTNAMES = {"localhost"}

# Bundled suffix snapshot only; validation must never go to the network
_extract = tldextract.TLDExtract(suffix_list_urls=())


def _ip_host(host: str) -> Optional[Union[ipaddress.IPv4Address, ipaddress.IPv6Address]]:
    try:
        return ipaddress.ip_address(host)
    except ValueError:
        return None


def _host_allowed(host: str, allow_private_hosts: bool) -> bool:
    if host in _LOCAL_HOSTNAMES:
        return allow_private_hosts
    ip = _ip_host(host)
    if ip is not None:
        return allow_private_hosts or not (ip.is_private or ip.is_loopback)
    ext = _extract(host)
    return bool(ext.domain and ext.suffix)


def is_allowed_url(
    url: object,
    blocked_fragments: Optional[Iterable[str]] = None,
    allow_private_hosts: bool = True,
) -> bool:
    """True when ``url`` is an absolute http(s) URL with a plausible host and no blocked fragment."""
    if not isinstance(url, str) or not url.strip() or url.strip() == "/":
        return False
    text = url.strip()
    fragments = DEFAULT_BLOCKED_FRAGMENTS if blocked_fragments is None else tuple(blocked_fragments)
    if any(fragment and fragment in text for fragment in fragments):
        return False
    parsed = urlparse(text)
    if parsed.scheme not in ("http", "https"):
        return False
    host = (parsed.hostname or "").lower()
    if not host:
        return False
    return _host_allowed(host, allow_private_hosts)
