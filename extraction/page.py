from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from extraction.dom import Document


@dataclass(frozen=True)
class PageContext:
    """Snapshot of one profile page: its address and its document tree."""

    url: str
    document: Document

    @classmethod
    def from_html(cls, html: str, url: Optional[str] = None) -> "PageContext":
        document = Document.from_html(html)
        return cls(url=url or _url_from_document(document), document=document)

    @property
    def is_experience_details(self) -> bool:
        return "/details/experience" in (self.url or "")


def _url_from_document(document: Document) -> str:
    # Saved pages keep their address in the canonical link or the social-preview tag
    canonical = document.query_selector('link[rel="canonical"]')
    if canonical is not None:
        href = canonical.get_attribute("href")
        if href:
            return href.strip()
    return document.meta_property("og:url")
