"""Read-only document tree used by every extractor.

Extractors only talk to the ``Node`` protocol, so they run the same against a
live page snapshot or a synthetic fixture. ``SoupNode`` is the BeautifulSoup
implementation; CSS selectors are evaluated by soupsieve.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Protocol

import soupsieve as sv
from bs4 import BeautifulSoup, Tag
from bs4.element import CData, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction

from extraction.text_normalizer import normalize


# Elements that start a new line in rendered text (approximation of innerText)
_BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
    "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3",
    "h4", "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "p", "pre",
    "section", "table", "tr", "td", "th", "ul",
}
_SKIP_TAGS = {"script", "style", "template", "noscript", "head", "title", "meta", "link"}
_SKIP_STRINGS = (Comment, CData, Declaration, Doctype, ProcessingInstruction)


class Node(Protocol):
    def query_selector(self, selector: str) -> Optional["Node"]:
        ...

    def query_selector_all(self, selector: str) -> List["Node"]:
        ...

    def closest(self, selector: str) -> Optional["Node"]:
        ...

    def get_attribute(self, name: str) -> Optional[str]:
        ...

    @property
    def children(self) -> List["Node"]:
        ...

    @property
    def text_content(self) -> str:
        ...

    @property
    def inner_text(self) -> str:
        ...

    def inner_text_excluding(self, selector: str) -> str:
        ...

    def has_ancestor(self, other: "Node") -> bool:
        ...


class SoupNode:
    """Node backed by a bs4 Tag. Equality is identity of the underlying element."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag):
        self._tag = tag

    @property
    def tag(self) -> Tag:
        return self._tag

    @property
    def name(self) -> str:
        return self._tag.name or ""

    def query_selector(self, selector: str) -> Optional["SoupNode"]:
        found = self._tag.select_one(selector)
        return SoupNode(found) if found is not None else None

    def query_selector_all(self, selector: str) -> List["SoupNode"]:
        return [SoupNode(t) for t in self._tag.select(selector)]

    def closest(self, selector: str) -> Optional["SoupNode"]:
        found = sv.closest(selector, self._tag)
        return SoupNode(found) if found is not None else None

    def get_attribute(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    @property
    def children(self) -> List["SoupNode"]:
        return [SoupNode(c) for c in self._tag.children if isinstance(c, Tag)]

    @property
    def text_content(self) -> str:
        return self._tag.get_text()

    @property
    def inner_text(self) -> str:
        return _render_inner_text(self._tag, excluded=())

    def inner_text_excluding(self, selector: str) -> str:
        excluded = [t for t in self._tag.select(selector)]
        return _render_inner_text(self._tag, excluded=excluded)

    def has_ancestor(self, other: "Node") -> bool:
        target = getattr(other, "tag", None)
        if target is None:
            return False
        return any(parent is target for parent in self._tag.parents)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SoupNode) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    def __repr__(self) -> str:
        classes = self.get_attribute("class") or ""
        return f"<SoupNode {self.name} class={classes!r}>"


def _walk(tag: Tag, out: List[str], excluded_ids: set) -> None:
    for child in tag.children:
        if isinstance(child, _SKIP_STRINGS):
            continue
        if isinstance(child, NavigableString):
            out.append(str(child))
            continue
        if not isinstance(child, Tag):
            continue
        if id(child) in excluded_ids:
            continue
        name = (child.name or "").lower()
        if name in _SKIP_TAGS or child.has_attr("hidden"):
            continue
        if name == "br":
            out.append("\n")
            continue
        block = name in _BLOCK_TAGS
        if block:
            out.append("\n")
        _walk(child, out, excluded_ids)
        if block:
            out.append("\n")


def _render_inner_text(tag: Tag, excluded: Iterable[Tag]) -> str:
    out: List[str] = []
    _walk(tag, out, {id(t) for t in excluded})
    lines = (normalize(line) for line in "".join(out).split("\n"))
    return "\n".join(line for line in lines if line)


class Document(SoupNode):
    """Whole-page node with metadata helpers."""

    __slots__ = ("_soup", "_source")

    def __init__(self, soup: BeautifulSoup, source: str = ""):
        super().__init__(soup)
        self._soup = soup
        self._source = source

    @classmethod
    def from_html(cls, html: str) -> "Document":
        return cls(BeautifulSoup(html or "", "html.parser"), source=html or "")

    @property
    def source(self) -> str:
        """Raw page markup (used for embedded identifier scans)."""
        return self._source

    @property
    def title(self) -> str:
        if self._soup.title and self._soup.title.string:
            return normalize(self._soup.title.string)
        return ""

    @property
    def body(self) -> SoupNode:
        body = self._soup.body
        return SoupNode(body) if body is not None else self

    def meta_property(self, prop: str) -> str:
        el = self._soup.find("meta", attrs={"property": prop})
        return normalize(el.get("content")) if el is not None else ""

    def meta_name(self, name: str) -> str:
        el = self._soup.find("meta", attrs={"name": name})
        return normalize(el.get("content")) if el is not None else ""

    def json_ld_blocks(self) -> Iterator[str]:
        for script in self._soup.find_all("script", attrs={"type": "application/ld+json"}):
            text = script.string or script.get_text() or ""
            if text.strip():
                yield text
