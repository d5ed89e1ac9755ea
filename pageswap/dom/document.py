"""Parsed HTML documents backed by BeautifulSoup."""

from __future__ import annotations

import copy

from bs4 import BeautifulSoup, Tag

# lxml builds a complete html/head/body tree the way a browser parser does
_PARSER_FEATURES = "lxml"


class Document:
    """A traversable document tree: the current page or a freshly fetched one."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self._soup = soup

    @property
    def soup(self) -> BeautifulSoup:
        return self._soup

    @property
    def root(self) -> Tag | None:
        return self._soup.find("html")

    @property
    def title(self) -> str:
        tag = self._soup.title
        if tag is None:
            return ""
        return tag.get_text()

    def select(self, selector: str) -> list[Tag]:
        return list(self._soup.select(selector))

    def select_first(self, selector: str) -> Tag | None:
        return self._soup.select_one(selector)

    def outer_html(self) -> str:
        """Full markup of the document element, like ``documentElement.outerHTML``."""
        root = self.root
        if root is None:
            return str(self._soup)
        return str(root)

    @staticmethod
    def import_node(tag: Tag) -> Tag:
        """Deep copy of a node from another document, detached and ready to insert."""
        return copy.copy(tag)


def parse_document(markup: str) -> Document | None:
    """Parse markup into a Document, or None when nothing usable comes out."""
    if not markup or not markup.strip():
        return None
    soup = BeautifulSoup(markup, _PARSER_FEATURES)
    if soup.find("html") is None:
        return None
    return Document(soup)


# ---------------------------------------------------------------------------
# Inline style helpers
# ---------------------------------------------------------------------------


def get_styles(tag: Tag) -> dict[str, str]:
    styles: dict[str, str] = {}
    for declaration in (tag.get("style") or "").split(";"):
        name, sep, value = declaration.partition(":")
        if sep and name.strip():
            styles[name.strip().lower()] = value.strip()
    return styles


def set_styles(tag: Tag, styles: dict[str, str]) -> None:
    if not styles:
        if "style" in tag.attrs:
            del tag["style"]
        return
    tag["style"] = "; ".join(f"{name}: {value}" for name, value in styles.items()) + ";"


def hide_element(tag: Tag) -> None:
    styles = get_styles(tag)
    styles["display"] = "none"
    set_styles(tag, styles)


def show_element(tag: Tag) -> None:
    styles = get_styles(tag)
    if styles.get("display") == "none":
        del styles["display"]
    set_styles(tag, styles)


def is_hidden(tag: Tag) -> bool:
    return get_styles(tag).get("display") == "none"
