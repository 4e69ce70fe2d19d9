"""
Page Document Adapter for the Product Sheet Extractor.
Read-only query capability over an already-loaded product page.
"""
import re
from typing import Dict, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from product_sheet.config import config


# Elements that never produce a rendered box
NON_RENDERED_TAGS = {"head", "script", "style", "template", "noscript", "title", "meta"}

# Site utility classes equivalent to display:none
HIDDEN_CLASSES = {"aok-hidden", "a-hidden", "aok-offscreen-hidden"}

STYLE_DECLARATION = re.compile(r"([a-zA-Z-]+)\s*:\s*([^;]+)")


class PageDocument:
    """
    Hierarchical, read-only view of a product page.

    Offers single and multi-element selector lookups, attribute and text
    reads, tree containment, computed visibility and the page address.
    Lookups never raise: an invalid selector behaves like a selector that
    matches nothing.
    """

    def __init__(self, soup: BeautifulSoup, url: str = ""):
        self.soup = soup
        self.url = url or ""

    @classmethod
    def from_html(cls, html: str, url: str = "") -> "PageDocument":
        """Parse page HTML into a document."""
        return cls(BeautifulSoup(html or "", "lxml"), url)

    @property
    def origin(self) -> str:
        """Scheme and host of the page address, or the configured site root."""
        parsed = urlparse(self.url)
        if parsed.scheme and parsed.netloc:
            return f"{parsed.scheme}://{parsed.netloc}"
        return config.SITE_ORIGIN

    def select_one(self, selector: str, root: Optional[Tag] = None) -> Optional[Tag]:
        """First element matching selector (document order) under root."""
        scope = root if root is not None else self.soup
        try:
            return scope.select_one(selector)
        except Exception:
            return None

    def select(self, selector: str, root: Optional[Tag] = None) -> List[Tag]:
        """All elements matching selector under root."""
        scope = root if root is not None else self.soup
        try:
            return list(scope.select(selector))
        except Exception:
            return []

    def text(self, node: Optional[Tag]) -> str:
        """Full text content of node, trimmed."""
        if node is None:
            return ""
        return node.get_text().strip()

    def attr(self, node: Optional[Tag], name: str) -> Optional[str]:
        """Attribute value of node, trimmed; None when missing or blank."""
        if node is None:
            return None
        value = node.get(name)
        if isinstance(value, list):
            value = " ".join(value)
        if not value or not value.strip():
            return None
        return value.strip()

    def contains(self, ancestor: Optional[Tag], node: Optional[Tag]) -> bool:
        """True if node is ancestor itself or one of its descendants."""
        if ancestor is None or node is None:
            return False
        if node is ancestor:
            return True
        return any(parent is ancestor for parent in node.parents)

    def is_displayed(self, node: Tag) -> bool:
        """
        Computed visibility of node from its own and inherited styles.

        A node is not displayed when it or any ancestor is a non-rendered
        element, carries the hidden attribute or a hidden utility class,
        or declares display:none / opacity:0. Visibility follows the
        nearest element that declares it.
        """
        visibility: Optional[str] = None
        for element in [node, *node.parents]:
            if element.name in NON_RENDERED_TAGS:
                return False
            if element.has_attr("hidden"):
                return False
            if HIDDEN_CLASSES.intersection(element.get("class") or []):
                return False

            style = self._inline_style(element)
            if style.get("display") == "none":
                return False
            if self._is_transparent(style.get("opacity")):
                return False
            if visibility is None and "visibility" in style:
                visibility = style["visibility"]

        return visibility not in ("hidden", "collapse")

    def _inline_style(self, element: Tag) -> Dict[str, str]:
        """Parse the style attribute into lowercased declarations."""
        style = element.get("style")
        if not style or not isinstance(style, str):
            return {}
        return {
            name.strip().lower(): value.replace("!important", "").strip().lower()
            for name, value in STYLE_DECLARATION.findall(style)
        }

    def _is_transparent(self, opacity: Optional[str]) -> bool:
        if opacity is None:
            return False
        try:
            return float(opacity) == 0
        except ValueError:
            return False
