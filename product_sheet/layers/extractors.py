"""
Field extractors for the Product Sheet Extractor.

Each field is located by an ordered list of candidate lookups. A lookup
returns the value it found or None; the first non-empty value wins. A
lookup that raises is logged and counts as "found nothing", so one broken
selector never costs the whole field.
"""
import re
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from bs4 import Tag

from product_sheet.adapters.page_document import PageDocument
from product_sheet.config import ExtractionLimits, config
from product_sheet.layers.content_rules import (
    CURRENCY_SYMBOL,
    format_review_count,
    is_ignored_spec_key,
    is_only_digits_or_symbols,
    looks_like_css_or_script,
    strip_read_more,
)
from product_sheet.layers.guards import is_in_primary_column, is_trusted
from product_sheet.models.record import PRICE_PLACEHOLDER, SpecPair
from product_sheet.utils.logger import LayerLogger
from product_sheet.utils.text import normalize, truncate

T = TypeVar("T")
Candidate = Tuple[str, Callable[[PageDocument], Optional[T]]]


OFFSCREEN_PRICE = (
    "#corePrice_feature_div .a-offscreen, "
    "#tmmSwatches .a-button-selected .a-offscreen, "
    "#mediaTab_content_landing .a-offscreen, "
    ".swatchElement.selected .a-offscreen"
)
PRICE_WHOLE = "#corePrice_feature_div .a-price-whole, #price .a-price-whole"
PRICE_FRACTION = "#corePrice_feature_div .a-price-fraction, #price .a-price-fraction"
PRICE_SCOPES = ("#corePrice_feature_div", "#apex_desktop_newAccordionRow", "#price_inside_buybox")
UNAVAILABLE_PHRASES = ("non disponible", "aucune offre")

RATINGS_CONTAINER = "#averageCustomerReviews"
RATING_PATTERN = re.compile(r"sur\s*5|out of 5", re.I)

ABOUT_SELECTORS = (
    "#feature-bullets .a-list-item",
    "#featurebullets_feature_div .a-list-item",
    ".a-unordered-list.a-vertical.a-spacing-mini li span",
    "#productFactsDesktopExpander .a-list-item",
)

DESCRIPTION_ROOTS = (
    ("#productDescription", "p"),
    ("#aplus_feature_div", ".aplus-v2"),
    ("#aplus", "p"),
    ("#productDescription_feature_div", "p"),
    (".productDescriptionWrapper", "p"),
)

SPEC_TABLE_SECTIONS = ("#productDetails_techSpec_section_1", "#productDetails_techSpec_section_2")
DETAIL_BULLETS_TABLE = "#productDetails_detailBullets_sections1"
KEY_VALUE_TABLE = ".a-keyvalue.prodDetTable"
DETAIL_BULLETS_LIST = "#detailBullets_feature_div"

REVIEW_BODY = '[data-hook="review-body"]'
REVIEW_FALLBACKS = (".review-text-content span", '[data-hook="genome-widget"]')

BRAND_LABELS = re.compile(r"Marque\s*:|Visitez la boutique|Visiter la boutique", re.I)
PARENTHETICAL = re.compile(r"\(.*?\)")
HAS_DIGIT = re.compile(r"\d")


class FieldExtractor:
    """
    One ordered strategy per semantic product field.

    Every extract_* method degrades to an empty value instead of raising.
    """

    def __init__(self, limits: Optional[ExtractionLimits] = None):
        self.limits = limits or config.get_limits()
        self.logger = LayerLogger("field_extractor")

    def _first_match(
        self,
        field: str,
        document: PageDocument,
        candidates: Sequence[Candidate],
    ) -> Optional[T]:
        """Evaluate candidates left to right; return the first non-empty value."""
        for name, lookup in candidates:
            try:
                value = lookup(document)
            except Exception as e:
                self.logger.log_fallback(
                    from_source=name,
                    to_source="next_candidate",
                    reason=f"Lookup failed: {str(e)}",
                    field=field,
                )
                continue
            if value:
                self.logger.log_decision(
                    decision=f"use_{name}",
                    reason="first non-empty candidate",
                    field=field,
                )
                return value
        return None

    # =========================================================================
    # Title, image
    # =========================================================================

    def extract_title(self, document: PageDocument) -> str:
        candidates = [
            ("product_title", lambda d: d.text(d.select_one("#productTitle"))),
            ("title_word_break", lambda d: d.text(d.select_one(".product-title-word-break"))),
            ("heading_span", self._heading_span),
            ("heading", lambda d: d.text(d.select_one("h1"))),
        ]
        return self._first_match("title", document, candidates) or ""

    def _heading_span(self, document: PageDocument) -> Optional[str]:
        h1 = document.select_one("h1")
        if h1 is None:
            return None
        return document.text(document.select_one("span", root=h1))

    def extract_image(self, document: PageDocument) -> str:
        candidates = [
            (name, lambda d, s=selector: d.attr(d.select_one(s), "src"))
            for name, selector in (
                ("landing_image", "#landingImage"),
                ("image_wrapper", ".imgTagWrapper img"),
                ("image_block", "#imageBlock img"),
            )
        ]
        return self._first_match("image", document, candidates) or ""

    # =========================================================================
    # Price
    # =========================================================================

    def extract_price(self, document: PageDocument) -> str:
        """
        Locate the buy-box price.

        Only the first offscreen lookup is trusted without a primary-column
        check; every later candidate must sit in the main product column.
        """
        candidates = [
            ("offscreen_price", self._offscreen_price),
            ("whole_fraction", self._whole_fraction_price),
            ("slot_price", lambda d: self._column_text(d, ".slot-price span")),
            ("swatch_slot_price", lambda d: self._column_text(
                d, "#tmmSwatches .a-button-selected .slot-price")),
            ("swatch_color_base", lambda d: self._column_text(
                d, "#tmmSwatches .a-button-selected span.a-color-base", require_digit=True)),
            ("price_block", lambda d: self._column_text(d, "#price", require_digit=True)),
            ("offer_price", lambda d: self._column_text(d, ".offer-price", require_digit=True)),
            ("scoped_roots", self._scoped_price),
            ("availability", self._unavailable_price),
        ]
        price = self._first_match("price", document, candidates) or ""
        price = re.sub(r",+", ",", price)
        return re.sub(r"\s+", " ", price).strip()

    def _offscreen_price(self, document: PageDocument) -> Optional[str]:
        text = document.text(document.select_one(OFFSCREEN_PRICE))
        return text if CURRENCY_SYMBOL in text else None

    def _whole_fraction_price(self, document: PageDocument) -> Optional[str]:
        whole_node = document.select_one(PRICE_WHOLE)
        if not is_in_primary_column(document, whole_node):
            return None
        whole = re.sub(r"[.,]", "", document.text(whole_node))
        if not whole:
            return None
        fraction = document.text(document.select_one(PRICE_FRACTION))
        return f"{whole},{fraction or '00'} {CURRENCY_SYMBOL}"

    def _column_text(
        self,
        document: PageDocument,
        selector: str,
        root: Optional[Tag] = None,
        require_digit: bool = False,
    ) -> Optional[str]:
        """Text of the first match, only if it sits in the primary column."""
        node = document.select_one(selector, root=root)
        if not is_in_primary_column(document, node):
            return None
        text = document.text(node)
        if require_digit and not HAS_DIGIT.search(text):
            return None
        return text or None

    def _scoped_price(self, document: PageDocument) -> Optional[str]:
        for scope in PRICE_SCOPES:
            root = document.select_one(scope)
            if root is None:
                continue

            whole_node = document.select_one(".a-price-whole", root=root)
            whole = document.text(whole_node)
            if whole and is_in_primary_column(document, whole_node):
                fraction = document.text(document.select_one(".a-price-fraction", root=root))
                symbol = document.text(document.select_one(".a-price-symbol", root=root)) or CURRENCY_SYMBOL
                return whole + (f",{fraction}" if fraction else "") + f" {symbol}"

            price = (
                self._column_text(document, "#priceblock_ourprice", root=root)
                or self._column_text(document, ".a-price .a-offscreen", root=root)
            )
            if price:
                return price
        return None

    def _unavailable_price(self, document: PageDocument) -> Optional[str]:
        availability = document.text(document.select_one("#availability")).lower()
        if any(phrase in availability for phrase in UNAVAILABLE_PHRASES):
            return PRICE_PLACEHOLDER
        return None

    # =========================================================================
    # Rating, review count (scoped to the product's own ratings block)
    # =========================================================================

    def _ratings_container(self, document: PageDocument) -> Optional[Tag]:
        container = document.select_one(RATINGS_CONTAINER)
        if not is_trusted(document, container):
            return None
        return container

    def extract_rating(self, document: PageDocument) -> str:
        container = self._ratings_container(document)
        if container is None:
            return ""
        candidates = [
            ("rating_popover", lambda d: self._popover_rating(d, container)),
            ("rating_icon_alt", lambda d: self._icon_alt_rating(d, container)),
        ]
        return self._first_match("rating", document, candidates) or ""

    def _popover_rating(self, document: PageDocument, container: Tag) -> Optional[str]:
        popover = document.select_one("#acrPopover", root=container)
        if not is_trusted(document, popover):
            return None
        title = document.attr(popover, "title")
        if title and ("sur" in title or "out of" in title):
            return title
        return None

    def _icon_alt_rating(self, document: PageDocument, container: Tag) -> Optional[str]:
        for span in document.select("span.a-icon-alt", root=container):
            if not is_trusted(document, span):
                continue
            text = document.text(span)
            if RATING_PATTERN.search(text):
                return text
        return None

    def extract_review_count(self, document: PageDocument) -> str:
        container = self._ratings_container(document)
        if container is None:
            return ""
        node = document.select_one("#acrCustomerReviewText", root=container)
        if not is_trusted(document, node):
            return ""
        return format_review_count(document.text(node))

    # =========================================================================
    # About this item, long description
    # =========================================================================

    def extract_about_item(self, document: PageDocument) -> List[str]:
        candidates = [
            (selector, lambda d, s=selector: self._collect_bullets(d, s))
            for selector in ABOUT_SELECTORS
        ]
        return self._first_match("about_item", document, candidates) or []

    def _collect_bullets(self, document: PageDocument, selector: str) -> List[str]:
        items = []
        for node in document.select(selector):
            if len(items) >= self.limits.max_about_items:
                break
            text = normalize(document.text(node))
            if len(text) >= self.limits.min_about_length:
                items.append(text)
        return items

    def extract_technical_description(self, document: PageDocument) -> List[str]:
        candidates = [
            (root, lambda d, r=root, c=child: self._collect_paragraphs(d, r, c))
            for root, child in DESCRIPTION_ROOTS
        ]
        return self._first_match("technical_description", document, candidates) or []

    def _collect_paragraphs(self, document: PageDocument, root_selector: str, child_selector: str) -> List[str]:
        root = document.select_one(root_selector)
        if root is None:
            return []
        paragraphs = []
        for node in document.select(child_selector, root=root):
            if len(paragraphs) >= self.limits.max_description_paragraphs:
                break
            text = normalize(document.text(node))
            if len(text) < self.limits.min_description_length:
                continue
            if is_only_digits_or_symbols(text) or looks_like_css_or_script(text):
                continue
            paragraphs.append(truncate(text, self.limits.max_description_length))
        return paragraphs

    # =========================================================================
    # Technical specifications
    # =========================================================================

    def extract_technical_specs(self, document: PageDocument) -> List[SpecPair]:
        candidates = [
            ("tech_spec_sections", lambda d: self._table_pairs(d, SPEC_TABLE_SECTIONS)),
            ("detail_bullets_table", lambda d: self._table_pairs(d, (DETAIL_BULLETS_TABLE,))),
            ("key_value_table", lambda d: self._table_pairs(d, (KEY_VALUE_TABLE,))),
            ("detail_bullets_list", self._bullet_pairs),
        ]
        return self._first_match("technical_specs", document, candidates) or []

    def _add_pair(self, specs: List[SpecPair], key: str, value: str):
        key = re.sub(r"\s*:\s*$", "", normalize(key)).strip()
        value = normalize(value)
        if not key or not value or is_ignored_spec_key(key):
            return
        pair = SpecPair(key=key, value=value)
        if pair not in specs:
            specs.append(pair)

    def _table_pairs(self, document: PageDocument, sections: Sequence[str]) -> List[SpecPair]:
        """Merge th/td rows of every listed section, in order."""
        specs: List[SpecPair] = []
        for section_selector in sections:
            section = document.select_one(section_selector)
            if section is None:
                continue
            for row in document.select("tr", root=section):
                if len(specs) >= self.limits.max_specs:
                    return specs
                left = (
                    document.select_one("th", root=row)
                    or document.select_one("td:first-child", root=row)
                )
                right = (
                    document.select_one("td:last-child", root=row)
                    or document.select_one("td:nth-child(2)", root=row)
                )
                if left is not None and right is not None:
                    self._add_pair(specs, document.text(left), document.text(right))
        return specs

    def _bullet_pairs(self, document: PageDocument) -> List[SpecPair]:
        """Parse 'key : value' lines of the detail bullet list."""
        container = document.select_one(DETAIL_BULLETS_LIST)
        if container is None:
            return []
        specs: List[SpecPair] = []
        for item in document.select("li span.a-list-item, li", root=container):
            if len(specs) >= self.limits.max_specs:
                break
            text = normalize(document.text(item))
            key, sep, value = text.partition(":")
            if sep and key.strip():
                self._add_pair(specs, key, value)
        return specs

    # =========================================================================
    # Reviews
    # =========================================================================

    def extract_reviews(self, document: PageDocument) -> List[str]:
        reviews: List[str] = []
        for body in document.select(REVIEW_BODY):
            if len(reviews) >= self.limits.max_reviews:
                break
            try:
                self._add_review(reviews, self._review_body_text(document, body))
            except Exception as e:
                self.logger.log_fallback(
                    from_source="review_body",
                    to_source="next_review_body",
                    reason=f"Review body unreadable: {str(e)}",
                    field="reviews",
                )

        for selector in REVIEW_FALLBACKS:
            if len(reviews) >= self.limits.max_reviews:
                break
            for node in document.select(selector):
                if len(reviews) >= self.limits.max_reviews:
                    break
                self._add_review(reviews, document.text(node))

        return reviews[:self.limits.max_reviews]

    def _add_review(self, reviews: List[str], raw: str):
        text = strip_read_more(normalize(raw))
        if len(text) < self.limits.min_review_length:
            return
        text = truncate(text, self.limits.max_review_length)
        # Review bodies also carry the .review-text-content class
        if text not in reviews:
            reviews.append(text)

    def _review_body_text(self, document: PageDocument, body: Tag) -> str:
        """First non-empty source among expander-free spans, .reviewText, bare spans, full text."""
        spans = document.select("span:not(.a-expander-prompt)", root=body)
        # Nested spans repeat their parent's text
        span_ids = {id(span) for span in spans}
        outermost = [
            span for span in spans
            if not any(id(parent) in span_ids for parent in span.parents)
        ]
        parts = [document.text(span) for span in outermost]
        text = " ".join(part for part in parts if part)
        if text:
            return text

        text = document.text(document.select_one(".reviewText", root=body))
        if text:
            return text

        parts = [document.text(span) for span in document.select('span[class=""]', root=body)]
        text = " ".join(part for part in parts if part)
        if text:
            return text

        return document.text(body)

    # =========================================================================
    # Authors, brand
    # =========================================================================

    def is_book_page(self, document: PageDocument) -> bool:
        if document.select_one("#bylineInfo") is not None:
            return True
        breadcrumbs = document.text(document.select_one("#wayfinding-breadcrumbs_feature_div"))
        return "livre" in breadcrumbs.lower()

    def extract_authors(self, document: PageDocument) -> List[str]:
        if not self.is_book_page(document):
            return []
        candidates = [
            ("author_links", self._author_links),
            ("byline_author", self._byline_author),
        ]
        authors = self._first_match("authors", document, candidates) or []
        return authors[:self.limits.max_authors]

    def _author_links(self, document: PageDocument) -> List[str]:
        authors = []
        for link in document.select(".author .a-link-normal"):
            if len(authors) >= self.limits.max_authors:
                break
            text = document.text(link)
            if text:
                authors.append(text)
        return authors

    def _byline_author(self, document: PageDocument) -> List[str]:
        text = document.text(document.select_one("#bylineInfo .author"))
        text = PARENTHETICAL.sub("", text).strip()
        return [text] if text else []

    def extract_brand(self, document: PageDocument) -> Optional[str]:
        candidates = [
            ("byline_link", lambda d: d.text(d.select_one("#bylineInfo .a-link-normal"))),
            ("byline_text", self._byline_brand),
        ]
        return self._first_match("brand", document, candidates)

    def _byline_brand(self, document: PageDocument) -> Optional[str]:
        text = document.text(document.select_one("#bylineInfo"))
        return BRAND_LABELS.sub("", text).strip() or None
