"""
Validation Layer for the Product Sheet Extractor.
Turns a RawRecord into a CanonicalRecord by applying per-field business rules.
"""
import re
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from product_sheet.config import ExtractionLimits, config
from product_sheet.layers.content_rules import (
    CURRENCY_SYMBOL,
    REVIEW_UNIT,
    canonical_product_url,
    format_review_count,
    is_ignored_spec_key,
    is_only_digits_or_symbols,
    looks_like_css_or_script,
    strip_read_more,
)
from product_sheet.models.record import (
    CanonicalRecord,
    PRICE_PLACEHOLDER,
    RATING_PLACEHOLDER,
    REVIEW_COUNT_PLACEHOLDER,
    RawRecord,
    SpecPair,
    TITLE_PLACEHOLDER,
)
from product_sheet.utils.logger import LayerLogger
from product_sheet.utils.text import normalize, truncate


PRICE_DISALLOWED = re.compile(rf"[^\d,\s{CURRENCY_SYMBOL}]")
ZERO_REVIEWS = re.compile(rf"^0+\s*{REVIEW_UNIT}\s*$", re.I)
NONE_FOUND = re.compile(r"aucun", re.I)
RATING_PREFIX = re.compile(r"^([\d,.]+)\s*(?:sur|out of)", re.I)
BRAND_SPEC_KEY = re.compile(r"marque|brand", re.I)


class Canonicalizer:
    """
    Deterministic, total mapping from raw to canonical record.

    Absence of data maps to placeholder text, never to an error.
    """

    def __init__(self, limits: Optional[ExtractionLimits] = None):
        self.limits = limits or config.get_limits()
        self.logger = LayerLogger("validation_layer")

    def canonicalize(self, raw: RawRecord, page_url: Optional[str] = None) -> CanonicalRecord:
        """
        Validate and clean every field of a raw record.

        Args:
            raw: Record produced by the raw aggregator
            page_url: Live page address, used when no ASIN can be found

        Returns:
            CanonicalRecord with placeholders for missing values
        """
        rating, review_count = self.rating_and_review_count(raw.rating, raw.review_count)
        technical_specs = self.technical_specs(raw.technical_specs)

        record = CanonicalRecord(
            title=self.title(raw.title),
            price=self.price(raw.price),
            image=self.image(raw.image),
            rating=rating,
            review_count=review_count,
            url=self.url(raw.url, page_url),
            about_item=self.about_item(raw.about_item),
            technical_description=self.technical_description(raw.technical_description),
            technical_specs=technical_specs,
            reviews=self.reviews(raw.reviews),
            authors=self.authors(raw.authors),
            brand=self.brand(raw.brand, raw.technical_specs),
        )

        self.logger.log_action(
            "canonicalization",
            "completed",
            url=record.url,
            placeholders=[
                name for name, placeholder in (
                    ("title", TITLE_PLACEHOLDER),
                    ("price", PRICE_PLACEHOLDER),
                    ("rating", RATING_PLACEHOLDER),
                    ("review_count", REVIEW_COUNT_PLACEHOLDER),
                )
                if getattr(record, name) == placeholder
            ],
        )
        return record

    def title(self, raw: str) -> str:
        title = normalize(raw)
        if len(title) < self.limits.min_title_length:
            return TITLE_PLACEHOLDER
        return truncate(title, self.limits.max_title_length)

    def price(self, raw: str) -> str:
        price = PRICE_DISALLOWED.sub("", normalize(raw))
        price = re.sub(r",+", ",", price)
        price = re.sub(r"\s+", " ", price).strip()
        if not re.search(r"\d", price):
            return PRICE_PLACEHOLDER
        if CURRENCY_SYMBOL not in price:
            price = f"{price} {CURRENCY_SYMBOL}"
        return price

    def rating_and_review_count(self, raw_rating: str, raw_review_count: str) -> Tuple[str, str]:
        """
        Joint rule for rating and review count.

        No reviews, or only one of the two values, collapses both to the
        'no rating / 0 reviews' placeholders.
        """
        rating = normalize(raw_rating)
        review_count = normalize(raw_review_count)
        if NONE_FOUND.search(review_count):
            return RATING_PLACEHOLDER, REVIEW_COUNT_PLACEHOLDER

        # '0 évaluation', '(0)' and '0 avis' all format to '0 avis'
        review_count = format_review_count(review_count)
        if not review_count or ZERO_REVIEWS.match(review_count):
            return RATING_PLACEHOLDER, REVIEW_COUNT_PLACEHOLDER
        if not rating:
            return RATING_PLACEHOLDER, REVIEW_COUNT_PLACEHOLDER

        match = RATING_PREFIX.match(rating)
        if match:
            rating = match.group(1).strip() + "/5"
        elif "/5" not in rating:
            rating = rating + "/5"

        return rating, review_count

    def image(self, raw: str) -> str:
        image = normalize(raw)
        if not image.startswith("http") or not urlparse(image).netloc:
            return ""
        return image

    def url(self, raw: str, page_url: Optional[str] = None) -> str:
        parsed = urlparse(raw or "")
        origin = f"{parsed.scheme}://{parsed.netloc}" if parsed.scheme and parsed.netloc else config.SITE_ORIGIN
        return canonical_product_url(raw, origin) or page_url or raw or ""

    def technical_specs(self, raw: List[SpecPair]) -> List[SpecPair]:
        specs = []
        for pair in raw[:self.limits.max_specs]:
            key = normalize(pair.key)
            value = normalize(pair.value)
            if len(key) < self.limits.min_spec_length or len(value) < self.limits.min_spec_length:
                continue
            if is_ignored_spec_key(key):
                continue
            specs.append(SpecPair(key=key, value=value))
        return specs

    def about_item(self, raw: List[str]) -> List[str]:
        items = [normalize(item) for item in raw]
        items = [item for item in items if len(item) >= self.limits.min_about_length]
        return items[:self.limits.max_about_items]

    def reviews(self, raw: List[str]) -> List[str]:
        reviews = [strip_read_more(normalize(review)) for review in raw]
        reviews = [review for review in reviews if len(review) >= self.limits.min_review_length]
        return [
            truncate(review, self.limits.max_review_length)
            for review in reviews[:self.limits.max_reviews]
        ]

    def technical_description(self, raw: List[str]) -> List[str]:
        paragraphs = [normalize(paragraph) for paragraph in raw]
        paragraphs = [
            paragraph for paragraph in paragraphs
            if len(paragraph) >= self.limits.min_description_length
            and not is_only_digits_or_symbols(paragraph)
            and not looks_like_css_or_script(paragraph)
        ]
        return [
            truncate(paragraph, self.limits.max_description_length)
            for paragraph in paragraphs[:self.limits.max_description_paragraphs]
        ]

    def authors(self, raw: List[str]) -> List[str]:
        authors = [normalize(author) for author in raw]
        return [author for author in authors if author][:self.limits.max_authors]

    def brand(self, raw: Optional[str], specs: List[SpecPair]) -> Optional[str]:
        """Raw brand, else the first spec whose key names the brand."""
        brand = normalize(raw) if raw else ""
        if not brand:
            for pair in specs:
                if BRAND_SPEC_KEY.search(pair.key or ""):
                    brand = normalize(pair.value)
                    break
        if not brand or len(brand) > self.limits.max_brand_length:
            return None
        return brand


def canonicalize(
    raw: RawRecord,
    page_url: Optional[str] = None,
    limits: Optional[ExtractionLimits] = None,
) -> CanonicalRecord:
    """Canonicalize a raw record with the given (or configured) thresholds."""
    return Canonicalizer(limits).canonicalize(raw, page_url)
