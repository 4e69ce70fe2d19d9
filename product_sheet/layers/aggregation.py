"""
Raw Aggregation Layer for the Product Sheet Extractor.
Runs every field extractor once and assembles a single RawRecord.
"""
from typing import Any, Callable, Dict, Optional, Tuple

from product_sheet.adapters.page_document import PageDocument
from product_sheet.config import ExtractionLimits
from product_sheet.layers.content_rules import canonical_product_url
from product_sheet.layers.extractors import FieldExtractor
from product_sheet.models.record import RawRecord
from product_sheet.utils.logger import LayerLogger


class RawAggregator:
    """
    Raw aggregation - one pass over the page, no business rules.

    Each extractor is isolated: an error escaping one of them is logged and
    that field takes its empty default while the others proceed.
    """

    def __init__(self, limits: Optional[ExtractionLimits] = None):
        self.logger = LayerLogger("raw_aggregator")
        self.extractor = FieldExtractor(limits)

    def _field_extractors(self) -> Dict[str, Tuple[Callable[[PageDocument], Any], Any]]:
        """Field name -> (extractor, empty default)."""
        extractor = self.extractor
        return {
            "title": (extractor.extract_title, ""),
            "price": (extractor.extract_price, ""),
            "image": (extractor.extract_image, ""),
            "rating": (extractor.extract_rating, ""),
            "review_count": (extractor.extract_review_count, ""),
            "about_item": (extractor.extract_about_item, []),
            "technical_description": (extractor.extract_technical_description, []),
            "technical_specs": (extractor.extract_technical_specs, []),
            "reviews": (extractor.extract_reviews, []),
            "authors": (extractor.extract_authors, []),
            "brand": (extractor.extract_brand, None),
        }

    def extract_all(self, document: PageDocument) -> RawRecord:
        """
        Extract every field from the page.

        Args:
            document: The loaded product page

        Returns:
            RawRecord with explicit empty values for fields not found
        """
        self.logger.log_action("raw_extraction", "started", url=document.url)

        values: Dict[str, Any] = {}
        for field, (extract, default) in self._field_extractors().items():
            try:
                values[field] = extract(document)
            except Exception as e:
                self.logger.log_error(
                    f"Extractor failed: {str(e)}",
                    error_type="extractor_error",
                    field=field,
                    url=document.url,
                )
                values[field] = default

        values["url"] = canonical_product_url(document.url, document.origin) or document.url
        record = RawRecord(**values)

        self.logger.log_extraction(
            fields_present=record.get_present_fields(),
            fields_missing=record.get_missing_fields(),
            url=document.url,
        )
        return record
