"""Layers package initialization."""
from product_sheet.layers.guards import is_visible, is_forbidden_container, is_in_primary_column, is_trusted
from product_sheet.layers.extractors import FieldExtractor
from product_sheet.layers.aggregation import RawAggregator
from product_sheet.layers.page_check import PageCheck, check_page
from product_sheet.layers.validation import Canonicalizer, canonicalize

__all__ = [
    "is_visible",
    "is_forbidden_container",
    "is_in_primary_column",
    "is_trusted",
    "FieldExtractor",
    "RawAggregator",
    "PageCheck",
    "check_page",
    "Canonicalizer",
    "canonicalize",
]
