"""Adapters package initialization."""
from product_sheet.adapters.page_document import PageDocument

__all__ = ["PageDocument"]
