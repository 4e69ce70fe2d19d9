"""
Document query guards.

A product page renders more than one product (recommendations, bundles,
similar items). These predicates bind extracted values to the product the
page is about. Every guard takes the document explicitly.
"""
from typing import Optional

from bs4 import Tag

from product_sheet.adapters.page_document import PageDocument


# Regions dedicated to other products
FORBIDDEN_CONTAINERS = (
    ".a-carousel",
    "#purchase-sims-feature",
    "#similarities_feature_div",
    "#anonCarousel",
)

# Main product column regions
PRIMARY_COLUMNS = ("#centerCol", "#ppd")


def is_visible(document: PageDocument, node: Optional[Tag]) -> bool:
    """False when node is absent or not rendered; errors count as not visible."""
    if node is None:
        return False
    try:
        return document.is_displayed(node)
    except Exception:
        return False


def is_forbidden_container(document: PageDocument, node: Optional[Tag]) -> bool:
    """True when node is absent or sits in a cross-sell region. Fails closed."""
    if node is None:
        return True
    try:
        for selector in FORBIDDEN_CONTAINERS:
            for region in document.select(selector):
                if document.contains(region, node):
                    return True
    except Exception:
        return True
    return False


def is_in_primary_column(document: PageDocument, node: Optional[Tag]) -> bool:
    """True only when node sits in the main product column. Fails to False."""
    if node is None:
        return False
    try:
        for selector in PRIMARY_COLUMNS:
            column = document.select_one(selector)
            if column is not None and document.contains(column, node):
                return True
    except Exception:
        return False
    return False


def is_trusted(document: PageDocument, node: Optional[Tag]) -> bool:
    """Visible and outside every forbidden region."""
    return is_visible(document, node) and not is_forbidden_container(document, node)
