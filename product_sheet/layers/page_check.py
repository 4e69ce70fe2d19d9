"""
Page pre-condition check: is this document a product page of the target site?
Runs before any extractor.
"""
from dataclasses import dataclass
from typing import Optional

from product_sheet.config import config
from product_sheet.utils.logger import LayerLogger


WRONG_SITE_MESSAGE = "⚠️ Cette extension fonctionne uniquement sur {domain}"
NOT_PRODUCT_PAGE_MESSAGE = "⚠️ Naviguez sur une page produit Amazon (URL avec /dp/)"

logger = LayerLogger("page_check")


@dataclass
class PageCheck:
    """Outcome of the pre-condition check."""
    ok: bool
    error: Optional[str] = None


def check_page(url: Optional[str], site_domain: Optional[str] = None) -> PageCheck:
    """
    Check the page address before extraction.

    The address must belong to the configured site and point at a product
    detail page ('/dp/').
    """
    domain = site_domain or config.SITE_DOMAIN
    href = url or ""

    if domain not in href:
        logger.log_decision(
            decision="reject_page",
            reason="Address outside the supported site",
            url=href,
            site_domain=domain,
        )
        return PageCheck(ok=False, error=WRONG_SITE_MESSAGE.format(domain=domain))

    if "/dp/" not in href:
        logger.log_decision(
            decision="reject_page",
            reason="Address is not a product detail page",
            url=href,
        )
        return PageCheck(ok=False, error=NOT_PRODUCT_PAGE_MESSAGE)

    return PageCheck(ok=True)
