"""
Extraction pipeline: page check -> raw aggregation -> canonicalization -> rendering.
The pipeline never raises across its public boundary.
"""
from datetime import date
from typing import Optional

from product_sheet.adapters.page_document import PageDocument
from product_sheet.config import ExtractionLimits, config
from product_sheet.generators.document_renderer import DocumentRenderer
from product_sheet.layers.aggregation import RawAggregator
from product_sheet.layers.page_check import check_page
from product_sheet.layers.validation import Canonicalizer
from product_sheet.models.response import ExtractionResponse, OutputFormat
from product_sheet.utils.logger import LayerLogger


UNEXPECTED_ERROR_MESSAGE = "❌ Erreur inattendue : {error}"


class ExtractionPipeline:
    """
    One synchronous extraction per call, no state kept between calls.
    """

    def __init__(
        self,
        limits: Optional[ExtractionLimits] = None,
        output_format: Optional[OutputFormat] = None,
    ):
        self.limits = limits or config.get_limits()
        self.output_format = output_format
        self.logger = LayerLogger("extraction_pipeline")
        self.aggregator = RawAggregator(self.limits)
        self.canonicalizer = Canonicalizer(self.limits)
        self.renderer = DocumentRenderer(self.limits)

    def run(
        self,
        document: PageDocument,
        output_format: Optional[OutputFormat] = None,
        extracted_on: Optional[date] = None,
    ) -> ExtractionResponse:
        """
        Extract, validate and render the product described by document.

        Returns:
            ExtractionResponse carrying the document, or a user-facing error
        """
        self.logger.log_action("extraction", "started", url=document.url)

        page = check_page(document.url)
        if not page.ok:
            return ExtractionResponse.failure(page.error)

        try:
            raw = self.aggregator.extract_all(document)
            record = self.canonicalizer.canonicalize(raw, page_url=document.url)
            output = self.renderer.render(
                record,
                output_format=output_format or self.output_format,
                extracted_on=extracted_on,
            )
        except Exception as e:
            self.logger.log_error(
                f"Pipeline failed: {str(e)}",
                error_type="unexpected_error",
                url=document.url,
            )
            return ExtractionResponse.failure(UNEXPECTED_ERROR_MESSAGE.format(error=str(e)))

        self.logger.log_action("extraction", "completed", url=document.url)
        return ExtractionResponse.ok(output)
