"""
Product Sheet Extractor - FastAPI Application
Trigger boundary: receives an already-loaded product page and returns the
rendered product sheet.
"""
import asyncio
import contextvars

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from product_sheet.adapters.page_document import PageDocument
from product_sheet.config import config
from product_sheet.models.response import ExtractRequest, ExtractionResponse
from product_sheet.pipeline import ExtractionPipeline
from product_sheet.utils.logger import get_logger, set_trace_id


VERSION = "1.0.0"
TIMEOUT_MESSAGE = "Timeout: impossible de contacter la page"

# Initialize FastAPI app
app = FastAPI(
    title="Product Sheet Extractor",
    description="Extracts a normalized product sheet (Markdown or JSON) from a product page",
    version=VERSION,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

pipeline = ExtractionPipeline()

logger = get_logger("main")


def _extract(request: ExtractRequest) -> ExtractionResponse:
    document = PageDocument.from_html(request.html, request.url)
    return pipeline.run(document, output_format=request.format)


# API Routes
@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


@app.post("/api/extract", response_model=ExtractionResponse)
async def extract_product(request: ExtractRequest) -> ExtractionResponse:
    """
    Extract the product sheet from a loaded page.

    The round-trip is bounded by RESPONSE_TIMEOUT; expiry is reported as a
    failure and never retried.
    """
    trace_id = set_trace_id()

    logger.info(
        "extraction_request",
        url=request.url,
        output_format=request.format.value if request.format else None,
        html_length=len(request.html),
        trace_id=trace_id,
    )

    # The worker thread is abandoned on timeout, not interrupted
    loop = asyncio.get_running_loop()
    context = contextvars.copy_context()
    try:
        return await asyncio.wait_for(
            loop.run_in_executor(None, context.run, _extract, request),
            timeout=config.RESPONSE_TIMEOUT,
        )
    except asyncio.TimeoutError:
        logger.error("extraction_timeout", url=request.url, timeout=config.RESPONSE_TIMEOUT)
        return ExtractionResponse.failure(TIMEOUT_MESSAGE)
    except Exception as e:
        logger.error("extraction_error", error=str(e), url=request.url)
        return ExtractionResponse.failure(str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
