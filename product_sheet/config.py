"""
Configuration management for the Product Sheet Extractor.
Handles environment variables, application settings and extraction thresholds.
"""
import os
from typing import Dict
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class ExtractionLimits(BaseModel):
    """
    Caps and length thresholds shared by extraction, validation and rendering.

    List caps are enforced at every stage, not only once.
    """
    # List caps
    max_about_items: int = 7
    max_description_paragraphs: int = 3
    max_specs: int = 15
    max_reviews: int = 3
    max_authors: int = 3

    # Minimum lengths (after normalization)
    min_title_length: int = 3
    min_about_length: int = 5
    min_description_length: int = 10
    min_spec_length: int = 3
    min_review_length: int = 15

    # Truncation lengths (ellipsis included)
    max_title_length: int = 150
    max_description_length: int = 500
    max_review_length: int = 150
    max_brand_length: int = 50


LIMIT_PROFILES: Dict[str, ExtractionLimits] = {
    "full": ExtractionLimits(),
    # Shorter excerpts for popup-sized previews
    "compact": ExtractionLimits(
        min_review_length=10,
        max_review_length=120,
        max_description_length=200,
    ),
}


class Config:
    """Application configuration loaded from environment variables."""

    # Server settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")  # json or console

    # Bounded wait for one extraction round-trip (seconds)
    RESPONSE_TIMEOUT: float = float(os.getenv("RESPONSE_TIMEOUT", "5"))

    # Target site
    SITE_DOMAIN: str = os.getenv("SITE_DOMAIN", "amazon.fr")
    SITE_ORIGIN: str = os.getenv("SITE_ORIGIN", "https://www.amazon.fr")

    # Pipeline variant
    OUTPUT_FORMAT: str = os.getenv("OUTPUT_FORMAT", "markdown")  # markdown or json
    LIMITS_PROFILE: str = os.getenv("LIMITS_PROFILE", "full")

    @classmethod
    def get_limits(cls) -> ExtractionLimits:
        """Return the configured threshold profile, falling back to 'full'."""
        return LIMIT_PROFILES.get(cls.LIMITS_PROFILE.lower(), LIMIT_PROFILES["full"])

    @classmethod
    def is_json_output(cls) -> bool:
        """Check if the pipeline renders JSON records instead of Markdown."""
        return cls.OUTPUT_FORMAT.lower() == "json"


config = Config()
