"""
Request/response models for the extraction trigger boundary.
"""
from typing import Any, Dict, Optional, Union
from enum import Enum
from pydantic import BaseModel


class OutputFormat(str, Enum):
    """Serialization of the output document."""
    MARKDOWN = "markdown"
    JSON = "json"


class ExtractRequest(BaseModel):
    """Request model for one extraction: the already-loaded page."""
    url: str
    html: str
    format: Optional[OutputFormat] = None


class ExtractionResponse(BaseModel):
    """
    Result of one extraction.

    Either success with a document, or failure with a user-facing message.
    """
    success: bool
    document: Optional[Union[str, Dict[str, Any]]] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, document: Union[str, Dict[str, Any]]) -> "ExtractionResponse":
        return cls(success=True, document=document)

    @classmethod
    def failure(cls, error: str) -> "ExtractionResponse":
        return cls(success=False, error=error)
