"""
Product record models for the Product Sheet Extractor.

RawRecord is what the extractors found, untouched by business rules.
CanonicalRecord is the validated, placeholder-filled form handed to the
renderer. Both are immutable once built.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


TITLE_PLACEHOLDER = "Titre non disponible"
PRICE_PLACEHOLDER = "Prix non disponible"
RATING_PLACEHOLDER = "Aucune note"
REVIEW_COUNT_PLACEHOLDER = "0 avis"


class SpecPair(BaseModel):
    """One row of the technical specification table."""
    model_config = ConfigDict(frozen=True)

    key: str
    value: str


class ProductRecord(BaseModel):
    """
    Fields shared by raw and canonical records.

    Not-found is always an explicit empty value, never an absent field.
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    title: str = ""
    price: str = ""
    image: str = ""
    rating: str = ""
    review_count: str = ""
    url: str = ""
    about_item: List[str] = Field(default_factory=list)
    technical_description: List[str] = Field(default_factory=list)
    technical_specs: List[SpecPair] = Field(default_factory=list)
    reviews: List[str] = Field(default_factory=list)
    authors: List[str] = Field(default_factory=list)
    brand: Optional[str] = None

    def get_present_fields(self) -> List[str]:
        """Return list of non-empty fields."""
        return [name for name, value in self if value]

    def get_missing_fields(self) -> List[str]:
        """Return list of empty fields."""
        return [name for name, value in self if not value]


class RawRecord(ProductRecord):
    """Product data as located in the page, before validation."""


class CanonicalRecord(ProductRecord):
    """Validated product data; every placeholder is already applied."""

    title: str = TITLE_PLACEHOLDER
    price: str = PRICE_PLACEHOLDER
    rating: str = RATING_PLACEHOLDER
    review_count: str = REVIEW_COUNT_PLACEHOLDER

    def to_dict(self) -> dict:
        """Return the record as a JSON-serializable dictionary."""
        return self.model_dump(mode="json", by_alias=True)
