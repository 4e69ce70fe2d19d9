"""
Content rules shared by extraction and validation.

Both stages apply the same rejectors and formatters so a value that passes
extraction is judged by the same rules again during canonicalization.
"""
import re
from typing import Optional

CURRENCY_SYMBOL = "€"
ASIN_PATTERN = re.compile(r"/dp/([A-Z0-9]{10})")
REVIEW_UNIT = "avis"

# Spec keys that describe the listing, not the product
IGNORED_SPEC_KEYS = re.compile(
    r"commentaires client|classement|étoiles|meilleures ventes"
    r"|customer reviews|best sellers|stars",
    re.I,
)

READ_MORE_SUFFIX = re.compile(r"\s*(Lire la suite|Read more|Voir plus)\s*$", re.I)

DIGITS_AND_SYMBOLS = re.compile(r"^[\d.,;:€$%+\-*/\s]+$")

CSS_OR_SCRIPT_TOKENS = ("display:", "margin:", "padding:", "{", "}", "function(")

PARENTHESES = re.compile(r"\s*\(+|\s*\)+")
REVIEW_NUMBER = re.compile(r"\d[\d\s]*")
DOUBLED_UNIT = re.compile(rf"{REVIEW_UNIT} {REVIEW_UNIT}", re.I)
LEADING_ZEROS = re.compile(r"^0+(\d)")


def canonical_product_url(address: str, origin: str) -> Optional[str]:
    """'<origin>/dp/<ASIN>' when the address carries an ASIN, else None."""
    match = ASIN_PATTERN.search(address or "")
    if not match:
        return None
    return f"{origin.rstrip('/')}/dp/{match.group(1)}"


def is_ignored_spec_key(key: Optional[str]) -> bool:
    """True for empty keys and keys about rankings, stars or customer comments."""
    if not key or not isinstance(key, str):
        return True
    return bool(IGNORED_SPEC_KEYS.search(key))


def strip_read_more(text: str) -> str:
    """Remove a trailing 'read more' expander label."""
    return READ_MORE_SUFFIX.sub("", text).strip()


def is_only_digits_or_symbols(text: Optional[str]) -> bool:
    """True for short text or text made only of digits, punctuation and currency."""
    if not text or not isinstance(text, str):
        return True
    if len(re.sub(r"\s", "", text)) < 10:
        return True
    return bool(DIGITS_AND_SYMBOLS.match(text))


def looks_like_css_or_script(text: Optional[str]) -> bool:
    """True for short text, selector-like text, or text carrying style/script tokens."""
    if not text or len(text) <= 20:
        return True
    if text.startswith(".") or text.startswith("#"):
        return True
    return any(token in text for token in CSS_OR_SCRIPT_TOKENS)


def format_review_count(text: str) -> str:
    """
    Reduce review count text to '<number> avis'.

    '1 234 (évaluations)' becomes '1 234 avis'. Empty input gives ''.
    """
    text = PARENTHESES.sub(" ", text or "")
    text = re.sub(r"\s+", " ", text).strip()
    if not text:
        return ""
    match = REVIEW_NUMBER.search(text)
    number = re.sub(r"\s+", " ", match.group()).strip() if match else text
    review_count = f"{number} {REVIEW_UNIT}" if number else ""
    review_count = DOUBLED_UNIT.sub(REVIEW_UNIT, review_count).strip()
    return LEADING_ZEROS.sub(r"\1", review_count)
