"""
Document Renderer for the Product Sheet Extractor.
Renders a canonical record as a Markdown sheet or a JSON record.
"""
from datetime import date
from typing import Any, Dict, List, Optional, Union

from product_sheet.config import ExtractionLimits, config
from product_sheet.models.record import CanonicalRecord
from product_sheet.models.response import OutputFormat
from product_sheet.utils.logger import LayerLogger


SPECS_UNAVAILABLE = "- Non disponible"
NO_REVIEWS = "- Aucun avis disponible"
SPECS_TABLE_HEADER = [
    "| Caractéristique | Valeur |",
    "|-----------------|--------|",
]


def escape_cell(value: Optional[str]) -> str:
    """Replace the table delimiter inside a cell value."""
    return (value or "").replace("|", ", ")


class DocumentRenderer:
    """
    Pure renderer from canonical record to output document.

    Principles:
    - Same record and same date give byte-identical output
    - Optional sections are omitted when empty
    - List caps are applied again before rendering
    """

    def __init__(self, limits: Optional[ExtractionLimits] = None):
        self.limits = limits or config.get_limits()
        self.logger = LayerLogger("document_renderer")

    def render(
        self,
        record: CanonicalRecord,
        output_format: Optional[OutputFormat] = None,
        extracted_on: Optional[date] = None,
    ) -> Union[str, Dict[str, Any]]:
        """
        Render record in the requested (or configured) format.

        Args:
            record: Canonical record
            output_format: Markdown or JSON; defaults to OUTPUT_FORMAT
            extracted_on: Extraction date; defaults to today

        Returns:
            Markdown text or a JSON-serializable dict
        """
        if output_format is None:
            output_format = OutputFormat.JSON if config.is_json_output() else OutputFormat.MARKDOWN

        self.logger.log_action(
            "render_document",
            "started",
            url=record.url,
            output_format=output_format.value,
        )

        if output_format == OutputFormat.JSON:
            return self.render_json(record, extracted_on)
        return self.render_markdown(record, extracted_on)

    def render_json(self, record: CanonicalRecord, extracted_on: Optional[date] = None) -> Dict[str, Any]:
        """JSON record mirroring the canonical fields plus the extraction date."""
        data = self._capped(record).to_dict()
        data["extractedOn"] = (extracted_on or date.today()).isoformat()
        return data

    def render_markdown(self, record: CanonicalRecord, extracted_on: Optional[date] = None) -> str:
        """Markdown product sheet."""
        record = self._capped(record)
        date_str = (extracted_on or date.today()).isoformat()

        lines = [
            "---",
            f"# {record.title or 'Product'}",
            "",
            "## 📊 Informations clés",
        ]
        lines.extend(self._key_facts(record))

        if record.about_item:
            lines.extend(["", "## 📦 À propos de cet article"])
            lines.extend(f"- {item}" for item in record.about_item)

        if record.technical_description:
            lines.extend(["", "## 📝 Description technique"])
            lines.extend(self._numbered(record.technical_description))

        lines.extend(["", "## 🔧 Descriptif technique"])
        lines.extend(self._specs_block(record))

        lines.extend(["", "## 💬 Aperçu des avis clients"])
        lines.extend(self._numbered(record.reviews) if record.reviews else [NO_REVIEWS])
        lines.append("")

        if record.image:
            lines.extend([f"![Image produit]({record.image})", ""])

        lines.extend([
            "---",
            f"🔗 **Source** : {record.url}",
            f"📅 **Extrait le** : {date_str}",
            "---",
        ])
        return "\n".join(lines)

    def _key_facts(self, record: CanonicalRecord) -> List[str]:
        facts = [f"- **Prix** : {record.price or '—'}"]
        if record.brand:
            facts.append(f"- **Marque** : {record.brand}")
        facts.append(f"- **Note** : {record.rating or '—'} ({record.review_count or '—'})")
        if record.authors:
            facts.append(f"- **Auteur(s)** : {', '.join(record.authors)}")
        return facts

    def _specs_block(self, record: CanonicalRecord) -> List[str]:
        if not record.technical_specs:
            return [SPECS_UNAVAILABLE]
        rows = [
            f"| {escape_cell(pair.key)} | {escape_cell(pair.value)} |"
            for pair in record.technical_specs
        ]
        return SPECS_TABLE_HEADER + rows

    def _numbered(self, items: List[str]) -> List[str]:
        return [f"{index}. {item}" for index, item in enumerate(items, start=1)]

    def _capped(self, record: CanonicalRecord) -> CanonicalRecord:
        return record.model_copy(update={
            "about_item": record.about_item[:self.limits.max_about_items],
            "technical_description": record.technical_description[:self.limits.max_description_paragraphs],
            "technical_specs": record.technical_specs[:self.limits.max_specs],
            "reviews": record.reviews[:self.limits.max_reviews],
            "authors": record.authors[:self.limits.max_authors],
        })
