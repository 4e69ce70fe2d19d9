import pytest

from conftest import CANONICAL_URL, EXTRACTED_ON
from product_sheet.config import LIMIT_PROFILES, Config
from product_sheet.generators.document_renderer import DocumentRenderer, escape_cell
from product_sheet.models.record import CanonicalRecord, SpecPair
from product_sheet.models.response import OutputFormat


@pytest.fixture
def renderer():
    return DocumentRenderer(LIMIT_PROFILES["full"])


@pytest.fixture
def record():
    return CanonicalRecord(
        title="Widget Pro 3000",
        price="12,99 €",
        image="https://m.media-amazon.com/images/I/widget.jpg",
        rating="4,5/5",
        review_count="128 avis",
        url=CANONICAL_URL,
        about_item=["Moteur silencieux de 1200 W"],
        technical_description=["Un robot multifonction pour la cuisine quotidienne."],
        technical_specs=[SpecPair(key="Marque", value="Acme"), SpecPair(key="Compatibilité", value="A|B")],
        reviews=["Excellent robot, très puissant.", "Facile à nettoyer après usage."],
        brand="Acme",
    )


def test_full_markdown_document(renderer, record):
    markdown = renderer.render_markdown(record, EXTRACTED_ON)

    assert markdown == "\n".join([
        "---",
        "# Widget Pro 3000",
        "",
        "## 📊 Informations clés",
        "- **Prix** : 12,99 €",
        "- **Marque** : Acme",
        "- **Note** : 4,5/5 (128 avis)",
        "",
        "## 📦 À propos de cet article",
        "- Moteur silencieux de 1200 W",
        "",
        "## 📝 Description technique",
        "1. Un robot multifonction pour la cuisine quotidienne.",
        "",
        "## 🔧 Descriptif technique",
        "| Caractéristique | Valeur |",
        "|-----------------|--------|",
        "| Marque | Acme |",
        "| Compatibilité | A, B |",
        "",
        "## 💬 Aperçu des avis clients",
        "1. Excellent robot, très puissant.",
        "2. Facile à nettoyer après usage.",
        "",
        "![Image produit](https://m.media-amazon.com/images/I/widget.jpg)",
        "",
        "---",
        f"🔗 **Source** : {CANONICAL_URL}",
        "📅 **Extrait le** : 2024-03-15",
        "---",
    ])


def test_record_without_specs_or_reviews(renderer):
    record = CanonicalRecord(url=CANONICAL_URL)
    markdown = renderer.render_markdown(record, EXTRACTED_ON)

    assert "# Titre non disponible" in markdown
    assert "- **Prix** : Prix non disponible" in markdown
    assert "- **Note** : Aucune note (0 avis)" in markdown
    assert "## 🔧 Descriptif technique\n- Non disponible" in markdown
    assert "## 💬 Aperçu des avis clients\n- Aucun avis disponible" in markdown
    assert "Marque" not in markdown
    assert "## 📦" not in markdown
    assert "## 📝" not in markdown
    assert "![Image produit]" not in markdown


def test_authors_line(renderer):
    record = CanonicalRecord(title="Les Misérables", authors=["Victor Hugo", "Guy Rosa"])
    assert "- **Auteur(s)** : Victor Hugo, Guy Rosa" in renderer.render_markdown(record, EXTRACTED_ON)


def test_rendering_is_idempotent(renderer, record):
    first = renderer.render(record, OutputFormat.MARKDOWN, EXTRACTED_ON)
    second = renderer.render(record, OutputFormat.MARKDOWN, EXTRACTED_ON)
    assert first == second


def test_lists_are_capped_again_before_rendering(renderer):
    record = CanonicalRecord(reviews=[f"Avis numéro {i} assez long" for i in range(6)])
    markdown = renderer.render_markdown(record, EXTRACTED_ON)

    assert "3. Avis numéro 2 assez long" in markdown
    assert "Avis numéro 3" not in markdown


def test_json_output(renderer, record):
    data = renderer.render(record, OutputFormat.JSON, EXTRACTED_ON)

    assert data["title"] == "Widget Pro 3000"
    assert data["rating"] == "4,5/5"
    assert data["technicalSpecs"][1] == {"key": "Compatibilité", "value": "A|B"}
    assert data["reviews"] == record.reviews
    assert data["brand"] == "Acme"
    assert data["extractedOn"] == "2024-03-15"


def test_default_format_follows_config(renderer, record, monkeypatch):
    monkeypatch.setattr(Config, "OUTPUT_FORMAT", "json")
    assert isinstance(renderer.render(record, extracted_on=EXTRACTED_ON), dict)

    monkeypatch.setattr(Config, "OUTPUT_FORMAT", "markdown")
    assert renderer.render(record, extracted_on=EXTRACTED_ON).startswith("---\n# Widget Pro 3000")


@pytest.mark.parametrize(
    "value,expected",
    [("A|B|C", "A, B, C"), ("plain", "plain"), (None, "")],
)
def test_escape_cell(value, expected):
    assert escape_cell(value) == expected


def test_json_keys_are_camel_case(renderer, record):
    data = renderer.render_json(record, EXTRACTED_ON)

    assert set(data) == {
        "title", "price", "image", "rating", "reviewCount", "url", "aboutItem",
        "technicalDescription", "technicalSpecs", "reviews", "authors", "brand",
        "extractedOn",
    }
    assert data["reviewCount"] == "128 avis"
    assert data["aboutItem"] == ["Moteur silencieux de 1200 W"]
