from conftest import CANONICAL_URL, make_page
from product_sheet.layers.aggregation import RawAggregator
from product_sheet.models.record import RawRecord, SpecPair


def test_extract_all_complete_page(complete_page):
    raw = RawAggregator().extract_all(complete_page)

    assert isinstance(raw, RawRecord)
    assert raw.title == "Widget Pro 3000"
    assert raw.price == "12,99 €"
    assert raw.rating == "4,5 sur 5 étoiles"
    assert raw.review_count == "128 avis"
    assert raw.url == CANONICAL_URL
    assert raw.brand == "Acme"
    assert raw.technical_specs[0] == SpecPair(key="Marque", value="Acme")
    assert raw.authors == []


def test_extract_all_empty_page_uses_explicit_defaults(empty_page):
    raw = RawAggregator().extract_all(empty_page)

    assert raw.title == ""
    assert raw.price == ""
    assert raw.about_item == []
    assert raw.technical_specs == []
    assert raw.reviews == []
    assert raw.brand is None
    assert raw.url == "https://www.amazon.fr/dp/B000000001"
    assert "title" in raw.get_missing_fields()
    assert raw.get_present_fields() == ["url"]


def test_failing_extractor_does_not_cost_other_fields(complete_page, monkeypatch):
    aggregator = RawAggregator()

    def broken(document):
        raise RuntimeError("extractor exploded")

    monkeypatch.setattr(aggregator.extractor, "extract_price", broken)
    monkeypatch.setattr(aggregator.extractor, "extract_about_item", broken)
    raw = aggregator.extract_all(complete_page)

    assert raw.price == ""
    assert raw.about_item == []
    assert raw.title == "Widget Pro 3000"
    assert raw.rating == "4,5 sur 5 étoiles"


def test_url_without_asin_is_kept():
    page = make_page("<html><body></body></html>", url="https://www.amazon.fr/gp/product/offers")
    assert RawAggregator().extract_all(page).url == "https://www.amazon.fr/gp/product/offers"


def test_url_keeps_page_origin():
    page = make_page("<html><body></body></html>", url="https://smile.amazon.fr/Thing/dp/B012345678?th=1")
    assert RawAggregator().extract_all(page).url == "https://smile.amazon.fr/dp/B012345678"
