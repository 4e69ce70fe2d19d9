from datetime import date

import pytest

from product_sheet.adapters.page_document import PageDocument

PRODUCT_URL = "https://www.amazon.fr/Widget-Pro-3000/dp/B0ABCDEF12/ref=sr_1_1?keywords=widget"
CANONICAL_URL = "https://www.amazon.fr/dp/B0ABCDEF12"
EXTRACTED_ON = date(2024, 3, 15)

COMPLETE_PAGE_HTML = """
<html>
<head><title>Amazon.fr : Widget Pro 3000</title></head>
<body>
<div id="wayfinding-breadcrumbs_feature_div"><ul><li><a>Cuisine et Maison</a></li></ul></div>
<div id="ppd">
  <div id="leftCol">
    <div id="imageBlock">
      <div class="imgTagWrapper">
        <img id="landingImage" src="https://m.media-amazon.com/images/I/widget.jpg" alt="Widget">
      </div>
    </div>
  </div>
  <div id="centerCol">
    <h1 id="title"><span id="productTitle">  Widget Pro 3000  </span></h1>
    <div id="bylineInfo_feature_div">
      <a id="bylineInfo" class="a-link-normal" href="/stores/Acme">Visiter la boutique Acme</a>
    </div>
    <div id="averageCustomerReviews">
      <span id="acrPopover" title="4,5 sur 5 étoiles">
        <span class="a-icon-alt">4,5 sur 5 étoiles</span>
      </span>
      <a id="acrCustomerReviewLink"><span id="acrCustomerReviewText">128 évaluations</span></a>
    </div>
    <div id="corePrice_feature_div">
      <span class="a-price">
        <span class="a-offscreen">12,99 €</span>
        <span aria-hidden="true">
          <span class="a-price-whole">12,</span><span class="a-price-fraction">99</span><span class="a-price-symbol">€</span>
        </span>
      </span>
    </div>
    <div id="feature-bullets">
      <ul>
        <li><span class="a-list-item">Moteur silencieux de 1200 W</span></li>
        <li><span class="a-list-item">Bol</span></li>
        <li><span class="a-list-item">Garantie constructeur de deux ans</span></li>
      </ul>
    </div>
  </div>
</div>
<div id="productDescription">
  <p>Le Widget Pro 3000 est un robot multifonction conçu pour la cuisine quotidienne.</p>
  <p>.css-rule { display: none }</p>
  <p>12,99 €</p>
</div>
<div id="prodDetails">
  <table id="productDetails_techSpec_section_1">
    <tr><th>Marque</th><td>Acme</td></tr>
    <tr><th>Puissance</th><td>1200 watts</td></tr>
  </table>
  <table id="productDetails_techSpec_section_2">
    <tr><th>Poids de l'article</th><td>3,2 kg</td></tr>
    <tr><th>Commentaires client</th><td>4,5 sur 5 étoiles</td></tr>
    <tr><th>Classement des meilleures ventes d'Amazon</th><td>1 en Cuisine</td></tr>
  </table>
</div>
<div id="cm-cr-dp-review-list">
  <div data-hook="review">
    <div data-hook="review-body">
      <div class="a-expander-content">
        <span>Excellent robot, très puissant et facile à nettoyer après usage.</span>
      </div>
      <div class="a-expander-header"><span class="a-expander-prompt">Lire la suite</span></div>
    </div>
  </div>
  <div data-hook="review">
    <div data-hook="review-body"><span>Trop court</span></div>
  </div>
</div>
<div id="sims-consolidated" class="a-carousel">
  <div class="sims-item">
    <span class="a-icon-alt">2,0 sur 5 étoiles</span>
    <span class="a-offscreen">999,00 €</span>
  </div>
</div>
</body>
</html>
"""

BOOK_PAGE_HTML = """
<html><body>
<div id="wayfinding-breadcrumbs_feature_div"><ul><li><a>Livres</a></li><li><a>Romans</a></li></ul></div>
<div id="ppd">
  <div id="centerCol">
    <span id="productTitle">Les Misérables</span>
    <div id="bylineInfo">
      <span class="author"><a class="a-link-normal" href="/a1">Victor Hugo</a> <span>(Auteur)</span></span>
      <span class="author"><a class="a-link-normal" href="/a2">Guy Rosa</a> <span>(Préface)</span></span>
    </div>
    <div id="tmmSwatches">
      <ul>
        <li class="swatchElement"><span class="a-button"><span class="a-color-secondary">24,90 €</span></span></li>
        <li class="swatchElement selected">
          <span class="a-button a-button-selected"><span class="slot-price"><span>8,90 €</span></span></span>
        </li>
      </ul>
    </div>
  </div>
</div>
<div id="detailBullets_feature_div">
  <ul>
    <li><span class="a-list-item"><span class="a-text-bold">Éditeur &#8207; : &#8206;</span><span>Gallimard</span></span></li>
    <li><span class="a-list-item"><span class="a-text-bold">Langue &#8207; : &#8206;</span><span>Français</span></span></li>
    <li><span class="a-list-item">Pas de séparateur ici</span></li>
  </ul>
</div>
</body></html>
"""

EMPTY_PAGE_HTML = "<html><body><div id='nothing'>Rien</div></body></html>"


@pytest.fixture
def complete_page():
    return PageDocument.from_html(COMPLETE_PAGE_HTML, PRODUCT_URL)


@pytest.fixture
def book_page():
    return PageDocument.from_html(BOOK_PAGE_HTML, "https://www.amazon.fr/Les-Miserables/dp/2070409224")


@pytest.fixture
def empty_page():
    return PageDocument.from_html(EMPTY_PAGE_HTML, "https://www.amazon.fr/dp/B000000001")


def make_page(html, url=PRODUCT_URL):
    return PageDocument.from_html(html, url)
