from app.features.seo.schemas.seo import TechnicalMetrics
from app.features.seo.services.markup import HtmlDocument
from app.features.seo.services.page_fetcher import FetchedPage

FAVICON_SELECTOR = 'link[rel~="icon"]'


def check_technical(page: FetchedPage, doc: HtmlDocument) -> TechnicalMetrics:
    """
    HTTP-level and markup-level technical signals.

    Reuses the response already fetched for content analysis. ``has_https``
    only looks at the requested URL's scheme; no certificate is checked.
    """
    images = doc.elements("img")
    with_alt = sum(1 for img in images if img.has_attribute("alt"))

    return TechnicalMetrics(
        status_code=page.status_code,
        content_type=page.header("content-type"),
        content_length=page.header("content-length"),
        server=page.header("server"),
        has_https=page.url.lower().startswith("https"),
        has_mobile_viewport=doc.query_one('meta[name="viewport"]') is not None,
        has_favicon=doc.query_one(FAVICON_SELECTOR) is not None,
        has_open_graph=doc.query_one('meta[property^="og:"]') is not None,
        has_twitter_cards=doc.query_one('meta[name^="twitter:"]') is not None,
        has_structured_data=doc.query_one('script[type="application/ld+json"]') is not None,
        image_alt_count=with_alt,
        total_images=len(images),
        missing_alt_images=len(images) - with_alt,
    )
