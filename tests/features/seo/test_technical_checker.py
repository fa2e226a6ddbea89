from app.features.seo.services.markup import parse_html
from app.features.seo.services.page_fetcher import FetchedPage
from app.features.seo.services.technical_checker import check_technical


def _page(html: str, url: str = "https://clayworks.test/", headers: dict = None) -> FetchedPage:
    return FetchedPage(
        url=url,
        final_url=url,
        status_code=200,
        headers=headers if headers is not None else {"content-type": "text/html", "content-length": "1234", "server": "nginx"},
        html=html,
    )


def test_signals_from_sample_page(sample_html):
    page = _page(sample_html)
    technical = check_technical(page, parse_html(sample_html))

    assert technical.status_code == 200
    assert technical.content_type == "text/html"
    assert technical.content_length == "1234"
    assert technical.server == "nginx"
    assert technical.has_https is True
    assert technical.has_mobile_viewport is True
    assert technical.has_favicon is True
    assert technical.has_open_graph is True
    assert technical.has_twitter_cards is True
    assert technical.has_structured_data is True
    assert technical.total_images == 2
    assert technical.image_alt_count == 1
    assert technical.missing_alt_images == 1


def test_https_is_a_prefix_check_only():
    technical = check_technical(_page("", url="http://clayworks.test/"), parse_html(""))
    assert technical.has_https is False


def test_bare_page_has_no_signals():
    technical = check_technical(_page("<p>hi</p>", headers={}), parse_html("<p>hi</p>"))

    assert technical.content_type == ""
    assert technical.has_mobile_viewport is False
    assert technical.has_favicon is False
    assert technical.has_open_graph is False
    assert technical.has_twitter_cards is False
    assert technical.has_structured_data is False


def test_shortcut_icon_counts_as_favicon():
    html = '<link rel="shortcut icon" href="/f.ico">'
    assert check_technical(_page(html), parse_html(html)).has_favicon is True


def test_only_image_missing_alt():
    html = '<img src="/a.png">'
    technical = check_technical(_page(html), parse_html(html))
    assert technical.missing_alt_images == technical.total_images == 1
    assert technical.image_alt_count == 0
