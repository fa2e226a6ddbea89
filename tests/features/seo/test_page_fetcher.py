import httpx
import pytest

from app.features.seo.services.page_fetcher import PageFetcher
from app.platform.exceptions import FetchFailureError


@pytest.mark.asyncio
async def test_fetch_returns_status_headers_and_body(page_transport, sample_html):
    fetcher = PageFetcher(transport=page_transport())

    page = await fetcher.fetch("https://clayworks.test/")

    assert page.status_code == 200
    assert page.header("Content-Type") == "text/html; charset=utf-8"
    assert page.header("server") == "nginx"
    assert page.html == sample_html
    assert page.url == "https://clayworks.test/"


@pytest.mark.asyncio
async def test_fetch_sends_user_agent():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["ua"] = request.headers.get("user-agent")
        return httpx.Response(200, text="<html></html>")

    fetcher = PageFetcher(user_agent="TestAgent/1.0", transport=httpx.MockTransport(handler))
    await fetcher.fetch("https://clayworks.test/")

    assert seen["ua"] == "TestAgent/1.0"


@pytest.mark.asyncio
async def test_non_success_status_is_a_fetch_failure(page_transport):
    fetcher = PageFetcher(transport=page_transport(status_code=404))

    with pytest.raises(FetchFailureError, match="returned status 404") as exc_info:
        await fetcher.fetch("https://clayworks.test/missing")

    assert exc_info.value.upstream_status == 404


@pytest.mark.asyncio
async def test_network_error_is_a_fetch_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = PageFetcher(transport=httpx.MockTransport(handler))

    with pytest.raises(FetchFailureError, match="Failed to fetch page data"):
        await fetcher.fetch("https://clayworks.test/")


@pytest.mark.asyncio
async def test_timeout_is_a_fetch_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    fetcher = PageFetcher(timeout=10, transport=httpx.MockTransport(handler))

    with pytest.raises(FetchFailureError, match="timed out"):
        await fetcher.fetch("https://clayworks.test/")


@pytest.mark.asyncio
async def test_redirects_are_followed():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(301, headers={"location": "https://clayworks.test/new"})
        return httpx.Response(200, text="<p>new</p>")

    fetcher = PageFetcher(transport=httpx.MockTransport(handler))
    page = await fetcher.fetch("https://clayworks.test/old")

    assert page.status_code == 200
    assert page.final_url == "https://clayworks.test/new"


@pytest.mark.asyncio
async def test_unencodable_host_is_a_fetch_failure(page_transport):
    fetcher = PageFetcher(transport=page_transport())

    with pytest.raises(FetchFailureError, match="invalid URL"):
        await fetcher.fetch("https://exa☃mple..com/")
