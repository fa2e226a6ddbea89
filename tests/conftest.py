"""
Test configuration and fixtures for the SEO Insights API.

Outbound HTTP never leaves the process: page fetches and PageSpeed calls are
served by ``httpx.MockTransport`` handlers defined here.
"""

import os
from typing import Generator

from dotenv import load_dotenv

import httpx
import pytest
from fastapi.testclient import TestClient

load_dotenv()

# Never call the real PageSpeed API from tests
os.environ["PAGESPEED_API_KEY"] = ""


SAMPLE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Handmade Ceramic Mugs | Clayworks</title>
  <meta name="description" content="Small-batch ceramic mugs thrown and glazed by hand.">
  <meta name="keywords" content="ceramics, mugs, pottery">
  <meta name="robots" content="index, follow">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <meta name="author" content="Clayworks Studio">
  <meta name="theme-color" content="#aa5533">
  <meta http-equiv="x-ua-compatible" content="ie=edge">
  <meta property="og:title" content="Clayworks Mugs">
  <meta property="og:description" content="Hand-thrown mugs">
  <meta property="og:image" content="https://cdn.clayworks.test/og.png">
  <meta property="og:url" content="https://clayworks.test/">
  <meta property="og:type" content="website">
  <meta property="og:site_name" content="Clayworks">
  <meta name="twitter:card" content="summary_large_image">
  <meta name="twitter:title" content="Clayworks Mugs">
  <meta name="twitter:site" content="@clayworks">
  <link rel="canonical" href="/mugs">
  <link rel="icon" href="/favicon.ico">
  <script type="application/ld+json">{"@context": "https://schema.org", "@type": "Organization", "name": "Clayworks"}</script>
  <script type="application/ld+json">{"@context": "https://schema.org", "@graph": [{"@type": "WebSite"}, {"@type": "Organization"}]}</script>
  <script type="application/ld+json">{not valid json</script>
</head>
<body>
  <h1>Handmade ceramic mugs</h1>
  <h2>Why pottery matters</h2>
  <p>Every mug starts as wet clay on the wheel. Pottery takes patience. Glazes are mixed by hand.
     Each pottery piece is fired twice. Pottery lasts for decades. Buy pottery that was made with care!</p>
  <h2>Shipping</h2>
  <h3>Returns</h3>
  <img src="/img/mug.jpg" alt="Blue mug" width="400" height="300" loading="lazy">
  <img src="https://cdn.clayworks.test/kiln.jpg">
  <a href="/shop">Shop</a>
  <a href="https://clayworks.test/about">About</a>
  <a href="https://instagram.com/clayworks">Instagram</a>
  <a href="#top">Top</a>
  <a>No href</a>
  <script>var tracking = "should not count as words";</script>
</body>
</html>
"""


def html_handler(html: str = SAMPLE_HTML, status_code: int = 200, headers: dict = None):
    default_headers = {
        "content-type": "text/html; charset=utf-8",
        "server": "nginx",
    }
    default_headers.update(headers or {})

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, headers=default_headers, text=html)

    return handler


@pytest.fixture
def sample_html() -> str:
    return SAMPLE_HTML


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from app.main import app

    return app


@pytest.fixture(scope="function")
def client(test_app) -> Generator[TestClient, None, None]:
    """
    Create a test client for making HTTP requests.
    The lifespan runs on enter, so every test starts with an empty result cache.
    """
    with TestClient(test_app) as test_client:
        yield test_client


@pytest.fixture
def page_transport():
    """Factory for a MockTransport that serves a fixed HTML page."""
    def factory(html: str = SAMPLE_HTML, status_code: int = 200, headers: dict = None):
        return httpx.MockTransport(html_handler(html, status_code, headers))

    return factory


class CountingHandler:
    """MockTransport handler that serves one page and records every requested URL."""

    def __init__(self, html: str = SAMPLE_HTML, status_code: int = 200):
        self.calls = []
        self._respond = html_handler(html, status_code)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(str(request.url))
        return self._respond(request)


@pytest.fixture
def counting_handler():
    return CountingHandler
