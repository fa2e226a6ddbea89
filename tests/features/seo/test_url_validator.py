import re

import pytest

from app.platform.exceptions import InvalidUrlError
from app.platform.utils.url_validator import (
    build_cache_key,
    is_valid_url,
    normalize_url,
    resolve_url,
    validate_url,
)


class TestNormalizeUrl:
    def test_missing_scheme_gets_https(self):
        assert normalize_url("example.com") == "https://example.com/"

    def test_http_scheme_is_kept(self):
        assert normalize_url("http://example.com/page?q=1") == "http://example.com/page?q=1"

    def test_scheme_and_host_are_lowercased(self):
        assert normalize_url("HTTPS://Example.COM/Path") == "https://example.com/Path"

    def test_default_port_is_dropped(self):
        assert normalize_url("https://example.com:443/a") == "https://example.com/a"
        assert normalize_url("http://example.com:80") == "http://example.com/"

    def test_custom_port_is_kept(self):
        assert normalize_url("example.com:8080/x") == "https://example.com:8080/x"

    def test_surrounding_whitespace_is_ignored(self):
        assert normalize_url("  example.com  ") == "https://example.com/"

    @pytest.mark.parametrize(
        "url",
        [
            "example.com",
            "http://Example.com:80/a/b?x=1#frag",
            "https://user:pw@example.com:8443",
            "sub.example.co.uk/path/",
            "http://[::1]:8000/",
        ],
    )
    def test_normalization_is_idempotent(self, url):
        once = normalize_url(url)
        assert normalize_url(once) == once

    @pytest.mark.parametrize("url", ["", "   ", "https://", "https://exa mple.com", "example.com:99999"])
    def test_invalid_urls_raise(self, url):
        with pytest.raises(InvalidUrlError):
            normalize_url(url)

    def test_none_raises(self):
        with pytest.raises(InvalidUrlError, match="URL is required"):
            normalize_url(None)


def test_is_valid_url_follows_normalization():
    assert is_valid_url("example.com") is True
    assert is_valid_url("https://") is False


def test_validate_url_returns_message():
    ok, normalized, error = validate_url("example.com")
    assert (ok, normalized, error) == (True, "https://example.com/", "")

    ok, normalized, error = validate_url("")
    assert ok is False
    assert error == "URL cannot be empty"


class TestCacheKey:
    def test_key_is_header_safe(self):
        key = build_cache_key("https://example.com/a?b=c&d=e#f")
        assert re.fullmatch(r"[A-Za-z0-9_-]+", key)

    def test_key_is_deterministic(self):
        assert build_cache_key("https://example.com/") == build_cache_key("https://example.com/")

    def test_distinct_urls_get_distinct_keys(self):
        urls = ["https://example.com/", "https://example.com/a", "http://example.com/", "https://example.org/"]
        assert len({build_cache_key(u) for u in urls}) == len(urls)


class TestResolveUrl:
    def test_relative_ref_is_joined(self):
        assert resolve_url("https://example.com/a/", "b.png") == "https://example.com/a/b.png"

    def test_absolute_ref_wins(self):
        assert resolve_url("https://example.com/", "https://cdn.test/x.png") == "https://cdn.test/x.png"

    def test_unparseable_ref_is_returned_as_written(self):
        assert resolve_url("https://example.com/", "http://[broken/x.png") == "http://[broken/x.png"
