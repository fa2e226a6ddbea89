import base64
import re
from typing import Tuple
from urllib.parse import urljoin, urlsplit, urlunsplit

from app.platform.exceptions import InvalidUrlError

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(url: str) -> str:
    """
    Return the canonical form of ``url``.

    A missing ``http(s)://`` scheme is replaced by ``https://``. Scheme and
    host are lower-cased, default ports dropped and an empty path becomes
    ``/``, so ``example.com`` normalizes to ``https://example.com/``.
    Normalizing an already normalized URL returns it unchanged.
    """
    if url is None:
        raise InvalidUrlError("URL is required")

    url = url.strip()
    if not url:
        raise InvalidUrlError("URL cannot be empty")

    if not _SCHEME_RE.match(url):
        url = f"https://{url}"

    try:
        parsed = urlsplit(url)
        port = parsed.port
    except ValueError as e:
        raise InvalidUrlError(f"Invalid URL format: {e}")

    host = parsed.hostname
    if not host:
        raise InvalidUrlError("Invalid URL format: missing domain")
    if any(ch.isspace() for ch in host) or any(ch in host for ch in "<>\"{}|\\^`"):
        raise InvalidUrlError(f"Invalid URL format: bad host {host!r}")

    scheme = parsed.scheme.lower()
    if ":" in host:
        host = f"[{host}]"

    netloc = host
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        netloc = f"{host}:{port}"

    if parsed.username is not None:
        userinfo = parsed.username
        if parsed.password is not None:
            userinfo = f"{userinfo}:{parsed.password}"
        netloc = f"{userinfo}@{netloc}"

    path = parsed.path or "/"

    return urlunsplit((scheme, netloc, path, parsed.query, parsed.fragment))


def is_valid_url(url: str) -> bool:
    """A URL is valid when it can be normalized."""
    try:
        normalize_url(url)
    except InvalidUrlError:
        return False
    return True


def validate_url(url: str) -> Tuple[bool, str, str]:
    """Return ``(is_valid, normalized_url, error_message)``."""
    try:
        return True, normalize_url(url), ""
    except InvalidUrlError as e:
        return False, "", e.message


def build_cache_key(normalized_url: str) -> str:
    """
    Derive a header- and filesystem-safe key from a normalized URL.

    URL-safe base64 without padding: only ``[A-Za-z0-9_-]`` characters, and
    distinct URLs always yield distinct keys.
    """
    encoded = base64.urlsafe_b64encode(normalized_url.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=")


def resolve_url(base_url: str, ref: str) -> str:
    """Resolve ``ref`` against ``base_url``; an unparseable ``ref`` is returned as written."""
    try:
        return urljoin(base_url, ref)
    except ValueError:
        return ref
