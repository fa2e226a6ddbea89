"""
HTTP conditional-caching headers for analysis responses.

The ETag is the quoted cache key of the normalized URL, so it is stable for a
URL across requests and processes. Last-Modified is a fixed date; freshness is
carried by ETag and max-age, not by it.
"""

import time
from email.utils import formatdate
from typing import Dict, Optional

from app.platform.config import settings
from app.platform.utils.url_validator import build_cache_key

LAST_MODIFIED = "Wed, 21 Oct 2015 07:28:00 GMT"


def build_etag(normalized_url: str) -> str:
    return f'"{build_cache_key(normalized_url)}"'


def cache_headers(normalized_url: str, now: Optional[float] = None, max_age: int = None) -> Dict[str, str]:
    max_age = max_age if max_age is not None else settings.RESULT_CACHE_TTL_SECONDS
    now = now if now is not None else time.time()
    return {
        "Cache-Control": f"public, max-age={max_age}, must-revalidate",
        "ETag": build_etag(normalized_url),
        "Expires": formatdate(now + max_age, usegmt=True),
        "Last-Modified": LAST_MODIFIED,
        "Vary": "Accept-Encoding",
    }


def no_store_headers() -> Dict[str, str]:
    return {
        "Cache-Control": "no-cache, no-store, must-revalidate",
        "Pragma": "no-cache",
        "Expires": "0",
    }


def is_not_modified(if_none_match: Optional[str], normalized_url: str) -> bool:
    """True when If-None-Match is exactly the current quoted ETag."""
    if not if_none_match:
        return False
    return if_none_match == build_etag(normalized_url)
