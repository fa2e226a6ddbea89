import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from app.features.seo.schemas.seo import AnalysisResult
from app.platform.config import settings
from app.platform.logger import get_logger
from app.platform.utils.url_validator import build_cache_key, normalize_url

logger = get_logger("result_cache")


@dataclass
class CacheEntry:
    result: AnalysisResult
    timestamp: float


class ResultCache:
    """
    Process-local TTL cache of analysis results keyed by normalized URL.

    Expiry is only checked on access; an expired entry is evicted by the
    ``get`` that finds it. Writes overwrite. Concurrent analyses of the same
    URL are not coalesced, the last writer wins.
    """

    def __init__(self, ttl_seconds: int = None, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.RESULT_CACHE_TTL_SECONDS
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    @staticmethod
    def key_for(url: str) -> str:
        return build_cache_key(normalize_url(url))

    def get(self, url: str) -> Optional[AnalysisResult]:
        key = self.key_for(url)
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() - entry.timestamp >= self.ttl_seconds:
            logger.info(f"Cache entry expired for {url}")
            del self._entries[key]
            return None

        return entry.result.model_copy(deep=True)

    def set(self, url: str, result: AnalysisResult) -> None:
        key = self.key_for(url)
        self._entries[key] = CacheEntry(result=result.model_copy(deep=True), timestamp=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, url: str) -> bool:
        return self.key_for(url) in self._entries
