import asyncio
from typing import Optional, Tuple

from app.features.seo.schemas.seo import (
    AnalysisOutcome,
    AnalysisResult,
    ContentMetrics,
    MetaTagSet,
    TechnicalMetrics,
)
from app.features.seo.services.content_analyzer import analyze_content
from app.features.seo.services.markup import parse_html
from app.features.seo.services.metadata_extractor import extract_meta_tags
from app.features.seo.services.page_fetcher import PageFetcher
from app.features.seo.services.performance_insights import PerformanceInsightsClient
from app.features.seo.services.structured_data import extract_structured_data
from app.features.seo.services.technical_checker import check_technical
from app.platform.cache.headers import cache_headers, is_not_modified, no_store_headers
from app.platform.cache.result_cache import ResultCache
from app.platform.exceptions import InvalidInputError
from app.platform.logger import get_logger
from app.platform.utils.url_validator import normalize_url

logger = get_logger("seo_analyzer")


class SeoAnalyzer:
    """
    Runs one SEO analysis per call.

    The page pipeline (fetch, parse, extract) and the PageSpeed report run
    side by side. A page fetch failure aborts the analysis; a PageSpeed
    failure only annotates the performance section. A page failure cancels
    the PageSpeed request still in flight.
    """

    def __init__(
        self,
        cache: ResultCache,
        fetcher: Optional[PageFetcher] = None,
        performance: Optional[PerformanceInsightsClient] = None,
    ):
        self.cache = cache
        self.fetcher = fetcher or PageFetcher()
        self.performance = performance or PerformanceInsightsClient()

    async def _analyze_page(self, url: str) -> Tuple[MetaTagSet, ContentMetrics, TechnicalMetrics]:
        page = await self.fetcher.fetch(url)
        doc = parse_html(page.html)

        meta = extract_meta_tags(doc, url)
        structured_data = extract_structured_data(doc)
        content = analyze_content(doc, url, structured_data)
        technical = check_technical(page, doc)

        return meta, content, technical

    async def _compute(self, url: str) -> AnalysisResult:
        performance_task = asyncio.create_task(self.performance.fetch_report(url))
        try:
            meta, content, technical = await self._analyze_page(url)
        except Exception:
            performance_task.cancel()
            raise
        performance = await performance_task

        return AnalysisResult(
            url=url,
            meta=meta,
            content=content,
            technical=technical,
            performance=performance,
        )

    async def analyze(
        self,
        url: Optional[str],
        bypass_cache: bool = False,
        if_none_match: Optional[str] = None,
    ) -> AnalysisOutcome:
        if not url:
            raise InvalidInputError("URL is required")

        normalized = normalize_url(url)

        if bypass_cache:
            logger.info(f"Analyzing {normalized} (cache bypassed)")
            result = await self._compute(normalized)
            return AnalysisOutcome(url=normalized, result=result, headers=no_store_headers())

        headers = cache_headers(normalized)

        if is_not_modified(if_none_match, normalized):
            logger.info(f"Not modified: {normalized}")
            return AnalysisOutcome(url=normalized, headers=headers, not_modified=True)

        cached = self.cache.get(normalized)
        if cached is not None:
            logger.info(f"Cache hit for {normalized}")
            return AnalysisOutcome(url=normalized, result=cached, headers=headers, from_cache=True)

        logger.info(f"Cache miss for {normalized}, analyzing")
        result = await self._compute(normalized)
        self.cache.set(normalized, result)

        return AnalysisOutcome(url=normalized, result=result, headers=headers)
