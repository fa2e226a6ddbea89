"""
PageSpeed Insights integration.

One report is requested per strategy (mobile and desktop) concurrently, each
parsed into a ``StrategyReport`` and then merged into a ``PerformanceReport``.
Nothing in here raises to the caller: a missing API key or a failed call is
reported on the returned object and the rest of the analysis goes on.
"""

import asyncio
from typing import Any, Dict, List, Optional

import httpx

from app.features.seo.schemas.seo import (
    CategoryScores,
    CoreMetrics,
    FixHint,
    MetricValue,
    PerformanceReport,
    StrategyReport,
    Suggestion,
)
from app.platform.config import settings
from app.platform.logger import get_logger

logger = get_logger("performance_insights")

STRATEGIES = ("mobile", "desktop")

# PageSpeed category id -> CategoryScores field
CATEGORIES = {
    "performance": "performance",
    "accessibility": "accessibility",
    "best-practices": "best_practices",
    "seo": "seo",
}

# CoreMetrics field -> audit id
METRIC_AUDITS = {
    "first_contentful_paint": "first-contentful-paint",
    "speed_index": "speed-index",
    "largest_contentful_paint": "largest-contentful-paint",
    "interactive": "interactive",
    "total_blocking_time": "total-blocking-time",
    "cumulative_layout_shift": "cumulative-layout-shift",
}

SUGGESTION_THRESHOLD = 0.9
MAX_FIX_HINTS = 3

REMEDIATIONS = {
    "render-blocking-resources": (
        "Inline critical CSS and defer or async non-critical JavaScript and stylesheets "
        "so the first paint is not blocked."
    ),
    "unused-css-rules": (
        "Remove unused CSS rules or split stylesheets per page so the browser downloads less CSS."
    ),
    "unused-javascript": (
        "Remove unused JavaScript and code-split bundles so only the code a page needs is loaded."
    ),
    "unminified-css": "Minify CSS files to strip whitespace and comments.",
    "unminified-javascript": "Minify JavaScript files to reduce their transfer size.",
    "uses-optimized-images": "Compress images and serve them at an appropriate quality level.",
    "modern-image-formats": "Serve images in modern formats such as WebP or AVIF.",
    "uses-responsive-images": "Serve appropriately sized images using srcset and sizes.",
    "offscreen-images": "Lazy-load offscreen and hidden images with loading=\"lazy\".",
    "uses-text-compression": "Enable gzip or Brotli compression for text-based resources on the server.",
    "uses-long-cache-ttl": "Serve static assets with a long cache lifetime via Cache-Control headers.",
    "server-response-time": (
        "Reduce server response time (TTFB) with caching, a CDN or faster backend queries."
    ),
    "dom-size": "Reduce the number of DOM elements by simplifying markup and paginating long lists.",
    "largest-contentful-paint-element": (
        "Prioritise the largest contentful element: preload its image or font and avoid lazy-loading it."
    ),
}


def _category_score(categories: Dict[str, Any], category_id: str) -> Optional[int]:
    score = (categories.get(category_id) or {}).get("score")
    if score is None:
        return None
    return round(score * 100)


def extract_metric(audit: Optional[Dict[str, Any]]) -> Optional[MetricValue]:
    if not audit or audit.get("numericValue") is None:
        return None
    return MetricValue(
        value=audit["numericValue"],
        unit=audit.get("numericUnit") or "",
        display_value=audit.get("displayValue") or "",
    )


def _audit_categories(categories: Dict[str, Any]) -> Dict[str, str]:
    """Audit id -> the first category that references it."""
    lookup: Dict[str, str] = {}
    for category_id, category in categories.items():
        for ref in (category or {}).get("auditRefs") or []:
            audit_id = ref.get("id")
            if audit_id:
                lookup.setdefault(audit_id, category_id)
    return lookup


def _fix_hints(details: Dict[str, Any]) -> List[FixHint]:
    hints = []
    for item in (details.get("items") or [])[:MAX_FIX_HINTS]:
        if not isinstance(item, dict):
            continue
        wasted_bytes = item.get("wastedBytes")
        wasted_ms = item.get("wastedMs")
        hints.append(FixHint(
            url=item.get("url") if isinstance(item.get("url"), str) else None,
            wasted_kb=round(wasted_bytes / 1024) if wasted_bytes is not None else None,
            wasted_ms=round(wasted_ms) if wasted_ms is not None else None,
        ))
    return hints


def _savings(audit: Dict[str, Any], key: str) -> Optional[float]:
    value = audit.get(key)
    if value is None:
        value = (audit.get("details") or {}).get(key)
    return value or None


def build_recommendation(audit_id: str, audit: Dict[str, Any]) -> str:
    recommendation = REMEDIATIONS.get(audit_id) or audit.get("description") or audit.get("title") or ""

    savings = []
    savings_ms = _savings(audit, "overallSavingsMs")
    if savings_ms:
        savings.append(f"{round(savings_ms)} ms")
    savings_bytes = _savings(audit, "overallSavingsBytes")
    if savings_bytes:
        savings.append(f"{round(savings_bytes / 1024)} KB")
    if savings:
        recommendation = f"{recommendation} Estimated savings: {', '.join(savings)}."

    return recommendation


def extract_suggestions(audits: Dict[str, Any], categories: Dict[str, Any]) -> List[Suggestion]:
    audit_categories = _audit_categories(categories)
    suggestions = []

    for audit_id, audit in audits.items():
        if not isinstance(audit, dict):
            continue
        score = audit.get("score")
        if score is None or score >= SUGGESTION_THRESHOLD:
            continue
        details = audit.get("details") or {}
        if not audit.get("description") and not details:
            continue

        suggestions.append(Suggestion(
            id=audit_id,
            title=audit.get("title") or audit_id,
            category=audit_categories.get(audit_id, "general"),
            score=round(score * 100),
            display_value=audit.get("displayValue"),
            description=audit.get("description") or "",
            fixes=_fix_hints(details),
            recommendation=build_recommendation(audit_id, audit),
        ))

    return suggestions


def parse_strategy_report(strategy: str, payload: Dict[str, Any]) -> StrategyReport:
    lighthouse = payload.get("lighthouseResult") or {}
    categories = lighthouse.get("categories") or {}
    audits = lighthouse.get("audits") or {}

    scores = CategoryScores(
        **{field: _category_score(categories, category_id) for category_id, field in CATEGORIES.items()}
    )
    metrics = CoreMetrics(
        **{field: extract_metric(audits.get(audit_id)) for field, audit_id in METRIC_AUDITS.items()}
    )

    return StrategyReport(
        strategy=strategy,
        scores=scores,
        metrics=metrics,
        suggestions=extract_suggestions(audits, categories),
    )


def aggregate_reports(mobile: StrategyReport, desktop: StrategyReport) -> PerformanceReport:
    """
    Merge both strategies.

    Each category score comes from desktop when present, else mobile.
    Suggestions are mobile then desktop, deduplicated by audit id (first wins)
    and sorted with the lowest score first.
    """
    scores = {}
    for field in CATEGORIES.values():
        desktop_score = getattr(desktop.scores, field)
        scores[field] = desktop_score if desktop_score is not None else getattr(mobile.scores, field)
    merged_scores = CategoryScores(**scores)

    seen = set()
    suggestions = []
    for suggestion in mobile.suggestions + desktop.suggestions:
        if suggestion.id in seen:
            continue
        seen.add(suggestion.id)
        suggestions.append(suggestion)
    suggestions.sort(key=lambda s: s.score)

    error = None
    if mobile.error and desktop.error:
        error = "Failed to fetch PageSpeed data"

    return PerformanceReport(
        overall_score=merged_scores.performance,
        scores=merged_scores,
        suggestions=suggestions,
        mobile=mobile,
        desktop=desktop,
        error=error,
    )


class PerformanceInsightsClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.PAGESPEED_API_KEY
        self.api_url = api_url or settings.PAGESPEED_API_URL
        self.timeout = timeout if timeout is not None else settings.PAGESPEED_TIMEOUT
        self.transport = transport

    async def _run_strategy(self, client: httpx.AsyncClient, url: str, strategy: str) -> StrategyReport:
        params = [("url", url), ("key", self.api_key), ("strategy", strategy)]
        params.extend(("category", category_id) for category_id in CATEGORIES)

        try:
            response = await client.get(self.api_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"PageSpeed {strategy} request failed for {url}: {e}")
            return StrategyReport(strategy=strategy, error=f"Failed to fetch PageSpeed data: {e}")

        try:
            return parse_strategy_report(strategy, payload)
        except (AttributeError, TypeError, KeyError) as e:
            logger.warning(f"Unexpected PageSpeed {strategy} payload for {url}: {e}")
            return StrategyReport(strategy=strategy, error=f"Unexpected PageSpeed response: {e}")

    async def fetch_report(self, url: str) -> PerformanceReport:
        if not self.api_key:
            logger.warning("PageSpeed API key not configured, skipping performance report")
            return PerformanceReport(note="Google PageSpeed API key not configured")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            mobile, desktop = await asyncio.gather(
                *(self._run_strategy(client, url, strategy) for strategy in STRATEGIES)
            )

        return aggregate_reports(mobile, desktop)
