from app.features.seo.services.analyzer import SeoAnalyzer
from app.features.seo.services.page_fetcher import FetchedPage, PageFetcher
from app.features.seo.services.performance_insights import PerformanceInsightsClient

__all__ = [
    'SeoAnalyzer',
    'FetchedPage',
    'PageFetcher',
    'PerformanceInsightsClient'
]
