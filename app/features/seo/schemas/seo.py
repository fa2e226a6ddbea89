from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnalysisRequest(BaseModel):
    """Request body for an SEO analysis. ``url`` may omit the scheme."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "url": "example.com"
            }
        }
    )

    url: Optional[str] = None


# ── Metadata ─────────────────────────────────────


class OpenGraphTags(BaseModel):
    """Open Graph tags for social media sharing"""
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    url: Optional[str] = None
    type: Optional[str] = None
    site_name: Optional[str] = None


class TwitterCardTags(BaseModel):
    card: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    site: Optional[str] = None
    creator: Optional[str] = None


class MetaTag(BaseModel):
    name: str
    content: str


class MetaTagSet(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[str] = None
    robots: Optional[str] = None
    viewport: Optional[str] = None
    author: Optional[str] = None
    charset: Optional[str] = None
    canonical: Optional[str] = None
    favicon: Optional[str] = None
    open_graph: OpenGraphTags = Field(default_factory=OpenGraphTags)
    twitter: TwitterCardTags = Field(default_factory=TwitterCardTags)
    all_meta_tags: List[MetaTag] = Field(default_factory=list)


# ── Structured data ──────────────────────────────


class StructuredDataError(BaseModel):
    index: int
    error: str


class StructuredDataSet(BaseModel):
    items: List[Any] = Field(default_factory=list)
    types: List[str] = Field(default_factory=list)
    errors: List[StructuredDataError] = Field(default_factory=list)


# ── Content ──────────────────────────────────────


class ImageDescriptor(BaseModel):
    src: Optional[str] = None
    alt: Optional[str] = None
    title: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None
    loading: Optional[str] = None
    decoding: Optional[str] = None
    has_alt: bool = False


class HeadingLevel(BaseModel):
    level: int
    count: int
    texts: List[str] = Field(default_factory=list)


class KeywordDensity(BaseModel):
    word: str
    count: int
    density: float  # percentage, two decimals


class ContentMetrics(BaseModel):
    h1_count: int = 0
    h2_count: int = 0
    h3_count: int = 0
    heading_structure: List[HeadingLevel] = Field(default_factory=list)
    image_count: int = 0
    images: List[ImageDescriptor] = Field(default_factory=list)
    link_count: int = 0
    internal_links: int = 0
    external_links: int = 0
    word_count: int = 0
    sentence_count: int = 0
    has_structured_data: bool = False
    structured_data: StructuredDataSet = Field(default_factory=StructuredDataSet)
    keyword_density: List[KeywordDensity] = Field(default_factory=list)
    readability_score: float = 0.0
    content_quality_score: int = 0


# ── Technical ────────────────────────────────────


class TechnicalMetrics(BaseModel):
    status_code: int
    content_type: str = ""
    content_length: str = ""
    server: str = ""
    has_https: bool = False
    has_mobile_viewport: bool = False
    has_favicon: bool = False
    has_open_graph: bool = False
    has_twitter_cards: bool = False
    has_structured_data: bool = False
    image_alt_count: int = 0
    total_images: int = 0
    missing_alt_images: int = 0


# ── Performance ──────────────────────────────────


class CategoryScores(BaseModel):
    performance: Optional[int] = None
    accessibility: Optional[int] = None
    best_practices: Optional[int] = None
    seo: Optional[int] = None


class MetricValue(BaseModel):
    value: float
    unit: str = ""
    display_value: str = ""


class CoreMetrics(BaseModel):
    first_contentful_paint: Optional[MetricValue] = None
    speed_index: Optional[MetricValue] = None
    largest_contentful_paint: Optional[MetricValue] = None
    interactive: Optional[MetricValue] = None
    total_blocking_time: Optional[MetricValue] = None
    cumulative_layout_shift: Optional[MetricValue] = None


class FixHint(BaseModel):
    url: Optional[str] = None
    wasted_kb: Optional[int] = None
    wasted_ms: Optional[int] = None


class Suggestion(BaseModel):
    id: str
    title: str
    category: str = "general"
    score: int
    display_value: Optional[str] = None
    description: str = ""
    fixes: List[FixHint] = Field(default_factory=list)
    recommendation: str = ""


class StrategyReport(BaseModel):
    strategy: str
    scores: CategoryScores = Field(default_factory=CategoryScores)
    metrics: CoreMetrics = Field(default_factory=CoreMetrics)
    suggestions: List[Suggestion] = Field(default_factory=list)
    error: Optional[str] = None


class PerformanceReport(BaseModel):
    overall_score: Optional[int] = None
    scores: CategoryScores = Field(default_factory=CategoryScores)
    suggestions: List[Suggestion] = Field(default_factory=list)
    mobile: Optional[StrategyReport] = None
    desktop: Optional[StrategyReport] = None
    note: Optional[str] = None
    error: Optional[str] = None


# ── Result ───────────────────────────────────────


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    meta: MetaTagSet
    content: ContentMetrics
    technical: TechnicalMetrics
    performance: PerformanceReport


class AnalysisOutcome(BaseModel):
    """What the orchestrator hands back to the HTTP layer."""
    url: str
    result: Optional[AnalysisResult] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    from_cache: bool = False
    not_modified: bool = False
