from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request, status
from fastapi.responses import Response

from app.features.seo.schemas.seo import AnalysisRequest
from app.features.seo.services.analyzer import SeoAnalyzer
from app.platform.exceptions import run_with_error_handling
from app.platform.response import api_response

router = APIRouter(prefix="/seo", tags=["seo"])

BYPASS_VALUES = {"true", "1"}


def get_seo_analyzer(request: Request) -> SeoAnalyzer:
    return request.app.state.seo_analyzer


@router.post("/analyze", summary="Analyze on-page SEO and performance for a URL")
async def analyze_url(
    body: AnalysisRequest,
    nocache: Optional[str] = Query(None, description='"true" or "1" skips the result cache'),
    if_none_match: Optional[str] = Header(None),
    analyzer: SeoAnalyzer = Depends(get_seo_analyzer),
):
    """
    Fetch the page, extract metadata, content and technical signals, and merge
    them with the PageSpeed report. Results are cached for two hours per URL.
    """
    bypass_cache = (nocache or "").lower() in BYPASS_VALUES

    async def operation():
        outcome = await analyzer.analyze(body.url, bypass_cache=bypass_cache, if_none_match=if_none_match)

        if outcome.not_modified:
            return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=outcome.headers)

        return api_response(
            data=outcome.result.model_dump(),
            message="SEO analysis completed",
            headers=outcome.headers,
        )

    return await run_with_error_handling(operation, error_message="Server error during SEO analysis")
