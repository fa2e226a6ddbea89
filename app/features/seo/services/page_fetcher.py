from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx

from app.platform.config import settings
from app.platform.exceptions import FetchFailureError
from app.platform.logger import get_logger

logger = get_logger("page_fetcher")


@dataclass
class FetchedPage:
    url: str
    final_url: str
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    html: str = ""

    def header(self, name: str) -> str:
        return self.headers.get(name.lower(), "")


class PageFetcher:
    """Single GET of a page with a fixed user agent and timeout. No retries."""

    def __init__(
        self,
        timeout: float = None,
        user_agent: str = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout if timeout is not None else settings.PAGE_FETCH_TIMEOUT
        self.user_agent = user_agent or settings.PAGE_FETCH_USER_AGENT
        self.transport = transport

    async def fetch(self, url: str) -> FetchedPage:
        logger.info(f"Fetching page {url}")
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as e:
            raise FetchFailureError(f"Failed to fetch page data: timed out after {self.timeout}s ({e})")
        except httpx.InvalidURL as e:
            raise FetchFailureError(f"Failed to fetch page data: invalid URL {url} ({e})")
        except httpx.HTTPError as e:
            raise FetchFailureError(f"Failed to fetch page data: {e}")

        if not response.is_success:
            raise FetchFailureError(
                f"Failed to fetch page data: {url} returned status {response.status_code}",
                upstream_status=response.status_code,
            )

        logger.info(f"Fetched {url} ({response.status_code}, {len(response.content)} bytes)")
        return FetchedPage(
            url=url,
            final_url=str(response.url),
            status_code=response.status_code,
            headers={k.lower(): v for k, v in response.headers.items()},
            html=response.text,
        )
