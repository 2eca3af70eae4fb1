"""
Creator UID extraction from the "watch next" recommendation sidebar.
"""

import re
from typing import Optional

from bs4 import BeautifulSoup
from playwright.async_api import Page
from loguru import logger

from ..models.schemas import BlockerConfig, ExpandMode, ExtractionResult
from ..utils.parsers import extract_uids


class RecommendationExtractor:
    """Reads creator UIDs from the recommendation container."""

    def __init__(self, config: Optional[BlockerConfig] = None):
        self.config = config or BlockerConfig()

    async def expand_list_if_needed(self) -> bool:
        """Click the "load more" control. Returns True if it was clicked."""
        raise NotImplementedError

    async def extract(self) -> ExtractionResult:
        """Query the container once and return its unique UIDs."""
        try:
            return await self._query()
        except Exception as e:
            logger.error(f"Error extracting recommendations: {e}")
            return ExtractionResult(container_found=False)

    async def _query(self) -> ExtractionResult:
        raise NotImplementedError

    def _result(self, hrefs, base_url: Optional[str]) -> ExtractionResult:
        uids = []
        for uid in extract_uids(hrefs, base_url, self.config.uid_pattern):
            if re.match(r"^\d+$", uid):
                uids.append(uid)
            else:
                logger.warning(f"Skipping non-numeric UID {uid!r}, check uid_pattern")
        logger.info(f"Found {len(uids)} unique creators")
        return ExtractionResult(container_found=True, uids=uids)


class PageRecommendationExtractor(RecommendationExtractor):
    """Extractor bound to a live Playwright page."""

    def __init__(self, page: Page, config: Optional[BlockerConfig] = None):
        """
        Initialize page extractor.

        Args:
            page: Video page with the recommendation sidebar
            config: Selectors and expand settings
        """
        super().__init__(config)
        self.page = page

    async def expand_list_if_needed(self) -> bool:
        mode = self.config.expand_mode
        if mode == ExpandMode.NEVER:
            return False

        try:
            button = await self.page.query_selector(self.config.expand_selector)
            if not button:
                logger.info('"Expand" button not found or already expanded')
                return False

            if mode == ExpandMode.AUTO and not await button.is_visible():
                logger.info('"Expand" button hidden, list already expanded')
                return False

            logger.info('Found "Expand" button, clicking')
            if mode == ExpandMode.ALWAYS:
                # DOM click, works on hidden elements
                await button.evaluate("b => b.click()")
            else:
                await button.click()
            await self.page.wait_for_timeout(self.config.expand_wait * 1000)
            return True

        except Exception as e:
            logger.error(f"Error expanding recommendation list: {e}")
            return False

    async def _query(self) -> ExtractionResult:
        container = await self.page.query_selector(self.config.container_selector)
        if not container:
            logger.warning(f"Recommendation container {self.config.container_selector} not found")
            return ExtractionResult(container_found=False)

        # a.href is already resolved against the document URL
        hrefs = await container.eval_on_selector_all(
            self.config.link_selector,
            "links => links.map(a => a.href)"
        )
        return self._result(hrefs, self.page.url)


class HtmlRecommendationExtractor(RecommendationExtractor):
    """Extractor over a saved HTML snapshot of a video page."""

    def __init__(self, html: str, base_url: str = 'https://www.bilibili.com/', config: Optional[BlockerConfig] = None):
        super().__init__(config)
        self.soup = BeautifulSoup(html, 'html.parser')
        self.base_url = base_url

    async def expand_list_if_needed(self) -> bool:
        logger.debug("Snapshot is static, skipping expand step")
        return False

    async def _query(self) -> ExtractionResult:
        container = self.soup.select_one(self.config.container_selector)
        if container is None:
            logger.warning(f"Recommendation container {self.config.container_selector} not found")
            return ExtractionResult(container_found=False)

        hrefs = [link.get('href', '') for link in container.select(self.config.link_selector)]
        return self._result(hrefs, self.base_url)
