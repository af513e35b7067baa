"""Page and batch scrapers.

A page is scraped by retrieving its document, applying its transforms and
running its parsers. A batch scrapes its pages one at a time, in order, so at
most one request is outstanding and the log reads page by page.
"""

import logging
from collections.abc import Sequence
from typing import Any

from tablescout.config.config_models import FailurePolicy, PageConfig
from tablescout.config.settings import DEFAULT_ENCODING
from tablescout.fetcher.fetcher import DocumentFetcher
from tablescout.pipeline.library import LibraryRegistry
from tablescout.pipeline.parsers import parse_document
from tablescout.pipeline.transforms import apply_transforms

logger = logging.getLogger(__name__)

PageResult = dict[str, Any]
BatchResult = dict[str, PageResult]


class PageScraper:
    """Runs the retrieve, transform and parse stages for a single page."""

    def __init__(self, fetch_document: DocumentFetcher, registry: LibraryRegistry) -> None:
        self.fetch_document = fetch_document
        self.registry = registry

    async def scrape_page(self, page: PageConfig) -> PageResult:
        """
        Scrape one page.

        Args:
            page: Page configuration

        Returns:
            Dictionary mapping each parser id of the page to its value

        Raises:
            ScrapeError: If the library, retrieval, a transform or a parser fails
        """
        library = self.registry.get(page.library_id)
        document = await self.fetch_document(
            page.url,
            encoding=page.encoding or DEFAULT_ENCODING,
            name=page.display_name,
        )
        document = apply_transforms(document, page.transforms, page, library)
        return parse_document(document, page.parsers, library, page_name=page.display_name)


class BatchScraper:
    """
    Scrapes a list of pages sequentially.

    With ``FailurePolicy.FAIL_FAST`` the first failing page aborts the batch.
    With ``FailurePolicy.BEST_EFFORT`` failing pages are logged, left out of
    the result and recorded in ``failures``.
    """

    def __init__(
        self,
        fetch_document: DocumentFetcher,
        registry: LibraryRegistry | None = None,
        failure_policy: FailurePolicy = FailurePolicy.FAIL_FAST,
    ) -> None:
        """
        Initialize the batch scraper.

        Args:
            fetch_document: Coroutine function retrieving page documents
            registry: Libraries available to the pages; a fresh registry
                holding only the standard library when omitted
            failure_policy: Whether a page failure aborts the batch
        """
        self.registry = registry or LibraryRegistry()
        self.failure_policy = failure_policy
        self.page_scraper = PageScraper(fetch_document, self.registry)
        self.failures: dict[str, Exception] = {}

    async def scrape_pages(self, pages: Sequence[PageConfig]) -> BatchResult:
        """
        Scrape every page in order, one at a time.

        Args:
            pages: Page configurations with unique ids

        Returns:
            Dictionary mapping page ids to their page results
        """
        self.failures = {}
        results: BatchResult = {}
        logger.info(f"Scraping {len(pages)} pages")

        for page in pages:
            try:
                results[page.id] = await self.page_scraper.scrape_page(page)
            except Exception as e:
                if self.failure_policy is FailurePolicy.FAIL_FAST:
                    logger.error(f"Error scraping {page.display_name}: {str(e)}")
                    raise
                logger.warning(f"Skipping {page.display_name} after error: {str(e)}")
                self.failures[page.id] = e
                continue
            logger.info(f"Scraped {page.display_name}.")

        logger.info(f"Scraping completed. {len(results)} pages succeeded, {len(self.failures)} failed.")
        return results
