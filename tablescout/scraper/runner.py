import asyncio
import logging
from collections.abc import Callable
from typing import Any, TypedDict

import httpx

from tablescout.config.config_models import CUSTOM_PARSER_TYPE, FailurePolicy, OutputTarget, ScrapeConfig
from tablescout.fetcher.fetcher import HttpxDocumentFetcher, build_client
from tablescout.pipeline.library import LibraryRegistry
from tablescout.renderer.renderer import build_outputs, write_outputs
from tablescout.scraper.scraper import BatchResult, BatchScraper


class RunResult(TypedDict):
    """Type definition for the outcome of a scrape run."""

    results: BatchResult
    failures: dict[str, str]
    files: list[str]


class ScrapeRunner:
    """
    Runs a scrape job: retrieves and parses the configured pages, then writes
    the configured output files.

    This class provides a high-level interface over the batch scraper and the
    renderer, owning the HTTP client for the duration of a run.
    """

    def __init__(
        self,
        registry: LibraryRegistry | None = None,
        client_factory: Callable[..., httpx.AsyncClient] = build_client,
    ) -> None:
        """
        Initialize the scrape runner with logging configuration.

        Args:
            registry: Libraries available to the pages. Defaults to a registry
                holding only the standard library.
            client_factory: Called with the job timeout to create the HTTP client.
        """
        self.logger = logging.getLogger(__name__)
        self.registry = registry or LibraryRegistry()
        self.client_factory = client_factory
        self.setup_logging()

    def setup_logging(self) -> None:
        """
        Set up logging configuration for the scrape runner.
        """
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s [%(levelname)s] %(message)s",
            handlers=[logging.StreamHandler()],
        )

    async def run_async(
        self,
        config: ScrapeConfig,
        output_dir: str | None = None,
        page_ids: list[str] | None = None,
        failure_policy: FailurePolicy | None = None,
    ) -> RunResult:
        """
        Run the scrape job asynchronously.

        Args:
            config: Scrape job configuration.
            output_dir: Directory for output files. Defaults to the configured one.
            page_ids: Ids of the pages to scrape. Defaults to all pages.
            failure_policy: Overrides the configured failure policy.

        Returns:
            RunResult with the batch result, the failed pages and written files.

        Raises:
            ValueError: If a requested page id is not configured.
            ScrapeError: If a page fails under the fail-fast policy, or an
                output cannot be rendered.
        """
        pages = [config.get_page(page_id) for page_id in page_ids] if page_ids else list(config.pages)
        policy = failure_policy or config.failure_policy
        output_dir = output_dir or config.output_dir

        self.logger.info(f"Starting scrape of {len(pages)} pages with {policy.value} policy")

        async with self.client_factory(config.timeout) as client:
            scraper = BatchScraper(HttpxDocumentFetcher(client), self.registry, policy)
            results = await scraper.scrape_pages(pages)

        files: list[str] = []
        for target in config.outputs:
            data = self._select_output_data(target, results)
            if data is None:
                continue
            outputs = build_outputs(data, target.formats, self._output_headers(config, target))
            files.extend(await write_outputs(outputs, target.file_prefix, output_dir))

        self.logger.info(f"Scrape completed. Wrote {len(files)} files to {output_dir}")
        return {
            "results": results,
            "failures": {page_id: str(error) for page_id, error in scraper.failures.items()},
            "files": files,
        }

    def _select_output_data(self, target: OutputTarget, results: BatchResult) -> Any | None:
        if target.page is None:
            return results
        if target.page not in results:
            self.logger.warning(f"Skipping output {target.file_prefix}: page {target.page} has no result")
            return None
        page_result = results[target.page]
        if target.parser is None:
            return page_result
        return page_result[target.parser]

    @staticmethod
    def _output_headers(config: ScrapeConfig, target: OutputTarget) -> list[str] | None:
        """Column order of a table parser's records, when the target selects one."""
        if target.page is None or target.parser is None:
            return None
        page = config.get_page(target.page)
        descriptor = next(parser for parser in page.parsers if parser.id == target.parser)
        if descriptor.type == CUSTOM_PARSER_TYPE or descriptor.post_parse is not None:
            return None
        options = descriptor.options
        if options.get("transform_row") is not None or not isinstance(options.get("parse_indices"), dict):
            return None
        return list(options["parse_indices"])

    def run(
        self,
        config: ScrapeConfig,
        output_dir: str | None = None,
        page_ids: list[str] | None = None,
        failure_policy: FailurePolicy | None = None,
    ) -> RunResult:
        """
        Run the scrape job synchronously.

        This is a synchronous wrapper around the async run_async method.

        Args:
            config: Scrape job configuration.
            output_dir: Directory for output files. Defaults to the configured one.
            page_ids: Ids of the pages to scrape. Defaults to all pages.
            failure_policy: Overrides the configured failure policy.

        Returns:
            RunResult with the batch result, the failed pages and written files.
        """
        return asyncio.run(self.run_async(config, output_dir, page_ids, failure_policy))
