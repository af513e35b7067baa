"""Document retrieval over HTTP.

The fetcher downloads a page with an httpx async client and parses the body
into an lxml document using the page's declared charset.
"""

import logging
from typing import Protocol

import httpx
from lxml import etree
from lxml.html import HtmlElement

from tablescout.config.settings import DEFAULT_ENCODING, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from tablescout.dom.documents import document_from_markup
from tablescout.exceptions import FetchError

logger = logging.getLogger(__name__)


class DocumentFetcher(Protocol):
    """Retrieves and parses the document at a URL."""

    async def __call__(self, url: str, encoding: str | None = None, name: str | None = None) -> HtmlElement: ...


def build_client(timeout: float = DEFAULT_TIMEOUT, **kwargs) -> httpx.AsyncClient:
    """Create the async HTTP client used to retrieve pages."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        headers={"User-Agent": DEFAULT_USER_AGENT},
        **kwargs,
    )


class HttpxDocumentFetcher:
    """
    Document fetcher backed by an ``httpx.AsyncClient``.

    The client is owned by the caller, which controls its lifetime with
    ``async with``.
    """

    def __init__(self, client: httpx.AsyncClient, default_encoding: str = DEFAULT_ENCODING) -> None:
        """
        Initialize the fetcher.

        Args:
            client: Open httpx async client
            default_encoding: Charset used when a page declares none
        """
        self.client = client
        self.default_encoding = default_encoding

    async def __call__(self, url: str, encoding: str | None = None, name: str | None = None) -> HtmlElement:
        """
        Retrieve the page at ``url`` and parse it.

        Args:
            url: Page URL
            encoding: Charset of the page body, regardless of transport headers
            name: Page name used in log messages

        Returns:
            Parsed lxml document root

        Raises:
            FetchError: If the request fails, returns an error status, or the
                body cannot be parsed
        """
        label = name or url
        logger.info(f"Retrieving {label} content.")

        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(url, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise FetchError(url, str(e) or e.__class__.__name__) from e

        text = response.content.decode(encoding or self.default_encoding, errors="replace")
        try:
            document = document_from_markup(text)
        except (etree.LxmlError, ValueError) as e:
            raise FetchError(url, f"unparseable document ({e})") from e

        logger.info(f"Retrieved {label} content.")
        return document
