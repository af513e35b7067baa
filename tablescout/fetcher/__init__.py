"""
Fetcher module for tablescout.

This module retrieves page documents over HTTP. It does not crawl, cache or
retry; each call performs exactly one request.
"""

from tablescout.fetcher.fetcher import DocumentFetcher, HttpxDocumentFetcher, build_client

__all__ = ["DocumentFetcher", "HttpxDocumentFetcher", "build_client"]
