"""
Scraper module for tablescout.

This module runs pages through retrieval, transforms and parsers, one page at
a time, and drives complete scrape jobs including their output files.
"""

from tablescout.scraper.runner import RunResult, ScrapeRunner
from tablescout.scraper.scraper import BatchScraper, PageScraper

__all__ = ["BatchScraper", "PageScraper", "RunResult", "ScrapeRunner"]
