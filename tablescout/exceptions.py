"""Exception types raised by the scraping pipeline.

Every error carries the selector, type, name or URL that caused it so a
misconfigured page can be diagnosed from the message alone.
"""


class ScrapeError(Exception):
    """Base class for all tablescout errors."""


class SentinelNotFoundError(ScrapeError):
    """Raised when a sentinel selector matches nothing in the document."""

    def __init__(self, selector: object) -> None:
        self.selector = selector
        super().__init__(f"Sentinel {_describe(selector)} not found")


class TableNotFoundError(ScrapeError):
    """Raised when no table follows any element matched by a sentinel selector."""

    def __init__(self, selector: object) -> None:
        self.selector = selector
        super().__init__(f"No table found after {_describe(selector)}")


class UnknownParserTypeError(ScrapeError):
    """Raised when a parser descriptor references an unregistered parser type."""

    def __init__(self, parser_type: str, available: list[str] | None = None) -> None:
        self.parser_type = parser_type
        message = f"Unknown parser type '{parser_type}'"
        if available:
            message += f". Registered types: {', '.join(sorted(available))}"
        super().__init__(message)


class UnknownTransformError(ScrapeError):
    """Raised when a page lists a transform its library does not provide."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        message = f"Unknown transform '{name}'"
        if available:
            message += f". Registered transforms: {', '.join(sorted(available))}"
        super().__init__(message)


class UnknownLibraryError(ScrapeError):
    """Raised when a page selects a library id that was never registered."""

    def __init__(self, library_id: str) -> None:
        self.library_id = library_id
        super().__init__(f"Unknown library '{library_id}'")


class ParserConfigError(ScrapeError):
    """Raised when a parser's options cannot be used to build it."""


class FetchError(ScrapeError):
    """Raised when a page document cannot be retrieved or decoded."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        super().__init__(f"Failed to retrieve {url}: {reason}")


class RenderError(ScrapeError):
    """Raised when results cannot be serialized to a requested format."""


def _describe(selector: object) -> str:
    if callable(selector):
        return getattr(selector, "__name__", repr(selector))
    return str(selector)
