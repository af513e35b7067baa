"""Configuration models for declarative scraping.

This module contains Pydantic models describing the pages to scrape, the
parsers applied to each page, the options of the built-in table parser and
the output files rendered from the results.
"""

import codecs
import importlib
from collections.abc import Callable
from enum import Enum
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    NonNegativeInt,
    ValidationError,
    field_validator,
    model_validator,
)

from tablescout.config.settings import DEFAULT_FORMATS, DEFAULT_LIBRARY_ID, DEFAULT_OUTPUT_DIR, DEFAULT_TIMEOUT
from tablescout.renderer.serializers import SERIALIZERS

CUSTOM_PARSER_TYPE = "custom"
TABLE_PARSER_TYPE = "table"


def import_callable(value: Any) -> Any:
    """Resolve ``'package.module:attribute'`` strings to the object they name.

    Non-string values are returned unchanged so Python callables can be
    passed directly when configurations are built in code.

    Args:
        value: Import path or already resolved object

    Returns:
        The imported attribute

    Raises:
        ValueError: If the path is malformed, cannot be imported or does not
            name a callable
    """
    if not isinstance(value, str):
        return value

    if ":" not in value:
        raise ValueError(f"Invalid import path '{value}'. Use 'module.path:attribute'.")

    module_path, attribute = value.split(":", 1)
    try:
        loaded: Any = importlib.import_module(module_path)
    except ImportError as e:
        raise ValueError(f"Unable to import module '{module_path}': {e}") from e

    for part in attribute.split("."):
        loaded = getattr(loaded, part, None)
        if loaded is None:
            raise ValueError(f"Unable to resolve '{value}'.")

    if not callable(loaded):
        raise ValueError(f"'{value}' does not name a callable.")
    return loaded


ImportableCallable = Annotated[Callable[..., Any], BeforeValidator(import_callable)]


class FailurePolicy(str, Enum):
    """What a batch does when one of its pages fails."""

    FAIL_FAST = "fail_fast"
    BEST_EFFORT = "best_effort"


class ParserConfig(BaseModel):
    """Configuration of one named extraction step on a page.

    ``type`` selects a parser registered in the page's library. The reserved
    type ``custom`` uses the ``parser`` callable instead, which receives the
    (pre-parsed) document and returns the value directly.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str | None = None
    type: str
    options: dict[str, Any] = Field(default_factory=dict)
    parser: ImportableCallable | None = None
    pre_parse: ImportableCallable | None = None
    post_parse: ImportableCallable | None = None

    @model_validator(mode="after")
    def check_custom_parser(self) -> "ParserConfig":
        """Require a parser callable for custom parsers and only for them."""
        if self.type == CUSTOM_PARSER_TYPE and self.parser is None:
            raise ValueError(f"Parser '{self.id}' has type 'custom' but no parser callable")
        if self.type != CUSTOM_PARSER_TYPE and self.parser is not None:
            raise ValueError(f"Parser '{self.id}' sets a parser callable but has type '{self.type}'")
        return self

    @model_validator(mode="after")
    def check_table_options(self) -> "ParserConfig":
        """Validate the options of the built-in table parser when the configuration loads."""
        if self.type == TABLE_PARSER_TYPE:
            try:
                TableParserOptions.model_validate(self.options)
            except ValidationError as e:
                raise ValueError(f"Parser '{self.id}' has invalid table options: {e}") from e
        return self

    @property
    def display_name(self) -> str:
        return self.name or self.id


class PageConfig(BaseModel):
    """Configuration of one page to scrape."""

    model_config = ConfigDict(frozen=True)

    id: str
    url: str
    name: str | None = None
    encoding: str | None = None
    library_id: str = DEFAULT_LIBRARY_ID
    base_url: str | None = Field(
        None,
        description="Base URL for resolving relative links (defaults to url)",
    )
    transforms: list[str] | None = Field(
        None,
        description="Ordered transform names; None applies the default transforms",
    )
    parsers: list[ParserConfig]

    @field_validator("encoding")
    @classmethod
    def check_encoding(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"Unknown encoding '{value}'") from e
        return value

    @field_validator("parsers")
    @classmethod
    def check_unique_parser_ids(cls, parsers: list[ParserConfig]) -> list[ParserConfig]:
        seen: set[str] = set()
        for parser in parsers:
            if parser.id in seen:
                raise ValueError(f"Duplicate parser id '{parser.id}'")
            seen.add(parser.id)
        return parsers

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @property
    def link_base(self) -> str:
        """URL that relative links on this page resolve against."""
        return self.base_url or self.url


class TableParserOptions(BaseModel):
    """Options of the built-in ``table`` parser.

    ``selector`` locates the sentinel; it is a CSS string, an XPath string or a
    callable receiving the document. The first table following the sentinel is
    extracted with ``parse_indices`` mapping field names to column indices.
    """

    model_config = ConfigDict(frozen=True)

    selector: str | Callable[..., Any]
    parse_indices: Annotated[dict[str, NonNegativeInt], Field(min_length=1)]
    field_parsers: dict[str, ImportableCallable] = Field(default_factory=dict)
    transform_row: ImportableCallable | None = None
    key_by: str | None = None
    stop_at: str | None = Field(
        None,
        description="CSS selector bounding the upward table search (e.g. 'body')",
    )

    @model_validator(mode="after")
    def check_key_by_field(self) -> "TableParserOptions":
        """Require ``key_by`` to name an extracted field unless rows are transformed."""
        if self.key_by is not None and self.transform_row is None and self.key_by not in self.parse_indices:
            raise ValueError(
                f"key_by '{self.key_by}' is not one of the parsed fields: {', '.join(self.parse_indices)}"
            )
        return self


class OutputTarget(BaseModel):
    """One group of output files rendered from the batch result.

    Without ``page`` the whole batch result is rendered; with ``page`` only
    that page's result, and with ``parser`` as well only that parser's value.
    """

    file_prefix: str
    formats: list[str] = Field(default_factory=lambda: list(DEFAULT_FORMATS))
    page: str | None = None
    parser: str | None = None

    @field_validator("formats")
    @classmethod
    def check_formats(cls, formats: list[str]) -> list[str]:
        unknown = [fmt for fmt in formats if fmt not in SERIALIZERS]
        if unknown:
            raise ValueError(f"Unknown output formats: {', '.join(unknown)}. Available: {', '.join(SERIALIZERS)}")
        return formats

    @model_validator(mode="after")
    def check_parser_needs_page(self) -> "OutputTarget":
        if self.parser is not None and self.page is None:
            raise ValueError(f"Output '{self.file_prefix}' selects parser '{self.parser}' without a page")
        return self


class ScrapeConfig(BaseModel):
    """A complete scrape job: the pages to process and the files to write."""

    description: str | None = None
    pages: list[PageConfig]
    outputs: list[OutputTarget] = Field(default_factory=lambda: [OutputTarget(file_prefix="results")])
    output_dir: str = DEFAULT_OUTPUT_DIR
    failure_policy: FailurePolicy = FailurePolicy.FAIL_FAST
    timeout: Annotated[float, Field(gt=0.0, description="HTTP timeout in seconds")] = DEFAULT_TIMEOUT

    @field_validator("pages")
    @classmethod
    def check_unique_page_ids(cls, pages: list[PageConfig]) -> list[PageConfig]:
        seen: set[str] = set()
        for page in pages:
            if page.id in seen:
                raise ValueError(f"Duplicate page id '{page.id}'")
            seen.add(page.id)
        return pages

    @model_validator(mode="after")
    def check_output_references(self) -> "ScrapeConfig":
        pages = {page.id: page for page in self.pages}
        for output in self.outputs:
            if output.page is None:
                continue
            if output.page not in pages:
                raise ValueError(f"Output '{output.file_prefix}' references unknown page '{output.page}'")
            parser_ids = {parser.id for parser in pages[output.page].parsers}
            if output.parser is not None and output.parser not in parser_ids:
                raise ValueError(
                    f"Output '{output.file_prefix}' references unknown parser '{output.parser}' "
                    f"on page '{output.page}'"
                )
        return self

    def get_page(self, page_id: str) -> PageConfig:
        """Return the page with the given id.

        Raises:
            ValueError: If no page has that id
        """
        for page in self.pages:
            if page.id == page_id:
                return page
        raise ValueError(f"Page '{page_id}' not found in configuration")
