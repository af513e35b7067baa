"""Parsers producing a page's results from its document.

Each parser descriptor on a page is resolved to a parser function and run in
declaration order, wrapped by its optional pre- and post-parse hooks.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from lxml.html import HtmlElement
from pydantic import ValidationError

from tablescout.config.config_models import CUSTOM_PARSER_TYPE, TABLE_PARSER_TYPE, ParserConfig, TableParserOptions
from tablescout.dom.tables import parse_table_after_sentinel
from tablescout.exceptions import ParserConfigError

if TYPE_CHECKING:
    from tablescout.pipeline.library import Library, Parser

logger = logging.getLogger(__name__)


def key_rows(rows: Sequence[Mapping[str, Any]], key: str) -> dict[Any, Mapping[str, Any]]:
    """
    Turn a list of records into a lookup table keyed by one of their fields.

    Later records win when keys repeat.

    Raises:
        ParserConfigError: If a record lacks the key field
    """
    keyed: dict[Any, Mapping[str, Any]] = {}
    for position, row in enumerate(rows):
        if key not in row:
            raise ParserConfigError(f"Row {position} has no field '{key}' to key by")
        keyed[row[key]] = row
    return keyed


def table_parser(options: Mapping[str, Any]) -> "Parser":
    """
    Build a parser extracting the table that follows a sentinel element.

    Args:
        options: Table parser options, validated as ``TableParserOptions``

    Returns:
        Function taking a document and returning the list of records, or a
        mapping of records when ``key_by`` is set

    Raises:
        ParserConfigError: If the options are invalid
    """
    try:
        config = TableParserOptions.model_validate(dict(options))
    except ValidationError as e:
        raise ParserConfigError(f"Invalid table parser options: {e}") from e

    def parse(document: HtmlElement) -> list[Any] | dict[Any, Any]:
        records = parse_table_after_sentinel(
            document,
            config.selector,
            config.parse_indices,
            config.field_parsers,
            stop_at=config.stop_at,
        )
        if config.transform_row is not None:
            records = [config.transform_row(record) for record in records]
        if config.key_by is None:
            return records
        return key_rows(records, config.key_by)

    return parse


STANDARD_PARSERS = {
    TABLE_PARSER_TYPE: table_parser,
}


def resolve_parser(descriptor: ParserConfig, library: "Library") -> "Parser":
    """
    Resolve a descriptor to the function that parses a document.

    Raises:
        UnknownParserTypeError: If the type is neither custom nor registered
    """
    if descriptor.type == CUSTOM_PARSER_TYPE:
        return descriptor.parser
    return library.get_parser(descriptor.type)(descriptor.options)


def parse_document(
    document: HtmlElement,
    parsers: Sequence[ParserConfig],
    library: "Library",
    page_name: str | None = None,
) -> dict[str, Any]:
    """
    Run every parser against the document, one after another.

    Args:
        document: Transformed page document
        parsers: Parser descriptors in declaration order
        library: Library resolving registered parser types
        page_name: Optional page name used in log messages

    Returns:
        Dictionary mapping each parser id to the value it produced
    """
    results: dict[str, Any] = {}
    for descriptor in parsers:
        parser = resolve_parser(descriptor, library)

        value = descriptor.pre_parse(document) if descriptor.pre_parse else document
        value = parser(value)
        if descriptor.post_parse:
            value = descriptor.post_parse(value)

        results[descriptor.id] = value
        suffix = f" for {page_name}" if page_name else ""
        logger.info(f"Parsed {descriptor.display_name}{suffix}.")
    return results
