"""Table location and row extraction.

Rows of a located table are turned into records by mapping field names to
column indices. Each field is parsed by an optional per-field parser, falling
back to the trimmed text of the cell.
"""

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from lxml import html
from lxml.html import HtmlElement

from tablescout.dom.selectors import Selector, is_element, select
from tablescout.dom.traversal import next_relative_all
from tablescout.exceptions import SentinelNotFoundError, TableNotFoundError

logger = logging.getLogger(__name__)

CellParser = Callable[[HtmlElement], Any]

_NUMBER_NOISE = re.compile(r"[,\s]")


def text_parser(element: HtmlElement) -> str:
    """Default cell parser: the element's text content, trimmed."""
    return element.text_content().strip()


def link_parser(element: HtmlElement) -> str | None:
    """Return the href of the first link in the cell, if any."""
    if element.tag == "a" and element.get("href"):
        return element.get("href")
    links = element.xpath(".//a[@href]")
    return links[0].get("href") if links else None


def number_parser(element: HtmlElement) -> int | float | None:
    """Parse the cell text as a number, ignoring thousands separators."""
    text = _NUMBER_NOISE.sub("", text_parser(element))
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def parse_elements(
    elements: Sequence[HtmlElement],
    keys: Mapping[str, int],
    field_parsers: Mapping[str, CellParser] | None = None,
    default_parser: CellParser = text_parser,
) -> dict[str, Any]:
    """
    Build one record from a sequence of cells.

    Args:
        elements: Cells of a row, in column order
        keys: Field name to zero-based column index
        field_parsers: Optional per-field parsers overriding ``default_parser``
        default_parser: Parser for fields without an override

    Returns:
        Dictionary mapping every field in ``keys`` to its parsed value. An index
        outside the row is parsed as an empty cell.
    """
    field_parsers = field_parsers or {}
    record: dict[str, Any] = {}
    for key, index in keys.items():
        if 0 <= index < len(elements):
            cell = elements[index]
        else:
            cell = html.Element("td")
        parser = field_parsers.get(key, default_parser)
        record[key] = parser(cell)
    return record


def table_rows(table: HtmlElement) -> list[HtmlElement]:
    """
    Return the body rows of a table, header row included.

    lxml keeps rows that are direct children of ``<table>`` where browsers
    would wrap them in an implicit ``<tbody>``, so both placements count.
    """
    return table.xpath("./tr | ./tbody/tr")


def parse_table(
    table: HtmlElement,
    parse_indices: Mapping[str, int],
    field_parsers: Mapping[str, CellParser] | None = None,
) -> list[dict[str, Any]]:
    """
    Convert the data rows of a table into records.

    The first body row is treated as the header and skipped. Row order is
    preserved.

    Args:
        table: The ``<table>`` element
        parse_indices: Field name to zero-based column index
        field_parsers: Optional per-field parsers

    Returns:
        One record per data row
    """
    rows = table_rows(table)[1:]
    records = []
    for row in rows:
        cells = [child for child in row.iterchildren() if is_element(child)]
        records.append(parse_elements(cells, parse_indices, field_parsers))
    return records


def find_table_after_sentinel(
    document: HtmlElement,
    selector: Selector,
    stop_at: str | None = None,
) -> HtmlElement:
    """
    Locate the first table following the elements matched by ``selector``.

    Raises:
        SentinelNotFoundError: If the selector matches nothing
        TableNotFoundError: If no table follows any matched sentinel
    """
    sentinels = select(document, selector)
    if not sentinels:
        raise SentinelNotFoundError(selector)

    tables = [table for table in next_relative_all(sentinels, "table", stop_at=stop_at) if table is not None]
    if not tables:
        raise TableNotFoundError(selector)

    if len(tables) > 1:
        logger.debug(f"Sentinel matched {len(sentinels)} elements, using the first of {len(tables)} tables")
    return tables[0]


def parse_table_after_sentinel(
    document: HtmlElement,
    selector: Selector,
    parse_indices: Mapping[str, int],
    field_parsers: Mapping[str, CellParser] | None = None,
    stop_at: str | None = None,
) -> list[dict[str, Any]]:
    """Find the table after a sentinel and extract its data rows."""
    table = find_table_after_sentinel(document, selector, stop_at=stop_at)
    return parse_table(table, parse_indices, field_parsers)
