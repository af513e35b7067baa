"""
DOM module for tablescout.

This module contains the element search and table extraction helpers that
operate on lxml documents.
"""

from tablescout.dom.documents import document_from_markup
from tablescout.dom.selectors import Selector, matches, matching_elements, select
from tablescout.dom.tables import (
    link_parser,
    number_parser,
    parse_elements,
    parse_table,
    parse_table_after_sentinel,
    text_parser,
)
from tablescout.dom.traversal import next_relative, next_relative_all

__all__ = [
    "Selector",
    "document_from_markup",
    "link_parser",
    "matches",
    "matching_elements",
    "next_relative",
    "next_relative_all",
    "number_parser",
    "parse_elements",
    "parse_table",
    "parse_table_after_sentinel",
    "select",
    "text_parser",
]
