"""Selector resolution for lxml documents.

Selectors in page configurations are either CSS strings, XPath strings or
callables that receive the document and return the matching elements.
"""

from collections.abc import Callable, Iterable
from functools import lru_cache
from typing import Any

from cssselect import HTMLTranslator
from lxml import etree
from lxml.html import HtmlElement

Selector = str | Callable[[HtmlElement], Any]

_XPATH_PREFIXES = ("/", "./", "(")


def is_xpath(selector: str) -> bool:
    """Tell XPath selectors apart from CSS ones by their leading characters."""
    return selector.lstrip().startswith(_XPATH_PREFIXES)


def is_element(node: object) -> bool:
    """Return True for element nodes, False for comments, PIs and text results."""
    return isinstance(node, etree._Element) and isinstance(node.tag, str)


def select(root: HtmlElement, selector: Selector) -> list[HtmlElement]:
    """
    Resolve a selector against a document or element.

    Args:
        root: Document root or element to query
        selector: CSS string, XPath string, or a callable taking ``root``

    Returns:
        Matching elements in document order. Callables may return a single
        element, ``None`` or any iterable; non-element results are dropped.
    """
    if callable(selector):
        result = selector(root)
    elif is_xpath(selector):
        result = root.xpath(selector)
    else:
        result = root.cssselect(selector)

    if result is None:
        return []
    if is_element(result):
        return [result]
    if isinstance(result, Iterable) and not isinstance(result, (str, bytes)):
        return [node for node in result if is_element(node)]
    return []


@lru_cache(maxsize=256)
def _compile_css(css: str) -> etree.XPath:
    return etree.XPath(HTMLTranslator().css_to_xpath(css))


def matching_elements(root: HtmlElement, css: str) -> set[HtmlElement]:
    """Return every element under ``root`` matching the CSS selector ``css``."""
    return set(_compile_css(css)(root))


def matches(element: HtmlElement, css: str) -> bool:
    """
    Check whether ``element`` itself matches the CSS selector ``css``.

    The selector is evaluated from the document root, so combinators such as
    ``"body > div"`` are matched against the element's real ancestors.
    """
    if not is_element(element):
        return False
    return element in matching_elements(element.getroottree().getroot(), css)
