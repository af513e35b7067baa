"""Relative element search.

Tables on real pages usually sit somewhere after a heading or caption, at an
unpredictable nesting depth. ``next_relative`` finds the nearest element
matching a selector by scanning the following siblings of the start element,
then the following siblings of each of its ancestors in turn.
"""

from collections.abc import Iterable

from lxml.html import HtmlElement

from tablescout.dom.selectors import is_element, matching_elements


def next_relative(
    element: HtmlElement,
    selector: str,
    stop_at: str | None = None,
) -> HtmlElement | None:
    """
    Find the first element matching ``selector`` after ``element``.

    Siblings following ``element`` are searched first, then siblings following
    its parent, its grandparent and so on until the document root.

    Args:
        element: Element to start from
        selector: CSS selector a sibling must match
        stop_at: Optional CSS selector bounding the ascent. The search stops
            before scanning the siblings of the first element matching it
            (``"body"`` keeps the search inside the page body).

    Returns:
        The matching element, or None if the root is reached without a match
    """
    root = element.getroottree().getroot()
    targets = matching_elements(root, selector)
    bounds = matching_elements(root, stop_at) if stop_at is not None else set()

    current: HtmlElement | None = element
    while current is not None:
        if current in bounds:
            return None
        for sibling in current.itersiblings():
            if is_element(sibling) and sibling in targets:
                return sibling
        current = current.getparent()
    return None


def next_relative_all(
    elements: Iterable[HtmlElement],
    selector: str,
    stop_at: str | None = None,
) -> list[HtmlElement | None]:
    """Run ``next_relative`` for every element, keeping None for misses."""
    return [next_relative(element, selector, stop_at=stop_at) for element in elements]
