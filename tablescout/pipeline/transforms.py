"""Document transforms applied before parsing.

Transforms are registered as factories taking the page configuration, so a
transform that needs page context (such as the base URL for links) is bound
to it once per page.
"""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any
from urllib.parse import urljoin

from lxml.html import HtmlElement

from tablescout.config.config_models import PageConfig
from tablescout.config.settings import DEFAULT_ENCODING, DEFAULT_TRANSFORMS
from tablescout.dom.documents import document_from_markup

if TYPE_CHECKING:
    from tablescout.pipeline.library import Library, Transform

logger = logging.getLogger(__name__)


def init_transform(page: PageConfig) -> "Transform":
    """Build the initialization transform, parsing raw markup into a document.

    Raw bytes are read with the page's declared encoding.
    """
    encoding = page.encoding or DEFAULT_ENCODING

    def initialize(document: Any) -> HtmlElement:
        if isinstance(document, (str, bytes)):
            return document_from_markup(document, encoding)
        return document

    return initialize


def absolutify_links(page: PageConfig) -> "Transform":
    """
    Build a transform resolving relative ``href`` attributes against the page URL.

    Empty links and pure fragment links (``#section``) are left untouched.
    """
    base_url = page.link_base

    def absolutify(document: HtmlElement) -> HtmlElement:
        converted = 0
        for element in document.xpath("//*[@href]"):
            link = element.get("href", "").strip()
            if not link or link.startswith("#"):
                continue
            element.set("href", urljoin(base_url, link))
            converted += 1
        logger.debug(f"Resolved {converted} links against {base_url}")
        return document

    return absolutify


STANDARD_TRANSFORMS = {
    "init": init_transform,
    "absolutify_links": absolutify_links,
}


def apply_transforms(
    document: Any,
    transform_names: Sequence[str] | None,
    page: PageConfig,
    library: "Library",
) -> HtmlElement:
    """
    Apply transforms to a document, left to right.

    All names are resolved before the first transform runs, so an unknown
    name fails without touching the document.

    Args:
        document: Parsed document (or raw markup for the ``init`` transform)
        transform_names: Ordered transform names, None for the defaults
        page: Page whose context the transforms are bound to
        library: Library resolving the names

    Returns:
        The document produced by the last transform

    Raises:
        UnknownTransformError: If a name is not registered in the library
    """
    names = DEFAULT_TRANSFORMS if transform_names is None else transform_names
    transforms = [library.get_transform(name)(page) for name in names]
    for transform in transforms:
        document = transform(document)
    return document
