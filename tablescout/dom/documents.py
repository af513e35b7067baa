"""Parsing markup into lxml documents."""

from lxml import html
from lxml.html import HtmlElement

from tablescout.config.settings import DEFAULT_ENCODING


def document_from_markup(markup: str | bytes, encoding: str | None = None) -> HtmlElement:
    """
    Parse HTML or XHTML markup into a document.

    Markup is always handed to lxml as bytes with an explicit charset, which
    takes precedence over any ``<meta>`` charset or XML encoding declaration
    in the document.

    Args:
        markup: Raw page markup
        encoding: Charset of ``markup`` when it is bytes. Text is encoded as
            UTF-8 before parsing, so this is ignored for ``str`` markup.

    Returns:
        Parsed lxml document root

    Raises:
        lxml.etree.LxmlError: If the markup holds no document
    """
    if isinstance(markup, str):
        markup, encoding = markup.encode("utf-8"), "utf-8"
    parser = html.HTMLParser(encoding=encoding or DEFAULT_ENCODING)
    return html.document_fromstring(markup, parser=parser)
