"""Libraries of transforms and parsers, and the registry selecting them.

A library maps transform names and parser types to factories. Pages pick a
library by id; the standard library is registered under ``"$"``. Each
``LibraryRegistry`` builds its own standard library, so registrations made
for one batch never leak into another.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from lxml.html import HtmlElement

from tablescout.config.config_models import CUSTOM_PARSER_TYPE, PageConfig
from tablescout.config.settings import DEFAULT_LIBRARY_ID
from tablescout.exceptions import UnknownLibraryError, UnknownParserTypeError, UnknownTransformError

Transform = Callable[[Any], HtmlElement]
TransformFactory = Callable[[PageConfig], Transform]
Parser = Callable[[Any], Any]
ParserFactory = Callable[[Mapping[str, Any]], Parser]


@dataclass
class Library:
    """Named transform factories and typed parser factories."""

    transforms: dict[str, TransformFactory] = field(default_factory=dict)
    parsers: dict[str, ParserFactory] = field(default_factory=dict)

    def register_transform(self, name: str, factory: TransformFactory) -> None:
        self.transforms[name] = factory

    def register_parser(self, parser_type: str, factory: ParserFactory) -> None:
        if parser_type == CUSTOM_PARSER_TYPE:
            raise ValueError(f"Parser type '{CUSTOM_PARSER_TYPE}' is reserved for caller-supplied parsers")
        self.parsers[parser_type] = factory

    def get_transform(self, name: str) -> TransformFactory:
        try:
            return self.transforms[name]
        except KeyError:
            raise UnknownTransformError(name, list(self.transforms)) from None

    def get_parser(self, parser_type: str) -> ParserFactory:
        try:
            return self.parsers[parser_type]
        except KeyError:
            raise UnknownParserTypeError(parser_type, list(self.parsers)) from None


def build_standard_library() -> Library:
    """Create a library holding the built-in transforms and parsers."""
    from tablescout.pipeline.parsers import STANDARD_PARSERS
    from tablescout.pipeline.transforms import STANDARD_TRANSFORMS

    return Library(transforms=dict(STANDARD_TRANSFORMS), parsers=dict(STANDARD_PARSERS))


class LibraryRegistry:
    """
    Registry of libraries keyed by library id.

    The standard library is always available under ``DEFAULT_LIBRARY_ID``;
    callers may register further libraries or replace it.
    """

    def __init__(self, libraries: Mapping[str, Library] | None = None) -> None:
        self._libraries: dict[str, Library] = {DEFAULT_LIBRARY_ID: build_standard_library()}
        if libraries:
            self._libraries.update(libraries)

    def register(self, library_id: str, library: Library) -> None:
        self._libraries[library_id] = library

    def get(self, library_id: str) -> Library:
        try:
            return self._libraries[library_id]
        except KeyError:
            raise UnknownLibraryError(library_id) from None

    def list_libraries(self) -> list[str]:
        return list(self._libraries)
