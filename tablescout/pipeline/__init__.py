"""
Pipeline module for tablescout.

This module contains the transform and parse stages applied to each page
document, and the libraries that provide them.
"""

from tablescout.pipeline.library import Library, LibraryRegistry, build_standard_library
from tablescout.pipeline.parsers import parse_document, table_parser
from tablescout.pipeline.transforms import absolutify_links, apply_transforms, init_transform

__all__ = [
    "Library",
    "LibraryRegistry",
    "absolutify_links",
    "apply_transforms",
    "build_standard_library",
    "init_transform",
    "parse_document",
    "table_parser",
]
