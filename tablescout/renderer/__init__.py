"""
Renderer module for tablescout.

This module serializes scrape results and writes them to output files.
"""

from tablescout.renderer.renderer import OutputDescriptor, build_outputs, render_files, write_outputs
from tablescout.renderer.serializers import SERIALIZERS

__all__ = ["SERIALIZERS", "OutputDescriptor", "build_outputs", "render_files", "write_outputs"]
