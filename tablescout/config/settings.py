"""Global configuration settings for the tablescout application.

This module contains the defaults shared by the scraping pipeline, the
document fetcher and the renderer.
"""

# Charset used to decode page bodies when a page does not declare one
DEFAULT_ENCODING = "utf-8"

# Library id used when a page does not select one
DEFAULT_LIBRARY_ID = "$"

# Transforms applied when a page does not list any
DEFAULT_TRANSFORMS = ("init",)

DEFAULT_OUTPUT_DIR = "output"
DEFAULT_FORMATS = ("json",)

DEFAULT_TIMEOUT = 30
DEFAULT_USER_AGENT = "tablescout (+https://github.com/tablescout/tablescout)"
