"""Configuration module for tablescout.

This module provides configuration models and management utilities
for the tablescout application.
"""

from tablescout.config.config_manager import ConfigManager
from tablescout.config.config_models import (
    FailurePolicy,
    OutputTarget,
    PageConfig,
    ParserConfig,
    ScrapeConfig,
    TableParserOptions,
)

__all__ = [
    "ConfigManager",
    "FailurePolicy",
    "OutputTarget",
    "PageConfig",
    "ParserConfig",
    "ScrapeConfig",
    "TableParserOptions",
]
