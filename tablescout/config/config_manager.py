"""Configuration manager for the tablescout application.

This module handles loading scrape configurations from YAML files, providing
a single interface to the pages and outputs they declare.
"""

import logging
import os

import yaml

from tablescout.config.config_models import PageConfig, ScrapeConfig


class ConfigManager:
    """
    Manages a scrape configuration.

    Loads the pages, parsers and outputs of a scrape job from a YAML file and
    provides an interface to access them.
    """

    def __init__(self, config_path: str | None = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Optional path to a scrape configuration file.
                         If not provided, the bundled example configuration is used.
        """
        self.logger = logging.getLogger(__name__)
        self.config_path = config_path or self.default_config_path()
        self._config = self._load_scrape_config(self.config_path)

    @staticmethod
    def default_config_path() -> str:
        """Path of the example configuration shipped next to this module."""
        config_dir = os.path.dirname(os.path.abspath(__file__))
        return os.path.join(config_dir, "scrape_config.yaml")

    def _load_scrape_config(self, config_path: str) -> ScrapeConfig:
        """
        Load a scrape configuration from YAML.

        Args:
            config_path: Path to the configuration file

        Returns:
            The validated ScrapeConfig

        Raises:
            FileNotFoundError: If the configuration file doesn't exist
            yaml.YAMLError: If the YAML is invalid
            ValueError: If the configuration is invalid
        """
        try:
            with open(config_path, encoding="utf-8") as file:
                config_data = yaml.safe_load(file)
                return ScrapeConfig(**(config_data or {}))
        except FileNotFoundError:
            self.logger.error(f"Configuration file not found: {config_path}")
            raise
        except yaml.YAMLError as e:
            self.logger.error(f"Invalid YAML in configuration file: {e}")
            raise
        except ValueError as e:
            self.logger.error(f"Invalid configuration: {e}")
            raise

    def get_scrape_config(self) -> ScrapeConfig:
        return self._config

    def get_page(self, page_id: str) -> PageConfig:
        """
        Get configuration for a specific page.

        Raises:
            ValueError: If the page doesn't exist in the configuration
        """
        return self._config.get_page(page_id)

    def list_pages(self) -> list[str]:
        """List the ids of all configured pages, in scrape order."""
        return [page.id for page in self._config.pages]

    def get_page_descriptions(self) -> dict[str, str]:
        """
        Get display names for all configured pages.

        Returns:
            Dictionary mapping page ids to a name and URL summary
        """
        return {page.id: f"{page.display_name} ({page.url})" for page in self._config.pages}

    @classmethod
    def from_file(cls, config_path: str) -> "ConfigManager":
        """
        Create a ConfigManager instance from a specific configuration file.

        Args:
            config_path: Path to the configuration file

        Returns:
            ConfigManager instance
        """
        return cls(config_path=config_path)
