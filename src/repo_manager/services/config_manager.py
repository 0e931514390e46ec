"""Configuration management service for the repository manager."""

import logging
import os
from pathlib import Path

from ..models.config import REPOSITORY_SOURCES, AppConfig
from ..utils.path_manager import PathManager


logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigManager:
    """
    Loads the application configuration and overlays the environment.

    The configuration file is read-only from the application's point of view;
    nothing chosen in the UI is written back.
    """

    def __init__(
        self,
        config_file: Path | None = None,
        environ: dict[str, str] | None = None,
    ):
        """
        Initialize the configuration manager.

        Args:
            config_file: Optional path to config file (uses default if None)
            environ: Environment mapping (defaults to ``os.environ``)
        """
        self._config_file = config_file or PathManager.get_config_file(
            "app_config.json"
        )
        self._environ = environ
        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """
        Get the current configuration, loading it if necessary.

        Returns:
            AppConfig: Current application configuration
        """
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """
        Load configuration from file and apply environment overrides.

        Returns:
            AppConfig: Loaded configuration
        """
        config = AppConfig.load(self._config_file)
        config.apply_environment(
            os.environ if self._environ is None else self._environ
        )

        for issue in self.validate_config(config):
            logger.warning(f"Configuration issue: {issue}")

        self._config = config
        logger.info(f"Configuration ready: {config}")
        return config

    @staticmethod
    def validate_config(config: AppConfig) -> list[str]:
        """
        Check configuration values.

        Returns:
            List[str]: Human readable problems, empty if the config is valid
        """
        issues = []
        preferences = config.preferences

        if preferences.repository_source not in REPOSITORY_SOURCES:
            issues.append(
                f"repository_source must be one of {', '.join(REPOSITORY_SOURCES)}, "
                f"got '{preferences.repository_source}'"
            )

        for name in (
            "command_timeout",
            "status_timeout",
            "fetch_timeout",
            "pull_timeout",
            "request_timeout",
        ):
            value = getattr(preferences, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                issues.append(f"{name} must be a non-negative integer, got {value!r}")

        if not preferences.git_executable:
            issues.append("git_executable must not be empty")
        if preferences.repository_source == "cli" and not preferences.gh_executable:
            issues.append("gh_executable must not be empty for the cli source")

        if preferences.log_level.upper() not in VALID_LOG_LEVELS:
            issues.append(f"log_level '{preferences.log_level}' is not a logging level")

        return issues
