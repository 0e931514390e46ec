"""Configuration data models for the repository manager."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..utils.path_manager import PathManager


logger = logging.getLogger(__name__)

REPOSITORY_SOURCES = ("rest", "cli")
SOURCE_ENV_VAR = "REPO_MANAGER_SOURCE"
LOG_LEVEL_ENV_VAR = "REPO_MANAGER_LOG_LEVEL"
TOKEN_ENV_VAR = "GITHUB_TOKEN"


@dataclass
class UserPreferences:
    """
    User preferences and application settings.

    Attributes:
        repository_source: How repositories are listed, ``rest`` or ``cli``
        gh_executable: GitHub CLI executable used by the ``cli`` source
        git_executable: Git executable used for every version-control operation
        default_clone_dir: Initial local base directory for clones
        command_timeout: Default timeout for git commands in seconds
        status_timeout: Timeout for status and diff commands in seconds
        fetch_timeout: Timeout for ``git fetch`` in seconds
        pull_timeout: Timeout for ``git pull`` in seconds
        request_timeout: Timeout for GitHub API requests in seconds
        log_level: Root logging level
    """

    repository_source: str = "rest"
    gh_executable: str = "gh"
    git_executable: str = "git"
    default_clone_dir: str = ""
    command_timeout: int = 120
    status_timeout: int = 20
    fetch_timeout: int = 60
    pull_timeout: int = 120
    request_timeout: int = 30
    log_level: str = "INFO"

    def get_clone_dir(self) -> Path:
        """Configured clone directory, or the platform default when unset."""
        if self.default_clone_dir:
            return Path(self.default_clone_dir).expanduser()
        return PathManager.get_default_clone_dir()

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize preferences to dictionary.

        Returns:
            Dict[str, Any]: Serialized preferences data
        """
        return {
            "repository_source": self.repository_source,
            "gh_executable": self.gh_executable,
            "git_executable": self.git_executable,
            "default_clone_dir": self.default_clone_dir,
            "command_timeout": self.command_timeout,
            "status_timeout": self.status_timeout,
            "fetch_timeout": self.fetch_timeout,
            "pull_timeout": self.pull_timeout,
            "request_timeout": self.request_timeout,
            "log_level": self.log_level,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserPreferences":
        """
        Deserialize preferences from dictionary.

        Args:
            data: Dictionary containing preferences data

        Returns:
            UserPreferences: Deserialized preferences instance

        Raises:
            ValueError: If a value has the wrong type
        """
        defaults = cls()
        values = {}
        for name, default in defaults.to_dict().items():
            value = data.get(name, default)
            if not isinstance(value, type(default)) or isinstance(value, bool):
                raise ValueError(
                    f"preferences.{name} must be {type(default).__name__}, "
                    f"got {value!r}"
                )
            values[name] = value
        return cls(**values)


@dataclass
class AppConfig:
    """
    Main application configuration.

    Attributes:
        version: Configuration version
        preferences: User preferences and settings
        github_token: API token taken from the environment, never written to disk
    """

    version: str = "1.0.0"
    preferences: UserPreferences = field(default_factory=UserPreferences)
    github_token: str = field(default="", repr=False)

    def apply_environment(self, environ: dict[str, str] | None = None) -> None:
        """
        Overlay environment variables on top of the file configuration.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)
        """
        environ = os.environ if environ is None else environ

        self.github_token = environ.get(TOKEN_ENV_VAR, "").strip()

        source = environ.get(SOURCE_ENV_VAR, "").strip().lower()
        if source:
            self.preferences.repository_source = source

        log_level = environ.get(LOG_LEVEL_ENV_VAR, "").strip()
        if log_level:
            self.preferences.log_level = log_level.upper()

    @classmethod
    def load(cls, config_file: Path | None = None) -> "AppConfig":
        """
        Load configuration from file.

        Args:
            config_file: Optional path to config file (uses default if None)

        Returns:
            AppConfig: Loaded configuration or default if loading fails
        """
        if config_file is None:
            config_file = PathManager.get_config_file("app_config.json")

        if not config_file.exists():
            logger.info(f"Configuration file not found: {config_file}, using defaults")
            return cls()

        try:
            with open(config_file, encoding="utf-8") as f:
                data = json.load(f)

            if not isinstance(data, dict):
                raise ValueError("configuration root must be an object")

            config = cls.from_dict(data)
            logger.info(f"Configuration loaded from: {config_file}")
            return config

        except (OSError, ValueError) as e:
            logger.error(f"Failed to load configuration from {config_file}: {e}")
            logger.info("Using default configuration")
            return cls()

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize configuration to dictionary.

        Returns:
            Dict[str, Any]: Serialized configuration data
        """
        return {
            "version": self.version,
            "preferences": self.preferences.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppConfig":
        """
        Deserialize configuration from dictionary.

        Args:
            data: Dictionary containing configuration data

        Returns:
            AppConfig: Deserialized configuration instance
        """
        preferences = data.get("preferences", {})
        if not isinstance(preferences, dict):
            raise ValueError("preferences must be an object")

        return cls(
            version=str(data.get("version", "1.0.0")),
            preferences=UserPreferences.from_dict(preferences),
        )

    def __str__(self) -> str:
        return (
            f"AppConfig(version={self.version}, "
            f"source={self.preferences.repository_source})"
        )
