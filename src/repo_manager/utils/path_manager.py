"""OS-specific path management utilities."""

import sys
from pathlib import Path

from ..utils.exceptions import ValidationError


class PathManager:
    """Manages OS-specific paths for configuration, logs and clones."""

    APP_NAME = "GitHubRepoManager"
    DEFAULT_CLONE_DIR_NAME = "gh-clones"

    @staticmethod
    def get_config_dir() -> Path:
        """
        Get OS-appropriate configuration directory.

        Returns:
            Path to configuration directory
        """
        if sys.platform == "darwin":  # macOS
            base_dir = Path.home() / "Library" / "Application Support"
        elif sys.platform == "win32":  # Windows
            base_dir = Path.home() / "AppData" / "Roaming"
        else:  # Linux and other Unix-like systems
            base_dir = Path.home() / ".config"

        return base_dir / PathManager.APP_NAME

    @staticmethod
    def get_log_dir() -> Path:
        """
        Get OS-appropriate log directory.

        Returns:
            Path to log directory
        """
        if sys.platform == "darwin":  # macOS
            return Path.home() / "Library" / "Logs" / PathManager.APP_NAME
        if sys.platform == "win32":  # Windows
            return Path.home() / "AppData" / "Local" / PathManager.APP_NAME / "Logs"
        return Path.home() / ".local" / "share" / "github-repo-manager" / "logs"

    @staticmethod
    def get_config_file(filename: str) -> Path:
        """Get path to a configuration file."""
        return PathManager.get_config_dir() / filename

    @staticmethod
    def get_default_clone_dir() -> Path:
        """Default base directory that repositories are cloned into."""
        return Path.home() / PathManager.DEFAULT_CLONE_DIR_NAME

    @staticmethod
    def is_safe_path(path: Path, base_path: Path) -> bool:
        """
        Check if a path is safe (within the base path).

        Args:
            path: Path to check
            base_path: Base path that should contain the path

        Returns:
            True if path is safe, False otherwise
        """
        try:
            abs_path = path.resolve()
            abs_base = base_path.resolve()
            return abs_base in abs_path.parents or abs_path == abs_base
        except (OSError, ValueError):
            return False

    @staticmethod
    def repository_dir(base_dir: Path | str, name: str) -> Path:
        """
        Resolve the local directory of a repository under the base directory.

        Args:
            base_dir: Local base directory holding clones
            name: Repository name as listed by the repository source

        Returns:
            Path of the repository's working tree

        Raises:
            ValidationError: If the name is empty or escapes the base directory
        """
        if not name or not name.strip():
            raise ValidationError("Repository name is required", field="name")

        base = Path(base_dir).expanduser()
        target = base / name.strip()
        if target.resolve() == base.resolve() or not PathManager.is_safe_path(
            target, base
        ):
            raise ValidationError(
                f"Repository name resolves outside of {base}: {name}",
                field="name",
                value=name,
            )
        return target
