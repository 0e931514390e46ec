"""Desktop client for browsing, cloning and syncing GitHub repositories."""

__version__ = "0.1.0"

from .app import main  # noqa: E402

__all__ = ["__version__", "main"]
