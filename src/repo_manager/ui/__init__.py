"""UI components and widgets for the application."""

from .log_panel import LogPanel
from .main_window import MainWindow

__all__ = ["LogPanel", "MainWindow"]
