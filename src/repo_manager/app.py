"""Main application class and entry point."""

import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from . import __version__
from .controllers.application_controller import ApplicationController
from .models.config import LOG_LEVEL_ENV_VAR
from .services.config_manager import ConfigManager
from .utils.logging_config import set_log_level, setup_logging


class RepoManagerApp:
    """Main application class for the GitHub Repository Manager."""

    def __init__(self):
        self.app: QApplication | None = None
        self.controller: ApplicationController | None = None
        self.logger = logging.getLogger(__name__)

    def initialize(self) -> None:
        """Initialize the application."""
        setup_logging(os.environ.get(LOG_LEVEL_ENV_VAR, "INFO"))
        self.logger.info(f"Initializing GitHub Repository Manager {__version__}")

        self.app = QApplication(sys.argv)
        self.app.setApplicationName("GitHub Repository Manager")
        self.app.setApplicationVersion(__version__)
        self.app.setOrganizationName("GitHubRepoManager")

        config_manager = ConfigManager()
        set_log_level(config_manager.config.preferences.log_level)

        self.controller = ApplicationController(config_manager=config_manager)
        self.controller.initialize()

        self.app.aboutToQuit.connect(self._on_about_to_quit)

        self.logger.info("Application initialized successfully")

    def run(self) -> int:
        """Run the application."""
        if not self.app or not self.controller:
            raise RuntimeError("Application not initialized. Call initialize() first.")

        self.logger.info("Starting application")
        self.controller.show_main_window()
        return self.app.exec()

    def _on_about_to_quit(self) -> None:
        self.logger.info("Application shutting down")

        if self.controller:
            self.controller.cleanup()
            main_window = self.controller.get_main_window()
            if main_window:
                main_window.save_state()


def main() -> int:
    """Main entry point for the application."""
    app = RepoManagerApp()

    try:
        app.initialize()
        return app.run()
    except Exception as e:
        logging.getLogger(__name__).exception(f"Failed to start application: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
