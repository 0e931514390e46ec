"""Entry point for ``python -m repo_manager``."""

import sys

from repo_manager.app import main


if __name__ == "__main__":
    sys.exit(main())
