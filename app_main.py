"""Application entry point for the PracticeQt exam-practice client."""

from __future__ import annotations

import os
import sys

from PySide6.QtWidgets import QApplication

from practice_app.client.api_client import PracticeApiClient
from practice_app.constants.network_constants import (
    API_TOKEN_ENV_VAR,
    API_URL_ENV_VAR,
    DEFAULT_API_BASE_URL,
)
from practice_app.ui.practice_main_window import PracticeMainWindow
from practice_app.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, connect the API client, and launch the Qt UI."""
    logger = configure_logging()
    base_url = os.environ.get(API_URL_ENV_VAR, DEFAULT_API_BASE_URL)
    logger.info("Starting PracticeQt against %s", base_url)

    app = QApplication(sys.argv)
    with PracticeApiClient(base_url=base_url, token=os.environ.get(API_TOKEN_ENV_VAR) or None) as api_client:
        window = PracticeMainWindow(api_client=api_client)
        window.show()
        window.ensure_logged_in()
        exit_code = app.exec()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
