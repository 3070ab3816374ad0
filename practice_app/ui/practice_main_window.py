"""Qt main window switching between quiz browser, session and results."""

from __future__ import annotations

from enum import Enum, auto
import logging

from PySide6.QtCore import QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QHBoxLayout,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from practice_app.client.api_client import PracticeApiClient
from practice_app.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION, HELP_TEXT
from practice_app.constants.ui_constants import (
    LOGIN_BUTTON,
    LOGOUT_BUTTON,
    STATE_REFRESH_INTERVAL_MS,
    UPGRADE_REQUIRED_MESSAGE,
    WINDOW_TITLE,
)
from practice_app.core.errors import ContentProviderError, PracticeError, QuotaExceeded, Unauthenticated
from practice_app.core.models import AttemptResult, QuizDefinition, QuizSummary, SubscriptionSnapshot
from practice_app.core.session_controller import QuizSessionController
from practice_app.ui.components.browser_panel import BrowserPanel
from practice_app.ui.components.login_dialog import LoginDialog
from practice_app.ui.components.results_panel import ResultsPanel
from practice_app.ui.components.session_panel import SessionPanel
from practice_app.ui.dialog_helpers import show_error, show_info, show_warning
from practice_app.utils.qt_timer import QtTickTimer
from practice_app.styling.styles import Styles

logger = logging.getLogger(__name__)


class PracticeMode(Enum):
    """High-level UI mode of the main window."""

    BROWSE = auto()
    SESSION = auto()
    RESULTS = auto()


class PracticeMainWindow(QMainWindow):
    """Main Qt window orchestrating the three application modes."""

    def __init__(self, api_client: PracticeApiClient) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(1000, 760)

        self.api_client = api_client
        self.subscriber: SubscriptionSnapshot | None = None
        self._mode = PracticeMode.BROWSE
        self._font_size: int = 14

        self._build_ui()
        self._configure_refresh_timer()
        self._apply_styles()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self._build_top_buttons(root_layout)

        self.mode_stack = QStackedWidget(self)
        self.browser_panel = BrowserPanel(self.api_client, on_start_quiz=self._handle_start_quiz, parent=self)
        self.session_panel = SessionPanel(
            on_completed=self._handle_session_completed,
            on_leave=self._return_to_browser,
            parent=self,
        )
        self.results_panel = ResultsPanel(on_back=self._return_to_browser, parent=self)

        self.mode_stack.addWidget(self.browser_panel)
        self.mode_stack.addWidget(self.session_panel)
        self.mode_stack.addWidget(self.results_panel)
        root_layout.addWidget(self.mode_stack)

        self._set_mode(PracticeMode.BROWSE)

    def _build_top_buttons(self, layout: QVBoxLayout) -> None:
        button_row = QHBoxLayout()

        self.account_button = QPushButton(LOGIN_BUTTON, self)
        self.account_button.clicked.connect(self._handle_account_button)
        button_row.addWidget(self.account_button)

        button_row.addStretch()

        self.help_button = QPushButton("Help", self)
        self.help_button.clicked.connect(lambda: show_info(self, f"{APP_NAME} Help", HELP_TEXT))
        button_row.addWidget(self.help_button)

        self.about_button = QPushButton(f"About {APP_NAME}", self)
        self.about_button.clicked.connect(self._handle_about)
        button_row.addWidget(self.about_button)

        layout.addLayout(button_row)

    def _configure_refresh_timer(self) -> None:
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(STATE_REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self._refresh_state)
        self.refresh_timer.start()

    def _refresh_state(self) -> None:
        if self._mode == PracticeMode.SESSION:
            self.session_panel.refresh_state()

    def _set_mode(self, mode: PracticeMode) -> None:
        self._mode = mode
        self.account_button.setEnabled(mode != PracticeMode.SESSION)
        index_map = {
            PracticeMode.BROWSE: 0,
            PracticeMode.SESSION: 1,
            PracticeMode.RESULTS: 2,
        }
        self.mode_stack.setCurrentIndex(index_map[mode])

    # --- Account ---

    def ensure_logged_in(self) -> bool:
        """Load the current user, prompting for credentials when needed."""
        if self.api_client.is_authenticated:
            try:
                self._set_subscriber(self.api_client.get_current_user())
                self.browser_panel.refresh_quizzes()
                return True
            except Unauthenticated:
                logger.info("Stored token rejected; asking for credentials")
            except PracticeError as exc:
                show_error(self, "Could not load profile", str(exc))
                return False
        return self._prompt_login()

    def _prompt_login(self) -> bool:
        dialog = LoginDialog(self.api_client, self)
        if not dialog.exec() or dialog.subscriber is None:
            return False
        self._set_subscriber(dialog.subscriber)
        self.browser_panel.refresh_quizzes()
        return True

    def _handle_account_button(self) -> None:
        if self.subscriber is None:
            self._prompt_login()
            return
        try:
            self.api_client.logout()
        except PracticeError as exc:
            logger.warning("Logout request failed: %s", exc)
        self._set_subscriber(None)

    def _set_subscriber(self, subscriber: SubscriptionSnapshot | None) -> None:
        self.subscriber = subscriber
        self.account_button.setText(LOGOUT_BUTTON if subscriber else LOGIN_BUTTON)
        self.browser_panel.update_subscriber(subscriber)

    # --- Session flow ---

    def _handle_start_quiz(self, summary: QuizSummary) -> None:
        try:
            subscriber = self.api_client.get_current_user()
        except Unauthenticated:
            self._set_subscriber(None)
            if not self._prompt_login():
                return
            subscriber = self.subscriber
        except PracticeError as exc:
            show_error(self, "Could not load profile", str(exc))
            return
        if subscriber is None:
            return
        self._set_subscriber(subscriber)

        controller = QuizSessionController(self.api_client, timer_factory=lambda: QtTickTimer(self))
        try:
            controller.start(summary.id, subscriber)
        except QuotaExceeded:
            show_warning(self, "Upgrade required", UPGRADE_REQUIRED_MESSAGE)
            return
        except ContentProviderError as exc:
            show_error(self, "Could not start quiz", str(exc))
            return

        self.session_panel.bind(controller)
        self._set_mode(PracticeMode.SESSION)

    def _handle_session_completed(self, quiz: QuizDefinition, result: AttemptResult) -> None:
        self.session_panel.unbind()
        if not result.outcomes:
            # Some submit responses omit the scored answers; reload the stored attempt.
            try:
                result = self.api_client.fetch_attempt(result.attempt_id)
            except PracticeError as exc:
                logger.warning("Could not reload attempt %s: %s", result.attempt_id, exc)
        self.results_panel.show_result(quiz, result)
        self._set_mode(PracticeMode.RESULTS)
        try:
            self._set_subscriber(self.api_client.get_current_user())
        except PracticeError as exc:
            logger.warning("Could not refresh quota after submission: %s", exc)

    def _return_to_browser(self) -> None:
        self._set_mode(PracticeMode.BROWSE)
        self.browser_panel.refresh_quizzes()

    # --- Misc ---

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        show_info(self, f"About {APP_NAME}", details)

    def _apply_styles(self) -> None:
        self.setStyleSheet(Styles.get_main_window_style())
        self.browser_panel.apply_font_size(self._font_size)
        self.session_panel.apply_font_size(self._font_size)
        self.results_panel.apply_font_size(self._font_size - 2)

    def closeEvent(self, event: QCloseEvent) -> None:
        self.refresh_timer.stop()
        self.session_panel.unbind()
        super().closeEvent(event)
