"""Dialog that logs in or registers and opens an API session."""

from __future__ import annotations

from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from practice_app.client.api_client import PracticeApiClient
from practice_app.constants.ui_constants import (
    LOGIN_BUTTON,
    LOGIN_DIALOG_TITLE,
    REGISTER_BUTTON,
    REGISTER_DIALOG_TITLE,
    SWITCH_TO_LOGIN,
    SWITCH_TO_REGISTER,
)
from practice_app.core.errors import PracticeError
from practice_app.core.models import SubscriptionSnapshot


class LoginDialog(QDialog):
    """Modal login form with a registration mode.

    ``subscriber`` holds the snapshot after acceptance, whichever mode was used.
    """

    def __init__(self, api_client: PracticeApiClient, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setModal(True)
        self.setMinimumWidth(360)

        self.api_client = api_client
        self.subscriber: SubscriptionSnapshot | None = None
        self._registering: bool = False

        self._build_ui()
        self._apply_mode()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.form = QFormLayout()
        self.email_input = QLineEdit(self)
        self.username_input = QLineEdit(self)
        self.password_input = QLineEdit(self)
        self.password_input.setEchoMode(QLineEdit.Password)
        self.confirm_input = QLineEdit(self)
        self.confirm_input.setEchoMode(QLineEdit.Password)
        self.form.addRow("Email:", self.email_input)
        self.form.addRow("Username:", self.username_input)
        self.form.addRow("Password:", self.password_input)
        self.form.addRow("Confirm password:", self.confirm_input)
        layout.addLayout(self.form)

        self.error_label = QLabel("", self)
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet("color: #D13438;")
        self.error_label.setVisible(False)
        layout.addWidget(self.error_label)

        self.mode_button = QPushButton("", self)
        self.mode_button.setFlat(True)
        self.mode_button.clicked.connect(self._toggle_mode)
        layout.addWidget(self.mode_button)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel, self)
        self.buttons.accepted.connect(self._handle_accept)
        self.buttons.rejected.connect(self.reject)
        layout.addWidget(self.buttons)

    def _toggle_mode(self) -> None:
        self._registering = not self._registering
        self.error_label.setVisible(False)
        self._apply_mode()

    def _apply_mode(self) -> None:
        registering = self._registering
        self.setWindowTitle(REGISTER_DIALOG_TITLE if registering else LOGIN_DIALOG_TITLE)
        self.buttons.button(QDialogButtonBox.Ok).setText(REGISTER_BUTTON if registering else LOGIN_BUTTON)
        self.mode_button.setText(SWITCH_TO_LOGIN if registering else SWITCH_TO_REGISTER)
        for field in (self.email_input, self.confirm_input):
            self.form.setRowVisible(field, registering)

    def _handle_accept(self) -> None:
        username = self.username_input.text().strip()
        password = self.password_input.text()
        if not username:
            self._show_error("Please enter your username.")
            self.username_input.setFocus()
            return
        if not password:
            self._show_error("Please enter your password.")
            self.password_input.setFocus()
            return

        try:
            if self._registering:
                self.subscriber = self.api_client.register(
                    self.email_input.text(),
                    username,
                    password,
                    self.confirm_input.text(),
                )
            else:
                self.subscriber = self.api_client.login(username, password)
        except PracticeError as exc:
            self._show_error(str(exc))
            return
        self.accept()

    def _show_error(self, message: str) -> None:
        self.error_label.setText(message)
        self.error_label.setVisible(True)
