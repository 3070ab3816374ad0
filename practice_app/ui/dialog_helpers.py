"""Message boxes shared by the practice panels."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget


def _ask(parent: QWidget, title: str, message: str) -> bool:
    """Yes/No question defaulting to No. Returns True on Yes."""
    reply = QMessageBox.question(
        parent,
        title,
        message,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def confirm_submit(parent: QWidget, unanswered_count: int) -> bool:
    """Ask before submitting, mentioning any unanswered questions.

    Args:
        parent: Parent widget for the dialog
        unanswered_count: Number of questions still left blank

    Returns:
        True if the user wants to submit now
    """
    message = "Submit your answers now? You cannot change them afterwards."
    if unanswered_count:
        message = f"{unanswered_count} question(s) are still unanswered. {message}"
    return _ask(parent, "Submit Quiz", message)


def confirm_leave_session(parent: QWidget) -> bool:
    return _ask(parent, "Leave Quiz", "Leave this quiz? Answers you have not saved will be lost.")


def show_error(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.critical(parent, title, message)


def show_warning(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.warning(parent, title, message)


def show_info(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.information(parent, title, message)
