"""Qt UI components for the practice application."""

from .dialog_helpers import (
    confirm_leave_session,
    confirm_submit,
    show_error,
    show_info,
    show_warning,
)
from .practice_main_window import PracticeMainWindow
from .question_renderer import render_question, render_result_summary

__all__ = [
    "PracticeMainWindow",
    "confirm_leave_session",
    "confirm_submit",
    "show_error",
    "show_info",
    "show_warning",
    "render_question",
    "render_result_summary",
]
