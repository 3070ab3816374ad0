"""Component showing the scored result of a finished attempt."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from practice_app.constants.ui_constants import (
    RESULTS_BACK_BUTTON,
    RESULTS_HIDE_EXPLANATIONS,
    RESULTS_SHOW_EXPLANATIONS,
)
from practice_app.core.models import AttemptResult, QuizDefinition
from practice_app.core.results import ResultSummary, summarize_result
from practice_app.ui.question_renderer import render_result_summary
from practice_app.styling.styles import Styles


class ResultsPanel(QWidget):
    """UI component for reviewing a completed attempt."""

    def __init__(self, on_back: Callable[[], None], parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.on_back = on_back
        self._summary: ResultSummary | None = None
        self._show_explanations: bool = False
        self._font_size: int = 12

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.score_label = QLabel("", self)
        self.score_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.score_label)

        self.band_label = QLabel("", self)
        self.band_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.band_label)

        self.review_view = QWebEngineView(self)
        layout.addWidget(self.review_view, stretch=1)

        button_row = QHBoxLayout()
        self.toggle_button = QPushButton(RESULTS_SHOW_EXPLANATIONS, self)
        self.toggle_button.clicked.connect(self._handle_toggle)
        button_row.addWidget(self.toggle_button)
        button_row.addStretch()
        self.back_button = QPushButton(RESULTS_BACK_BUTTON, self)
        self.back_button.clicked.connect(self.on_back)
        button_row.addWidget(self.back_button)
        layout.addLayout(button_row)

    def show_result(self, quiz: QuizDefinition, result: AttemptResult) -> None:
        self._summary = summarize_result(quiz, result)
        self._show_explanations = False
        score = self._summary.score
        self.score_label.setText("Score pending review" if score is None else f"{score:.0f}%")
        self.score_label.setStyleSheet(Styles.get_score_label_style(score))
        self.band_label.setText(self._summary.score_label)
        self._render()

    def _handle_toggle(self) -> None:
        self._show_explanations = not self._show_explanations
        self._render()

    def _render(self) -> None:
        self.toggle_button.setText(
            RESULTS_HIDE_EXPLANATIONS if self._show_explanations else RESULTS_SHOW_EXPLANATIONS
        )
        if self._summary is None:
            return
        self.review_view.setHtml(render_result_summary(self._summary, self._show_explanations, self._font_size))

    def apply_font_size(self, font_size: int) -> None:
        self._font_size = font_size
        self._render()
