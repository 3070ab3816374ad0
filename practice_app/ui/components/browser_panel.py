"""Component for browsing and picking a practice quiz."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from practice_app.client.api_client import PracticeApiClient
from practice_app.constants.ui_constants import (
    BROWSER_ALL_PARTS,
    BROWSER_ALL_SKILLS,
    BROWSER_EMPTY_STATE,
    BROWSER_QUOTA_TEMPLATE,
    BROWSER_REFRESH_BUTTON,
    BROWSER_START_BUTTON,
    BROWSER_UNLIMITED,
    MAX_PART_NUMBER,
)
from practice_app.core.errors import PracticeError
from practice_app.core.models import QuizSummary, Skill, SubscriptionSnapshot
from practice_app.ui.dialog_helpers import show_error, show_warning
from practice_app.styling.styles import Styles


class BrowserPanel(QWidget):
    """Lists quizzes filtered by skill and part and starts the selected one."""

    def __init__(
        self,
        api_client: PracticeApiClient,
        on_start_quiz: Callable[[QuizSummary], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.api_client = api_client
        self.on_start_quiz = on_start_quiz
        self._quizzes: list[QuizSummary] = []

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.quota_label = QLabel("", self)
        self.quota_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.quota_label)

        filter_row = QHBoxLayout()
        self.skill_combo = QComboBox(self)
        self.skill_combo.addItem(BROWSER_ALL_SKILLS, None)
        for skill in Skill:
            self.skill_combo.addItem(skill.label, skill)
        self.skill_combo.currentIndexChanged.connect(self.refresh_quizzes)
        filter_row.addWidget(self.skill_combo)

        # 0 doubles as "all parts".
        self.part_spin = QSpinBox(self)
        self.part_spin.setRange(0, MAX_PART_NUMBER)
        self.part_spin.setSpecialValueText(BROWSER_ALL_PARTS)
        self.part_spin.setPrefix("Part ")
        self.part_spin.valueChanged.connect(self.refresh_quizzes)
        filter_row.addWidget(self.part_spin)

        filter_row.addStretch()

        self.refresh_button = QPushButton(BROWSER_REFRESH_BUTTON, self)
        self.refresh_button.clicked.connect(self.refresh_quizzes)
        filter_row.addWidget(self.refresh_button)
        layout.addLayout(filter_row)

        self.quiz_list = QListWidget(self)
        self.quiz_list.setAlternatingRowColors(True)
        self.quiz_list.itemDoubleClicked.connect(lambda _item: self._handle_start_click())
        layout.addWidget(self.quiz_list, stretch=1)

        self.empty_label = QLabel(BROWSER_EMPTY_STATE, self)
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setVisible(False)
        layout.addWidget(self.empty_label)

        self.start_button = QPushButton(BROWSER_START_BUTTON, self)
        self.start_button.clicked.connect(self._handle_start_click)
        layout.addWidget(self.start_button)

    def refresh_quizzes(self) -> None:
        skill = self.skill_combo.currentData()
        part = self.part_spin.value() or None
        try:
            self._quizzes = self.api_client.list_quizzes(skill=skill, part=part)
        except PracticeError as exc:
            show_error(self, "Could not load quizzes", str(exc))
            return

        self.quiz_list.clear()
        for quiz in self._quizzes:
            limit = f"{quiz.time_limit_minutes} min" if quiz.time_limit_minutes else "untimed"
            text = f"{quiz.title} · {quiz.skill.label} Part {quiz.part} · {quiz.question_count} questions · {limit}"
            item = QListWidgetItem(text, self.quiz_list)
            item.setToolTip(quiz.description)
        self.empty_label.setVisible(not self._quizzes)

    def update_subscriber(self, subscriber: SubscriptionSnapshot | None) -> None:
        if subscriber is None:
            self.quota_label.setText("")
            return
        remaining = subscriber.remaining_attempts
        if remaining is None:
            self.quota_label.setText(f"{subscriber.username} · {BROWSER_UNLIMITED}")
        else:
            quota = BROWSER_QUOTA_TEMPLATE.format(remaining=remaining, limit=subscriber.attempts_limit)
            self.quota_label.setText(f"{subscriber.username} · {quota}")

    def _handle_start_click(self) -> None:
        row = self.quiz_list.currentRow()
        if not 0 <= row < len(self._quizzes):
            show_warning(self, "No quiz selected", "Select a quiz from the list first.")
            return
        self.on_start_quiz(self._quizzes[row])

    def apply_font_size(self, font_size: int) -> None:
        self.quiz_list.setStyleSheet(f"font-size: {font_size}pt;")
        self.start_button.setStyleSheet(f"font-size: {font_size}pt;")
