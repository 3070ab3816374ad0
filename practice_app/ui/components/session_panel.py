"""Component for taking a quiz: question display, answers, countdown and submission."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QButtonGroup,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QProgressBar,
    QPushButton,
    QRadioButton,
    QVBoxLayout,
    QWidget,
)

from practice_app.constants.quiz_constants import COUNTDOWN_WARNING_WINDOW_SECONDS
from practice_app.constants.ui_constants import (
    SESSION_ESSAY_PLACEHOLDER,
    SESSION_LEAVE_BUTTON,
    SESSION_NEXT_BUTTON,
    SESSION_PREV_BUTTON,
    SESSION_PROGRESS_TEMPLATE,
    SESSION_SAVE_BUTTON,
    SESSION_SUBMIT_BUTTON,
    SESSION_SUBMITTING_LABEL,
    SESSION_TEXT_PLACEHOLDER,
    TIME_UP_MESSAGE,
)
from practice_app.core.errors import InvalidSessionState, SaveError, SubmitError
from practice_app.core.models import AttemptResult, Question, QuestionType, QuizDefinition
from practice_app.core.services.countdown import format_remaining
from practice_app.core.session_controller import QuizSessionController, SessionState
from practice_app.ui.dialog_helpers import confirm_leave_session, confirm_submit, show_info, show_warning
from practice_app.ui.question_renderer import choice_letter, render_question
from practice_app.styling.styles import Styles

_PROGRESS_MAP_COLUMNS = 10


class SessionPanel(QWidget):
    """UI component bound to one ``QuizSessionController`` at a time."""

    def __init__(
        self,
        on_completed: Callable[[QuizDefinition, AttemptResult], None],
        on_leave: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_completed = on_completed
        self.on_leave = on_leave

        self.controller: QuizSessionController | None = None
        self._font_size: int = 14
        self._populating: bool = False
        self._displayed_index: int | None = None
        self._reported_error: object | None = None
        self._handed_off: bool = False
        self._choice_buttons: list[QRadioButton] = []
        self._map_buttons: list[QPushButton] = []

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header_row = QHBoxLayout()
        self.title_label = QLabel("", self)
        self.title_label.setStyleSheet(Styles.get_large_label_style())
        header_row.addWidget(self.title_label, stretch=1)

        self.time_label = QLabel("", self)
        self.time_label.setVisible(False)
        header_row.addWidget(self.time_label)

        self.save_button = QPushButton(SESSION_SAVE_BUTTON, self)
        self.save_button.clicked.connect(self._handle_save)
        header_row.addWidget(self.save_button)

        self.leave_button = QPushButton(SESSION_LEAVE_BUTTON, self)
        self.leave_button.clicked.connect(self._handle_leave)
        header_row.addWidget(self.leave_button)
        layout.addLayout(header_row)

        self.time_progress = QProgressBar(self)
        self.time_progress.setRange(0, 1000)
        self.time_progress.setTextVisible(False)
        self.time_progress.setVisible(False)
        layout.addWidget(self.time_progress)

        self.question_view = QWebEngineView(self)
        layout.addWidget(self.question_view, stretch=3)

        # Answer widgets; only the one matching the question type is visible.
        self.choice_container = QWidget(self)
        self.choice_layout = QVBoxLayout()
        self.choice_container.setLayout(self.choice_layout)
        self.choice_group = QButtonGroup(self)
        self.choice_group.setExclusive(True)
        self.choice_group.idClicked.connect(self._handle_choice_clicked)
        layout.addWidget(self.choice_container)

        self.short_input = QLineEdit(self)
        self.short_input.setPlaceholderText(SESSION_TEXT_PLACEHOLDER)
        self.short_input.textChanged.connect(self._handle_text_changed)
        layout.addWidget(self.short_input)

        self.long_input = QPlainTextEdit(self)
        self.long_input.setPlaceholderText(SESSION_ESSAY_PLACEHOLDER)
        self.long_input.textChanged.connect(lambda: self._handle_text_changed(self.long_input.toPlainText()))
        layout.addWidget(self.long_input, stretch=2)

        self.map_container = QWidget(self)
        self.map_layout = QGridLayout()
        self.map_layout.setSpacing(4)
        self.map_container.setLayout(self.map_layout)
        layout.addWidget(self.map_container)

        nav_row = QHBoxLayout()
        self.prev_button = QPushButton(SESSION_PREV_BUTTON, self)
        self.prev_button.clicked.connect(lambda: self._step(-1))
        nav_row.addWidget(self.prev_button)

        self.progress_label = QLabel("", self)
        self.progress_label.setAlignment(Qt.AlignCenter)
        nav_row.addWidget(self.progress_label, stretch=1)

        self.next_button = QPushButton(SESSION_NEXT_BUTTON, self)
        self.next_button.clicked.connect(lambda: self._step(1))
        nav_row.addWidget(self.next_button)

        self.submit_button = QPushButton(SESSION_SUBMIT_BUTTON, self)
        self.submit_button.clicked.connect(self._handle_submit)
        nav_row.addWidget(self.submit_button)
        layout.addLayout(nav_row)

        self.status_label = QLabel("", self)
        layout.addWidget(self.status_label)

    # --- Binding ---

    def bind(self, controller: QuizSessionController) -> None:
        """Attach an active controller and show its first question."""
        self.controller = controller
        self._displayed_index = None
        self._reported_error = None
        self._handed_off = False
        quiz = controller.quiz
        if quiz is not None:
            self.title_label.setText(f"{quiz.title} · {quiz.skill.label} Part {quiz.part}")
        self.status_label.setText("")
        self._rebuild_progress_map(controller.question_count)
        self._display_current()
        self.refresh_state()

    def unbind(self) -> None:
        if self.controller is not None:
            self.controller.close()
        self.controller = None
        self._displayed_index = None

    # --- Display ---

    def _display_current(self) -> None:
        controller = self.controller
        if controller is None:
            return
        question = controller.current_question
        if question is None:
            return
        index = controller.current_index
        total = controller.question_count
        self.question_view.setHtml(render_question(question, index + 1, total, self._font_size))
        self._populate_answer_widgets(question, controller.current_answer)
        self._displayed_index = index
        self._update_navigation()

    def _populate_answer_widgets(self, question: Question, answer: str) -> None:
        self._populating = True
        try:
            is_choice = question.type is QuestionType.SINGLE_CHOICE
            self.choice_container.setVisible(is_choice)
            self.short_input.setVisible(question.type is QuestionType.SHORT_TEXT)
            self.long_input.setVisible(question.type is QuestionType.LONG_TEXT)

            if is_choice:
                self._rebuild_choices(question.choices, answer)
            elif question.type is QuestionType.SHORT_TEXT:
                self.short_input.setText(answer)
            else:
                self.long_input.setPlainText(answer)
        finally:
            self._populating = False

    def _rebuild_choices(self, choices: tuple[str, ...], answer: str) -> None:
        for button in self._choice_buttons:
            self.choice_group.removeButton(button)
            button.deleteLater()
        self._choice_buttons = []
        for idx, choice in enumerate(choices):
            button = QRadioButton(f"{choice_letter(idx)}. {choice}", self.choice_container)
            button.setChecked(choice == answer)
            self.choice_group.addButton(button, idx)
            self.choice_layout.addWidget(button)
            self._choice_buttons.append(button)

    def _rebuild_progress_map(self, count: int) -> None:
        while self.map_layout.count():
            item = self.map_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self._map_buttons = []
        for idx in range(count):
            button = QPushButton(str(idx + 1), self.map_container)
            button.setFixedSize(32, 32)
            button.clicked.connect(lambda _checked=False, target=idx: self._go_to(target))
            self.map_layout.addWidget(button, idx // _PROGRESS_MAP_COLUMNS, idx % _PROGRESS_MAP_COLUMNS)
            self._map_buttons.append(button)

    def _update_navigation(self) -> None:
        controller = self.controller
        if controller is None:
            return
        index = controller.current_index
        total = controller.question_count
        flags = controller.answered_flags()
        active = controller.state is SessionState.ACTIVE

        self.prev_button.setEnabled(active and index > 0)
        self.next_button.setEnabled(active and index < total - 1)
        self.save_button.setEnabled(active)
        self.submit_button.setEnabled(active)
        self.submit_button.setText(SESSION_SUBMITTING_LABEL if controller.is_submitting else SESSION_SUBMIT_BUTTON)
        self.progress_label.setText(
            SESSION_PROGRESS_TEMPLATE.format(number=index + 1, total=total, answered=sum(flags))
        )
        for idx, button in enumerate(self._map_buttons):
            answered = idx < len(flags) and flags[idx]
            button.setStyleSheet(Styles.get_progress_map_style(current=idx == index, answered=answered))
            button.setEnabled(active)

    def refresh_state(self) -> None:
        """Poll the controller for countdown changes and automatic submission."""
        controller = self.controller
        if controller is None:
            return

        remaining = controller.remaining_seconds
        quiz = controller.quiz
        if remaining is None or quiz is None or quiz.time_limit_seconds is None:
            self.time_label.setVisible(False)
            self.time_progress.setVisible(False)
        else:
            self.time_label.setVisible(True)
            self.time_progress.setVisible(True)
            self.time_label.setText(f"⏱ {format_remaining(remaining)}")
            self.time_label.setStyleSheet(
                Styles.get_timer_label_style(urgent=remaining <= COUNTDOWN_WARNING_WINDOW_SECONDS)
            )
            self.time_progress.setValue(int(remaining / quiz.time_limit_seconds * 1000))

        state = controller.state
        if state is SessionState.COMPLETED and not self._handed_off:
            result = controller.result
            if result is not None and quiz is not None:
                self._handed_off = True
                if remaining == 0:
                    show_info(self, "Time is up", TIME_UP_MESSAGE)
                self.on_completed(quiz, result)
                return

        error = controller.last_error
        if isinstance(error, SubmitError) and error is not self._reported_error and state is SessionState.ACTIVE:
            self._reported_error = error
            self.status_label.setText(f"Submission failed: {error}. Press Submit to try again.")

        if self._displayed_index != controller.current_index:
            self._display_current()
        else:
            self._update_navigation()

    # --- Event handlers ---

    def _handle_choice_clicked(self, choice_id: int) -> None:
        controller = self.controller
        question = controller.current_question if controller else None
        if self._populating or question is None or not 0 <= choice_id < len(question.choices):
            return
        self._record(question.choices[choice_id])

    def _handle_text_changed(self, text: str) -> None:
        if self._populating:
            return
        self._record(text)

    def _record(self, value: str) -> None:
        controller = self.controller
        if controller is None:
            return
        try:
            controller.record_answer(controller.current_index, value)
        except InvalidSessionState:
            # Answers are frozen while submitting; the display is refreshed on the next poll.
            return
        self._update_navigation()

    def _step(self, delta: int) -> None:
        if self.controller is not None:
            self._go_to(self.controller.current_index + delta)

    def _go_to(self, index: int) -> None:
        controller = self.controller
        if controller is None or not 0 <= index < controller.question_count:
            return
        try:
            controller.navigate(index)
        except InvalidSessionState:
            return
        self._display_current()

    def _handle_save(self) -> None:
        controller = self.controller
        if controller is None:
            return
        try:
            controller.save_progress()
        except (SaveError, InvalidSessionState) as exc:
            show_warning(self, "Save failed", f"Your progress could not be saved: {exc}")
            return
        saved_at = controller.last_saved_at
        stamp = saved_at.astimezone().strftime("%H:%M:%S") if saved_at else ""
        self.status_label.setText(f"Progress saved at {stamp}.")

    def _handle_submit(self) -> None:
        controller = self.controller
        if controller is None:
            return
        unanswered = controller.question_count - controller.answered_count()
        if not confirm_submit(self, unanswered):
            return
        try:
            controller.submit()
        except SubmitError as exc:
            self._reported_error = exc
            show_warning(self, "Submit failed", f"Your answers could not be submitted: {exc}")
            self._update_navigation()
            return
        except InvalidSessionState as exc:
            show_warning(self, "Submit unavailable", str(exc))
            return
        self.refresh_state()

    def _handle_leave(self) -> None:
        controller = self.controller
        if controller is not None and controller.state is SessionState.ACTIVE:
            if not confirm_leave_session(self):
                return
        self.unbind()
        self.on_leave()

    def apply_font_size(self, font_size: int) -> None:
        self._font_size = font_size
        style = f"font-size: {font_size}pt;"
        self.short_input.setStyleSheet(style)
        self.long_input.setStyleSheet(style)
        self.choice_container.setStyleSheet(style)
        if self.controller is not None:
            self._display_current()
