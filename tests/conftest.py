"""Shared fakes for the session controller tests."""

from __future__ import annotations

from typing import Callable

import pytest

from practice_app.core.errors import NotFoundError
from practice_app.core.models import (
    AnswerSlot,
    AttemptId,
    AttemptResult,
    Question,
    QuestionOutcome,
    QuestionType,
    QuizDefinition,
    QuizId,
    Skill,
    SubscriptionSnapshot,
    SubscriptionTier,
)
from practice_app.core.session_controller import QuizSessionController


def make_quiz(question_count: int = 3, time_limit_minutes: int | None = None) -> QuizDefinition:
    questions = tuple(
        Question(
            id=f"q{idx + 1}",
            type=QuestionType.SINGLE_CHOICE,
            prompt=f"Question {idx + 1}?",
            choices=("A", "B", "C", "D"),
            correct_answer="A",
            explanation="Because A.",
        )
        for idx in range(question_count)
    )
    return QuizDefinition(
        id=QuizId("quiz-1"),
        title="Reading Part 1",
        skill=Skill.READING,
        part=1,
        questions=questions,
        time_limit_minutes=time_limit_minutes,
    )


class FakeContentProvider:
    """In-memory provider recording every call. Queue exceptions to simulate failures."""

    def __init__(self, quiz: QuizDefinition, score: float = 80.0) -> None:
        self.quiz = quiz
        self.score = score
        self.fetch_calls: list[QuizId] = []
        self.create_calls: list[QuizId] = []
        self.update_calls: list[tuple[AttemptId, list[AnswerSlot]]] = []
        self.finalize_calls: list[AttemptId] = []
        self.fetch_errors: list[Exception] = []
        self.create_errors: list[Exception] = []
        self.update_errors: list[Exception] = []
        self.finalize_errors: list[Exception] = []
        self.on_finalize: Callable[[], None] | None = None

    def fetch_quiz_definition(self, quiz_id: QuizId) -> QuizDefinition:
        self.fetch_calls.append(quiz_id)
        if self.fetch_errors:
            raise self.fetch_errors.pop(0)
        if quiz_id != self.quiz.id:
            raise NotFoundError(f"No quiz {quiz_id}")
        return self.quiz

    def create_attempt(self, quiz_id: QuizId) -> AttemptId:
        self.create_calls.append(quiz_id)
        if self.create_errors:
            raise self.create_errors.pop(0)
        return AttemptId(f"attempt-{len(self.create_calls)}")

    def update_attempt(self, attempt_id: AttemptId, answers: list[AnswerSlot]) -> AttemptResult:
        self.update_calls.append((attempt_id, [slot.copy() for slot in answers]))
        if self.update_errors:
            raise self.update_errors.pop(0)
        return AttemptResult(
            attempt_id=attempt_id,
            quiz_id=self.quiz.id,
            score=None,
            outcomes=tuple(QuestionOutcome(question_id=slot.question_id, answer=slot.answer) for slot in answers),
            status="in_progress",
        )

    def finalize_attempt(self, attempt_id: AttemptId) -> AttemptResult:
        self.finalize_calls.append(attempt_id)
        if self.on_finalize is not None:
            self.on_finalize()
        if self.finalize_errors:
            raise self.finalize_errors.pop(0)
        _, answers = self.update_calls[-1]
        return AttemptResult(
            attempt_id=attempt_id,
            quiz_id=self.quiz.id,
            score=self.score,
            outcomes=tuple(
                QuestionOutcome(question_id=slot.question_id, answer=slot.answer, is_correct=slot.answer == "A")
                for slot in answers
            ),
        )

    def saved_answers(self, call_index: int = -1) -> list[str]:
        return [slot.answer for slot in self.update_calls[call_index][1]]


class ManualTimer:
    """Timer handle whose ticks are fired by the test."""

    def __init__(self) -> None:
        self.callback: Callable[[], None] | None = None
        self.interval_ms: int | None = None
        self.running = False

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self.interval_ms = interval_ms
        self.callback = callback
        self.running = True

    def stop(self) -> None:
        self.running = False

    def fire(self) -> None:
        # Fires even when stopped, to simulate a tick that was already queued.
        if self.callback is not None:
            self.callback()


class ManualTimerFactory:
    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def __call__(self) -> ManualTimer:
        timer = ManualTimer()
        self.timers.append(timer)
        return timer

    def running(self) -> list[ManualTimer]:
        return [timer for timer in self.timers if timer.running]

    def tick(self, count: int = 1) -> None:
        for _ in range(count):
            running = self.running()
            if not running:
                return
            running[-1].fire()


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def free_user() -> SubscriptionSnapshot:
    return SubscriptionSnapshot(tier=SubscriptionTier.FREE, attempts_used=1, attempts_limit=3, username="lan")


@pytest.fixture
def timers() -> ManualTimerFactory:
    return ManualTimerFactory()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_controller(timers: ManualTimerFactory, clock: FakeClock):
    def _make(provider: FakeContentProvider) -> QuizSessionController:
        return QuizSessionController(provider, timer_factory=timers, clock=clock)

    return _make
