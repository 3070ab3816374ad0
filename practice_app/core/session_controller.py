"""State machine for taking one practice quiz from start to submission.

Architecture note:
    The controller is driven by discrete events: UI calls, countdown ticks
    and the completion of provider calls. A state lock guards all session
    data and is never held across a provider call. A second I/O lock
    serializes ``update_attempt``/``finalize_attempt`` so a progress save and
    the final submission never interleave; a save that arrives while the
    submission is in flight is rejected outright rather than queued, since
    its answers would be stale by the time it ran.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum, auto
import logging
from threading import Lock
import time
from typing import Callable

from practice_app.constants.quiz_constants import COUNTDOWN_TICK_INTERVAL_MS
from practice_app.core.errors import (
    ContentProviderError,
    FetchError,
    InvalidSessionState,
    PracticeError,
    QuotaExceeded,
    SaveError,
    SubmitError,
)
from practice_app.core.models import (
    AnswerSlot,
    AttemptId,
    AttemptResult,
    Question,
    QuizDefinition,
    QuizId,
    SubscriptionSnapshot,
)
from practice_app.core.providers import ContentProvider
from practice_app.core.services.answer_sheet import AnswerSheet
from practice_app.core.services.countdown import Countdown, TickTimer, TimerFactory

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle of one quiz attempt."""

    UNINITIALIZED = auto()
    INITIALIZING = auto()
    ACTIVE = auto()
    SUBMITTING = auto()
    COMPLETED = auto()
    FAILED = auto()
    ABANDONED = auto()


class QuizSessionController:
    """Owns the answers, countdown and attempt record of a single quiz attempt."""

    def __init__(
        self,
        provider: ContentProvider,
        timer_factory: TimerFactory,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._provider = provider
        self._timer_factory = timer_factory
        self._clock = clock
        self._lock = Lock()
        self._io_lock = Lock()

        self._state = SessionState.UNINITIALIZED
        self._quiz: QuizDefinition | None = None
        self._attempt_id: AttemptId | None = None
        self._sheet: AnswerSheet | None = None
        self._countdown: Countdown | None = None
        self._timer: TickTimer | None = None
        self._timer_generation: int = 0
        self._slot_entered_at: float | None = None
        self._result: AttemptResult | None = None
        self._last_error: PracticeError | None = None
        self._last_saved_at: datetime | None = None

    # --- Lifecycle ---

    def start(self, quiz_id: QuizId, subscriber: SubscriptionSnapshot) -> None:
        """Check the quota, load the quiz, open an attempt and become active.

        Raises ``QuotaExceeded`` without contacting the provider when the
        subscriber has no attempts left. Fetch and creation failures move
        the session to FAILED and are re-raised; calling ``start`` again
        retries from scratch.
        """
        with self._lock:
            if self._state not in (SessionState.UNINITIALIZED, SessionState.FAILED):
                raise InvalidSessionState(
                    f"Cannot start a session that is {self._state.name.lower()}."
                )
            if not subscriber.can_start_attempt():
                error = QuotaExceeded(subscriber.attempts_used, subscriber.attempts_limit)
                self._last_error = error
                logger.info("Start refused for %s: quota exhausted", subscriber.username or "user")
                raise error
            self._state = SessionState.INITIALIZING
            self._last_error = None

        try:
            quiz = self._provider.fetch_quiz_definition(quiz_id)
            if not quiz.questions:
                raise FetchError(f"Quiz {quiz_id} has no questions.")
            attempt_id = self._provider.create_attempt(quiz_id)
        except Exception as exc:
            error = exc if isinstance(exc, ContentProviderError) else FetchError(str(exc))
            with self._lock:
                if self._state is SessionState.INITIALIZING:
                    self._state = SessionState.FAILED
                self._last_error = error
            logger.warning("Could not start quiz %s: %s", quiz_id, exc)
            if error is exc:
                raise
            raise error from exc

        with self._lock:
            if self._state is not SessionState.INITIALIZING:
                logger.info("Session closed while initializing; discarding attempt %s", attempt_id)
                return
            self._quiz = quiz
            self._attempt_id = attempt_id
            self._sheet = AnswerSheet(quiz.questions)
            limit = quiz.time_limit_seconds
            self._countdown = Countdown(limit) if limit and limit > 0 else None
            self._state = SessionState.ACTIVE
            self._slot_entered_at = self._clock()
            self._arm_timer()
        logger.info(
            "Started attempt %s for quiz %s (%d questions, %s)",
            attempt_id,
            quiz_id,
            quiz.question_count,
            f"{limit}s limit" if self._countdown else "untimed",
        )

    def close(self) -> None:
        """Tear the session down. The countdown never ticks after this returns."""
        with self._lock:
            if self._state is SessionState.ACTIVE:
                self._accumulate_time()
            self._release_timer()
            if self._state not in (SessionState.COMPLETED, SessionState.ABANDONED):
                logger.info("Abandoning session in state %s", self._state.name)
                self._state = SessionState.ABANDONED

    # --- Answering and navigation ---

    def record_answer(self, index: int, value: str) -> bool:
        """Store ``value`` as the answer at ``index``. Returns True if it changed."""
        with self._lock:
            sheet = self._require_active("record an answer")
            return sheet.record_answer(index, value)

    def navigate(self, index: int) -> str:
        """Make ``index`` the current question and return its stored answer."""
        with self._lock:
            sheet = self._require_active("navigate")
            if not 0 <= index < len(sheet):
                raise IndexError(f"Question index {index} out of range")
            self._accumulate_time()
            return sheet.navigate(index).answer

    def save_progress(self) -> AttemptResult:
        """Push the current answers to the attempt record.

        Returns the attempt as acknowledged by the provider; ``last_saved_at``
        records when that happened. A failure leaves the session active and
        raises ``SaveError``; the caller may simply call again.
        """
        with self._lock:
            if self._state is SessionState.SUBMITTING:
                raise InvalidSessionState("Cannot save while the quiz is being submitted.")
            self._require_active("save progress")

        with self._io_lock:
            with self._lock:
                sheet = self._require_active("save progress")
                self._accumulate_time()
                attempt_id = self._attempt_id
                answers = sheet.snapshot()
            try:
                acknowledged = self._provider.update_attempt(attempt_id, answers)
            except Exception as exc:
                error = exc if isinstance(exc, SaveError) else SaveError(str(exc))
                with self._lock:
                    self._last_error = error
                logger.warning("Saving attempt %s failed: %s", attempt_id, exc)
                if error is exc:
                    raise
                raise error from exc

        with self._lock:
            self._last_saved_at = datetime.now(timezone.utc)
            self._last_error = None
        logger.info("Saved progress for attempt %s", attempt_id)
        return acknowledged

    # --- Submission ---

    def submit(self) -> AttemptResult | None:
        """Save the final answers and finalize the attempt.

        Returns the scored result, or None when a submission is already in
        progress or finished. On failure the session returns to ACTIVE with
        every answer intact and ``SubmitError`` is raised.
        """
        with self._lock:
            payload = self._begin_submission()
        if payload is None:
            return None
        return self._finish_submission(*payload)

    def _begin_submission(self) -> tuple[AttemptId, list[AnswerSlot]] | None:
        if self._state in (SessionState.SUBMITTING, SessionState.COMPLETED):
            logger.debug("Submission already %s; ignoring request", self._state.name.lower())
            return None
        sheet = self._require_active("submit")
        self._accumulate_time()
        self._slot_entered_at = None
        self._release_timer()
        self._state = SessionState.SUBMITTING
        return self._attempt_id, sheet.snapshot()

    def _finish_submission(self, attempt_id: AttemptId, answers: list[AnswerSlot]) -> AttemptResult:
        try:
            with self._io_lock:
                self._provider.update_attempt(attempt_id, answers)
                result = self._provider.finalize_attempt(attempt_id)
        except Exception as exc:
            error = exc if isinstance(exc, SubmitError) else SubmitError(str(exc))
            with self._lock:
                if self._state is SessionState.SUBMITTING:
                    self._state = SessionState.ACTIVE
                    self._slot_entered_at = self._clock()
                    self._arm_timer()
                self._last_error = error
            logger.warning("Submitting attempt %s failed: %s", attempt_id, exc)
            if error is exc:
                raise
            raise error from exc

        with self._lock:
            if self._state is SessionState.SUBMITTING:
                self._state = SessionState.COMPLETED
            self._result = result
            self._last_error = None
        logger.info("Attempt %s completed with score %s", attempt_id, result.score)
        return result

    # --- Countdown ---

    def _arm_timer(self) -> None:
        """Acquire a fresh timer handle. Caller holds the state lock."""
        if self._countdown is None or self._countdown.is_expired:
            return
        self._countdown.resume()
        self._timer_generation += 1
        generation = self._timer_generation
        timer = self._timer_factory()
        self._timer = timer
        timer.start(COUNTDOWN_TICK_INTERVAL_MS, lambda: self._handle_tick(generation))

    def _release_timer(self) -> None:
        """Stop and drop the timer handle. Caller holds the state lock."""
        self._timer_generation += 1
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
        if self._countdown is not None:
            self._countdown.freeze()

    def _handle_tick(self, generation: int) -> None:
        with self._lock:
            if (
                generation != self._timer_generation
                or self._state is not SessionState.ACTIVE
                or self._countdown is None
            ):
                logger.debug("Ignoring stray countdown tick")
                return
            if not self._countdown.tick():
                return
            logger.info("Time limit reached for attempt %s; submitting", self._attempt_id)
            payload = self._begin_submission()
        if payload is None:
            return
        try:
            self._finish_submission(*payload)
        except SubmitError as exc:
            # Already recorded in last_error; the UI offers a manual retry.
            logger.warning("Automatic submission failed: %s", exc)

    # --- Helpers ---

    def _require_active(self, action: str) -> AnswerSheet:
        if self._state is not SessionState.ACTIVE or self._sheet is None:
            raise InvalidSessionState(f"Cannot {action} while the session is {self._state.name.lower()}.")
        return self._sheet

    def _accumulate_time(self) -> None:
        if self._sheet is None or self._slot_entered_at is None:
            return
        now = self._clock()
        self._sheet.add_time(now - self._slot_entered_at)
        self._slot_entered_at = now

    # --- Read accessors ---

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def quiz(self) -> QuizDefinition | None:
        with self._lock:
            return self._quiz

    @property
    def attempt_id(self) -> AttemptId | None:
        with self._lock:
            return self._attempt_id

    @property
    def result(self) -> AttemptResult | None:
        with self._lock:
            return self._result

    @property
    def last_error(self) -> PracticeError | None:
        with self._lock:
            return self._last_error

    @property
    def last_saved_at(self) -> datetime | None:
        with self._lock:
            return self._last_saved_at

    @property
    def is_submitting(self) -> bool:
        with self._lock:
            return self._state is SessionState.SUBMITTING

    @property
    def is_timed(self) -> bool:
        with self._lock:
            return self._countdown is not None

    @property
    def remaining_seconds(self) -> int | None:
        with self._lock:
            return self._countdown.remaining_seconds if self._countdown else None

    @property
    def question_count(self) -> int:
        with self._lock:
            return len(self._sheet) if self._sheet else 0

    @property
    def current_index(self) -> int:
        with self._lock:
            return self._sheet.current_index if self._sheet else 0

    @property
    def current_question(self) -> Question | None:
        with self._lock:
            if self._quiz is None or self._sheet is None:
                return None
            return self._quiz.questions[self._sheet.current_index]

    @property
    def current_answer(self) -> str:
        with self._lock:
            return self._sheet.current_slot().answer if self._sheet else ""

    def answer_at(self, index: int) -> str:
        with self._lock:
            if self._sheet is None:
                raise InvalidSessionState("No quiz has been loaded.")
            return self._sheet.answer_at(index)

    def answers(self) -> list[AnswerSlot]:
        with self._lock:
            return self._sheet.snapshot() if self._sheet else []

    def answered_flags(self) -> list[bool]:
        with self._lock:
            return self._sheet.answered_flags() if self._sheet else []

    def answered_count(self) -> int:
        with self._lock:
            return self._sheet.answered_count() if self._sheet else 0
