"""Domain models for the exam-practice client."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from practice_app.constants.quiz_constants import SECONDS_PER_MINUTE


@dataclass(frozen=True, slots=True)
class QuizId:
    """Backend identifier of a quiz definition."""

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class AttemptId:
    """Backend identifier of one attempt at a quiz. Never interchangeable with QuizId."""

    value: str

    def __str__(self) -> str:
        return self.value


class Skill(Enum):
    """Skill category a practice quiz belongs to."""

    LISTENING = "listening"
    READING = "reading"
    WRITING = "writing"
    SPEAKING = "speaking"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class QuestionType(Enum):
    """How a question is answered. Values follow the backend wire names."""

    SINGLE_CHOICE = "multiple_choice"
    SHORT_TEXT = "fill_blank"
    LONG_TEXT = "essay"


class SubscriptionTier(Enum):
    FREE = "free"
    PREMIUM = "premium"


@dataclass(frozen=True, slots=True)
class Question:
    """A single quiz question. Immutable for the lifetime of a session."""

    id: str
    type: QuestionType
    prompt: str
    choices: tuple[str, ...] = ()
    correct_answer: str | None = None
    explanation: str | None = None
    audio_url: str | None = None
    image_url: str | None = None

    @property
    def is_choice(self) -> bool:
        return self.type is QuestionType.SINGLE_CHOICE


@dataclass(frozen=True, slots=True)
class QuizDefinition:
    """Ordered questions plus metadata for one practice quiz."""

    id: QuizId
    title: str
    skill: Skill
    part: int
    questions: tuple[Question, ...]
    time_limit_minutes: int | None = None
    description: str = ""

    @property
    def time_limit_seconds(self) -> int | None:
        if not self.time_limit_minutes:
            return None
        return self.time_limit_minutes * SECONDS_PER_MINUTE

    @property
    def question_count(self) -> int:
        return len(self.questions)


@dataclass(frozen=True, slots=True)
class QuizSummary:
    """Listing entry shown in the quiz browser."""

    id: QuizId
    title: str
    skill: Skill
    part: int
    question_count: int
    time_limit_minutes: int | None = None
    description: str = ""


@dataclass(slots=True)
class AnswerSlot:
    """The answer recorded for one question during a session.

    An empty answer means "unanswered". ``question_id`` is set once at
    creation and must not be reassigned.
    """

    question_id: str
    answer: str = ""
    time_spent_seconds: float = 0.0

    @property
    def is_answered(self) -> bool:
        return self.answer != ""

    def copy(self) -> AnswerSlot:
        return AnswerSlot(
            question_id=self.question_id,
            answer=self.answer,
            time_spent_seconds=self.time_spent_seconds,
        )


@dataclass(frozen=True, slots=True)
class SubscriptionSnapshot:
    """Subscription tier and attempt quota of the current user at start time."""

    tier: SubscriptionTier
    attempts_used: int = 0
    attempts_limit: int = 0
    username: str = ""

    @property
    def is_quota_limited(self) -> bool:
        return self.tier is SubscriptionTier.FREE

    @property
    def remaining_attempts(self) -> int | None:
        """Attempts left on a quota-limited tier, or None when unlimited."""
        if not self.is_quota_limited:
            return None
        return max(0, self.attempts_limit - self.attempts_used)

    def can_start_attempt(self) -> bool:
        remaining = self.remaining_attempts
        return remaining is None or remaining > 0


@dataclass(frozen=True, slots=True)
class QuestionOutcome:
    """Scored answer for one question as reported by the backend."""

    question_id: str
    answer: str
    is_correct: bool | None = None
    time_spent_seconds: float = 0.0


@dataclass(frozen=True, slots=True)
class AttemptResult:
    """Finalized attempt returned by the backend after scoring."""

    attempt_id: AttemptId
    quiz_id: QuizId
    score: float | None
    outcomes: tuple[QuestionOutcome, ...] = ()
    time_spent_seconds: float = 0.0
    completed_at: datetime | None = None
    status: str = "completed"

    def outcome_for(self, question_id: str) -> QuestionOutcome | None:
        return next((o for o in self.outcomes if o.question_id == question_id), None)
