"""Pydantic models describing the backend REST payloads.

Field names follow the backend's camelCase JSON. Each payload knows how to
turn itself into the matching domain dataclass so nothing outside this
package sees wire shapes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from practice_app.core.models import (
    AnswerSlot,
    AttemptId,
    AttemptResult,
    Question,
    QuestionOutcome,
    QuestionType,
    QuizDefinition,
    QuizId,
    QuizSummary,
    Skill,
    SubscriptionSnapshot,
    SubscriptionTier,
)

# Spoken responses are collected as free text on the desktop client.
_QUESTION_TYPE_MAP: dict[str, QuestionType] = {
    "multiple_choice": QuestionType.SINGLE_CHOICE,
    "fill_blank": QuestionType.SHORT_TEXT,
    "essay": QuestionType.LONG_TEXT,
    "speaking": QuestionType.LONG_TEXT,
}


class ApiEnvelope(BaseModel):
    success: bool
    data: Any = None
    message: Optional[str] = None
    error: Optional[str] = None


class UserPayload(BaseModel):
    id: str
    email: str = ""
    username: str
    subscriptionType: Literal["free", "premium"]
    freeAttemptsUsed: int = Field(0, ge=0)
    freeAttemptsLimit: int = Field(0, ge=0)

    def to_snapshot(self) -> SubscriptionSnapshot:
        return SubscriptionSnapshot(
            tier=SubscriptionTier(self.subscriptionType),
            attempts_used=self.freeAttemptsUsed,
            attempts_limit=self.freeAttemptsLimit,
            username=self.username,
        )


class AuthPayload(BaseModel):
    user: UserPayload
    token: str = Field(..., min_length=1)


class QuestionPayload(BaseModel):
    id: str
    type: Literal["multiple_choice", "fill_blank", "essay", "speaking"]
    questionText: str
    options: Optional[list[str]] = None
    correctAnswer: Optional[str] = None
    explanation: Optional[str] = None
    audioUrl: Optional[str] = None
    imageUrl: Optional[str] = None
    order: int = 0

    def to_question(self) -> Question:
        return Question(
            id=self.id,
            type=_QUESTION_TYPE_MAP[self.type],
            prompt=self.questionText,
            choices=tuple(self.options or ()),
            correct_answer=self.correctAnswer,
            explanation=self.explanation,
            audio_url=self.audioUrl,
            image_url=self.imageUrl,
        )


class QuizPayload(BaseModel):
    id: str
    title: str
    description: str = ""
    skill: Literal["listening", "reading", "writing", "speaking"]
    part: int = Field(..., ge=1)
    questions: list[QuestionPayload] = Field(default_factory=list)
    timeLimit: Optional[int] = Field(None, ge=0)

    def to_definition(self) -> QuizDefinition:
        ordered = sorted(self.questions, key=lambda q: q.order)
        return QuizDefinition(
            id=QuizId(self.id),
            title=self.title,
            skill=Skill(self.skill),
            part=self.part,
            questions=tuple(q.to_question() for q in ordered),
            time_limit_minutes=self.timeLimit or None,
            description=self.description,
        )

    def to_summary(self) -> QuizSummary:
        return QuizSummary(
            id=QuizId(self.id),
            title=self.title,
            skill=Skill(self.skill),
            part=self.part,
            question_count=len(self.questions),
            time_limit_minutes=self.timeLimit or None,
            description=self.description,
        )


class AnswerPayload(BaseModel):
    questionId: str
    answer: str = ""
    isCorrect: Optional[bool] = None
    timeSpent: float = Field(0, ge=0)

    @classmethod
    def from_slot(cls, slot: AnswerSlot) -> AnswerPayload:
        return cls(
            questionId=slot.question_id,
            answer=slot.answer,
            timeSpent=int(round(slot.time_spent_seconds)),
        )

    def to_outcome(self) -> QuestionOutcome:
        return QuestionOutcome(
            question_id=self.questionId,
            answer=self.answer,
            is_correct=self.isCorrect,
            time_spent_seconds=float(self.timeSpent),
        )


class AttemptPayload(BaseModel):
    id: str
    quizId: str
    userId: str = ""
    answers: list[AnswerPayload] = Field(default_factory=list)
    score: Optional[float] = None
    timeSpent: float = Field(0, ge=0)
    status: Literal["in_progress", "completed", "abandoned"] = "in_progress"
    startedAt: Optional[datetime] = None
    completedAt: Optional[datetime] = None

    def to_result(self) -> AttemptResult:
        return AttemptResult(
            attempt_id=AttemptId(self.id),
            quiz_id=QuizId(self.quizId),
            score=self.score,
            outcomes=tuple(answer.to_outcome() for answer in self.answers),
            time_spent_seconds=float(self.timeSpent),
            completed_at=self.completedAt,
            status=self.status,
        )


class UpdateAttemptRequest(BaseModel):
    answers: list[AnswerPayload]


class CreateAttemptRequest(BaseModel):
    quizId: str


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    username: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    # Checked locally, never sent.
    confirmPassword: str = Field(..., exclude=True)

    @model_validator(mode="after")
    def passwords_match(self) -> RegisterRequest:
        if self.password != self.confirmPassword:
            raise ValueError("Passwords do not match.")
        return self
