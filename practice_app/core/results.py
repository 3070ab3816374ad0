"""Summaries of a finalized attempt for the results view."""

from __future__ import annotations

from dataclasses import dataclass

from practice_app.constants.quiz_constants import SCORE_BANDS
from practice_app.core.models import AttemptResult, Question, QuestionOutcome, QuizDefinition


@dataclass(slots=True)
class ResultRow:
    """One question paired with how the user answered it."""

    number: int
    question: Question
    outcome: QuestionOutcome | None

    @property
    def answer(self) -> str:
        return self.outcome.answer if self.outcome else ""

    @property
    def is_correct(self) -> bool | None:
        return self.outcome.is_correct if self.outcome else None


@dataclass(slots=True)
class ResultSummary:
    """Immutable snapshot returned to the results panel."""

    title: str
    score: float | None
    score_label: str
    correct_count: int
    answered_count: int
    total_count: int
    time_spent_seconds: float
    rows: list[ResultRow]


def score_label(score: float | None) -> str:
    """Map a percentage score onto its descriptive band."""
    if score is None:
        return "Pending review"
    for threshold, label in SCORE_BANDS:
        if score >= threshold:
            return label
    return SCORE_BANDS[-1][1]


def summarize_result(quiz: QuizDefinition, result: AttemptResult) -> ResultSummary:
    if result.quiz_id != quiz.id:
        raise ValueError(f"Attempt {result.attempt_id} belongs to quiz {result.quiz_id}, not {quiz.id}.")

    rows = [
        ResultRow(number=idx + 1, question=question, outcome=result.outcome_for(question.id))
        for idx, question in enumerate(quiz.questions)
    ]
    return ResultSummary(
        title=quiz.title,
        score=result.score,
        score_label=score_label(result.score),
        correct_count=sum(1 for row in rows if row.is_correct),
        answered_count=sum(1 for row in rows if row.answer),
        total_count=len(rows),
        time_spent_seconds=result.time_spent_seconds,
        rows=rows,
    )


def format_duration(seconds: float) -> str:
    minutes, secs = divmod(int(round(seconds)), 60)
    return f"{minutes} min {secs} s"
