"""Interfaces of the external collaborators the session controller depends on.

Architecture note:
    The controller never talks HTTP directly. It is handed a content provider
    and receives the subscription snapshot explicitly at start time, so the
    quota check and the whole state machine can be exercised with in-memory
    fakes. ``PracticeApiClient`` is the production implementation of both
    protocols.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from practice_app.core.models import (
    AnswerSlot,
    AttemptId,
    AttemptResult,
    QuizDefinition,
    QuizId,
    SubscriptionSnapshot,
)


class ContentProvider(Protocol):
    """Supplies quiz definitions and owns the attempt record lifecycle."""

    def fetch_quiz_definition(self, quiz_id: QuizId) -> QuizDefinition:
        """Raise ``NotFoundError`` or ``FetchError`` on failure."""
        ...

    def create_attempt(self, quiz_id: QuizId) -> AttemptId:
        """Raise ``CreationError`` on failure."""
        ...

    def update_attempt(self, attempt_id: AttemptId, answers: Sequence[AnswerSlot]) -> AttemptResult:
        """Return the stored, still unscored attempt. Raise ``SaveError`` on failure."""
        ...

    def finalize_attempt(self, attempt_id: AttemptId) -> AttemptResult:
        """Raise ``SubmitError`` on failure."""
        ...


class AccessGate(Protocol):
    """Reports who is logged in and how much of their quota is left."""

    def get_current_user(self) -> SubscriptionSnapshot:
        """Raise ``Unauthenticated`` when nobody is logged in."""
        ...
