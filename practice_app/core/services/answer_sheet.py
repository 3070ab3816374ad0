"""Service for tracking answers and the current position within a quiz."""

from __future__ import annotations

from practice_app.core.models import AnswerSlot, Question


class AnswerSheet:
    """Holds one answer slot per question, index-aligned with the quiz."""

    def __init__(self, questions: tuple[Question, ...] | list[Question]) -> None:
        if not questions:
            raise ValueError("Quiz must contain at least one question.")
        self._slots: list[AnswerSlot] = [AnswerSlot(question_id=q.id) for q in questions]
        self._current_index: int = 0

    def __len__(self) -> int:
        return len(self._slots)

    @property
    def current_index(self) -> int:
        return self._current_index

    def current_slot(self) -> AnswerSlot:
        return self._slots[self._current_index]

    def record_answer(self, index: int, value: str) -> bool:
        """Overwrite the answer at ``index``. Returns True if the stored text changed."""
        slot = self._slot_at(index)
        if slot.answer == value:
            return False
        slot.answer = value
        return True

    def navigate(self, index: int) -> AnswerSlot:
        """Move to ``index`` and return its slot so the caller can redisplay it."""
        slot = self._slot_at(index)
        self._current_index = index
        return slot

    def add_time(self, seconds: float) -> None:
        if seconds > 0:
            self.current_slot().time_spent_seconds += seconds

    def answer_at(self, index: int) -> str:
        return self._slot_at(index).answer

    def snapshot(self) -> list[AnswerSlot]:
        """Return copies of all slots in question order."""
        return [slot.copy() for slot in self._slots]

    def answered_flags(self) -> list[bool]:
        return [slot.is_answered for slot in self._slots]

    def answered_count(self) -> int:
        return sum(1 for slot in self._slots if slot.is_answered)

    def _slot_at(self, index: int) -> AnswerSlot:
        if not 0 <= index < len(self._slots):
            raise IndexError(f"Question index {index} out of range")
        return self._slots[index]
