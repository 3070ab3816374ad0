from __future__ import annotations

import pytest

from conftest import FakeContentProvider, make_quiz
from practice_app.core.errors import (
    CreationError,
    FetchError,
    InvalidSessionState,
    QuotaExceeded,
    SaveError,
    SubmitError,
)
from practice_app.core.models import AttemptId, QuizId, SubscriptionSnapshot, SubscriptionTier
from practice_app.core.session_controller import SessionState


def test_start_builds_one_empty_slot_per_question(make_controller, free_user, timers):
    provider = FakeContentProvider(make_quiz(question_count=5))
    controller = make_controller(provider)

    controller.start(QuizId("quiz-1"), free_user)

    assert controller.state is SessionState.ACTIVE
    assert controller.attempt_id == AttemptId("attempt-1")
    answers = controller.answers()
    assert len(answers) == 5
    assert [slot.question_id for slot in answers] == ["q1", "q2", "q3", "q4", "q5"]
    assert all(slot.answer == "" and slot.time_spent_seconds == 0 for slot in answers)
    assert controller.current_index == 0
    # Untimed quiz: no countdown at all.
    assert controller.remaining_seconds is None
    assert not controller.is_timed
    assert timers.timers == []


def test_quota_exhausted_free_user_cannot_start(make_controller):
    provider = FakeContentProvider(make_quiz())
    controller = make_controller(provider)
    exhausted = SubscriptionSnapshot(tier=SubscriptionTier.FREE, attempts_used=3, attempts_limit=3)

    with pytest.raises(QuotaExceeded):
        controller.start(QuizId("quiz-1"), exhausted)

    assert controller.state is SessionState.UNINITIALIZED
    assert provider.fetch_calls == []
    assert provider.create_calls == []
    assert isinstance(controller.last_error, QuotaExceeded)


def test_premium_user_ignores_attempt_counts(make_controller):
    provider = FakeContentProvider(make_quiz())
    controller = make_controller(provider)
    premium = SubscriptionSnapshot(tier=SubscriptionTier.PREMIUM, attempts_used=50, attempts_limit=3)

    controller.start(QuizId("quiz-1"), premium)

    assert controller.state is SessionState.ACTIVE


def test_fetch_failure_moves_to_failed_and_start_can_be_retried(make_controller, free_user):
    provider = FakeContentProvider(make_quiz())
    provider.fetch_errors.append(FetchError("backend down"))
    controller = make_controller(provider)

    with pytest.raises(FetchError):
        controller.start(QuizId("quiz-1"), free_user)
    assert controller.state is SessionState.FAILED
    assert isinstance(controller.last_error, FetchError)
    assert provider.create_calls == []

    controller.start(QuizId("quiz-1"), free_user)
    assert controller.state is SessionState.ACTIVE
    assert controller.last_error is None


def test_creation_failure_moves_to_failed(make_controller, free_user):
    provider = FakeContentProvider(make_quiz())
    provider.create_errors.append(CreationError("no attempt for you"))
    controller = make_controller(provider)

    with pytest.raises(CreationError):
        controller.start(QuizId("quiz-1"), free_user)

    assert controller.state is SessionState.FAILED
    assert controller.answers() == []


def test_start_twice_is_rejected(make_controller, free_user):
    controller = make_controller(FakeContentProvider(make_quiz()))
    controller.start(QuizId("quiz-1"), free_user)

    with pytest.raises(InvalidSessionState):
        controller.start(QuizId("quiz-1"), free_user)


def test_operations_before_start_are_rejected(make_controller):
    controller = make_controller(FakeContentProvider(make_quiz()))

    with pytest.raises(InvalidSessionState):
        controller.record_answer(0, "A")
    with pytest.raises(InvalidSessionState):
        controller.navigate(1)
    with pytest.raises(InvalidSessionState):
        controller.save_progress()
    with pytest.raises(InvalidSessionState):
        controller.submit()


def test_record_answer_is_idempotent(make_controller, free_user):
    controller = make_controller(FakeContentProvider(make_quiz()))
    controller.start(QuizId("quiz-1"), free_user)

    assert controller.record_answer(1, "B") is True
    first = controller.answers()
    assert controller.record_answer(1, "B") is False
    assert controller.answers() == first
    assert controller.answered_flags() == [False, True, False]


def test_last_recorded_answer_wins(make_controller, free_user):
    provider = FakeContentProvider(make_quiz())
    controller = make_controller(provider)
    controller.start(QuizId("quiz-1"), free_user)

    controller.record_answer(0, "A")
    controller.record_answer(0, "D")
    controller.save_progress()

    assert provider.saved_answers() == ["D", "", ""]


def test_out_of_range_indexes_raise(make_controller, free_user):
    controller = make_controller(FakeContentProvider(make_quiz()))
    controller.start(QuizId("quiz-1"), free_user)

    with pytest.raises(IndexError):
        controller.record_answer(3, "A")
    with pytest.raises(IndexError):
        controller.navigate(-1)
    assert controller.current_index == 0


def test_navigation_preserves_answers(make_controller, free_user):
    controller = make_controller(FakeContentProvider(make_quiz()))
    controller.start(QuizId("quiz-1"), free_user)

    controller.record_answer(0, "A")
    assert controller.navigate(1) == ""
    assert controller.current_question.id == "q2"
    assert controller.navigate(0) == "A"
    assert controller.current_answer == "A"
    assert controller.answer_at(0) == "A"


def test_time_spent_accumulates_on_the_current_question(make_controller, free_user, clock):
    provider = FakeContentProvider(make_quiz())
    controller = make_controller(provider)
    controller.start(QuizId("quiz-1"), free_user)

    clock.advance(5)
    controller.navigate(1)
    clock.advance(3)
    controller.save_progress()

    times = [slot.time_spent_seconds for slot in provider.update_calls[-1][1]]
    assert times == [5, 3, 0]


def test_untimed_three_question_submission(make_controller, free_user):
    provider = FakeContentProvider(make_quiz(question_count=3), score=66.7)
    controller = make_controller(provider)
    controller.start(QuizId("quiz-1"), free_user)

    controller.record_answer(0, "A")
    controller.navigate(2)
    controller.record_answer(2, "C")
    result = controller.submit()

    assert len(provider.finalize_calls) == 1
    assert provider.saved_answers() == ["A", "", "C"]
    assert controller.state is SessionState.COMPLETED
    assert result is not None
    assert controller.result == result
    assert result.score == 66.7
    assert result.attempt_id == controller.attempt_id


def test_completed_session_no_longer_accepts_answers(make_controller, free_user):
    controller = make_controller(FakeContentProvider(make_quiz()))
    controller.start(QuizId("quiz-1"), free_user)
    controller.submit()

    with pytest.raises(InvalidSessionState):
        controller.record_answer(0, "B")
    assert controller.submit() is None


def test_duplicate_submit_during_submission_is_ignored(make_controller, free_user):
    provider = FakeContentProvider(make_quiz())
    controller = make_controller(provider)
    controller.start(QuizId("quiz-1"), free_user)
    duplicate_results = []
    provider.on_finalize = lambda: duplicate_results.append(controller.submit())

    controller.submit()

    assert duplicate_results == [None]
    assert len(provider.finalize_calls) == 1
    assert len(provider.update_calls) == 1


def test_save_and_answers_rejected_while_submitting(make_controller, free_user):
    provider = FakeContentProvider(make_quiz())
    controller = make_controller(provider)
    controller.start(QuizId("quiz-1"), free_user)
    controller.record_answer(0, "A")
    rejected = []

    def _during_finalize() -> None:
        assert controller.state is SessionState.SUBMITTING
        for action in (controller.save_progress, lambda: controller.record_answer(0, "B")):
            with pytest.raises(InvalidSessionState):
                action()
            rejected.append(True)

    provider.on_finalize = _during_finalize
    controller.submit()

    assert rejected == [True, True]
    assert len(provider.update_calls) == 1
    assert controller.state is SessionState.COMPLETED


def test_save_failure_is_non_fatal_and_retryable(make_controller, free_user):
    provider = FakeContentProvider(make_quiz())
    provider.update_errors.append(SaveError("network hiccup"))
    controller = make_controller(provider)
    controller.start(QuizId("quiz-1"), free_user)
    controller.record_answer(0, "B")
    before = [slot.answer for slot in controller.answers()]

    with pytest.raises(SaveError):
        controller.save_progress()
    assert controller.state is SessionState.ACTIVE
    assert [slot.answer for slot in controller.answers()] == before
    assert isinstance(controller.last_error, SaveError)
    assert controller.last_saved_at is None

    acknowledged = controller.save_progress()
    assert acknowledged.attempt_id == controller.attempt_id
    assert acknowledged.status == "in_progress"
    assert acknowledged.outcome_for("q1").answer == "B"
    assert len(provider.update_calls) == 2
    assert provider.saved_answers() == ["B", "", ""]
    assert controller.last_saved_at is not None
    assert controller.last_error is None
    assert provider.finalize_calls == []


def test_submit_failure_returns_to_active_with_answers_intact(make_controller, free_user):
    provider = FakeContentProvider(make_quiz())
    provider.finalize_errors.append(SubmitError("scoring service unavailable"))
    controller = make_controller(provider)
    controller.start(QuizId("quiz-1"), free_user)
    controller.record_answer(0, "A")

    with pytest.raises(SubmitError):
        controller.submit()
    assert controller.state is SessionState.ACTIVE
    assert controller.answer_at(0) == "A"
    assert isinstance(controller.last_error, SubmitError)

    result = controller.submit()
    assert result is not None
    assert controller.state is SessionState.COMPLETED
    assert len(provider.finalize_calls) == 2


def test_terminal_save_failure_is_reported_as_submit_error(make_controller, free_user):
    provider = FakeContentProvider(make_quiz())
    provider.update_errors.append(SaveError("disk full"))
    controller = make_controller(provider)
    controller.start(QuizId("quiz-1"), free_user)

    with pytest.raises(SubmitError):
        controller.submit()

    assert controller.state is SessionState.ACTIVE
    assert provider.finalize_calls == []


def test_countdown_decreases_once_per_tick(make_controller, free_user, timers):
    controller = make_controller(FakeContentProvider(make_quiz(time_limit_minutes=2)))
    controller.start(QuizId("quiz-1"), free_user)

    assert controller.remaining_seconds == 120
    assert len(timers.running()) == 1
    assert timers.running()[0].interval_ms == 1000

    previous = controller.remaining_seconds
    for _ in range(10):
        timers.tick()
        assert controller.remaining_seconds == previous - 1
        previous = controller.remaining_seconds
    assert controller.state is SessionState.ACTIVE


def test_one_minute_quiz_auto_submits_exactly_once(make_controller, free_user, timers):
    provider = FakeContentProvider(make_quiz(time_limit_minutes=1))
    controller = make_controller(provider)
    controller.start(QuizId("quiz-1"), free_user)

    timers.tick(59)
    assert provider.finalize_calls == []
    assert controller.remaining_seconds == 1

    timers.tick()
    assert len(provider.finalize_calls) == 1
    assert controller.state is SessionState.COMPLETED
    assert controller.remaining_seconds == 0
    assert timers.running() == []

    # Queued ticks from the released handle must not act on the session.
    for timer in timers.timers:
        timer.fire()
    assert controller.remaining_seconds == 0
    assert len(provider.finalize_calls) == 1


def test_countdown_frozen_after_manual_submit(make_controller, free_user, timers):
    provider = FakeContentProvider(make_quiz(time_limit_minutes=1))
    controller = make_controller(provider)
    controller.start(QuizId("quiz-1"), free_user)
    timers.tick(5)
    stale_timer = timers.timers[-1]

    controller.submit()
    stale_timer.fire()

    assert controller.remaining_seconds == 55
    assert timers.running() == []


def test_failed_manual_submit_rearms_countdown(make_controller, free_user, timers):
    provider = FakeContentProvider(make_quiz(time_limit_minutes=1))
    provider.finalize_errors.append(SubmitError("try later"))
    controller = make_controller(provider)
    controller.start(QuizId("quiz-1"), free_user)
    timers.tick(10)
    first_timer = timers.timers[-1]

    with pytest.raises(SubmitError):
        controller.submit()

    assert controller.remaining_seconds == 50
    assert not first_timer.running
    assert len(timers.running()) == 1
    first_timer.fire()
    assert controller.remaining_seconds == 50
    timers.tick()
    assert controller.remaining_seconds == 49


def test_failed_auto_submit_keeps_timeout_final(make_controller, free_user, timers):
    provider = FakeContentProvider(make_quiz(time_limit_minutes=1))
    provider.finalize_errors.append(SubmitError("gateway timeout"))
    controller = make_controller(provider)
    controller.start(QuizId("quiz-1"), free_user)
    controller.record_answer(1, "B")

    timers.tick(60)

    assert controller.state is SessionState.ACTIVE
    assert controller.remaining_seconds == 0
    assert timers.running() == []
    assert isinstance(controller.last_error, SubmitError)
    assert controller.answer_at(1) == "B"

    result = controller.submit()
    assert result is not None
    assert len(provider.finalize_calls) == 2
    assert controller.remaining_seconds == 0


def test_close_releases_timer_and_ignores_late_ticks(make_controller, free_user, timers):
    controller = make_controller(FakeContentProvider(make_quiz(time_limit_minutes=1)))
    controller.start(QuizId("quiz-1"), free_user)
    timers.tick(3)
    handle = timers.timers[-1]

    controller.close()
    handle.fire()

    assert controller.state is SessionState.ABANDONED
    assert not handle.running
    assert controller.remaining_seconds == 57
    with pytest.raises(InvalidSessionState):
        controller.record_answer(0, "A")


def test_quiz_without_questions_fails_to_start(make_controller, free_user):
    provider = FakeContentProvider(make_quiz(question_count=0))
    controller = make_controller(provider)

    with pytest.raises(FetchError):
        controller.start(QuizId("quiz-1"), free_user)

    assert controller.state is SessionState.FAILED
    assert provider.create_calls == []


def test_unexpected_fetch_failure_still_allows_retry(make_controller, free_user):
    provider = FakeContentProvider(make_quiz())
    provider.fetch_errors.append(RuntimeError("client closed"))
    controller = make_controller(provider)

    with pytest.raises(FetchError) as excinfo:
        controller.start(QuizId("quiz-1"), free_user)

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert controller.state is SessionState.FAILED
    assert isinstance(controller.last_error, FetchError)

    controller.start(QuizId("quiz-1"), free_user)
    assert controller.state is SessionState.ACTIVE


def test_unexpected_finalize_failure_returns_to_active(make_controller, free_user, timers):
    provider = FakeContentProvider(make_quiz(time_limit_minutes=1))
    provider.finalize_errors.append(RuntimeError("client closed"))
    controller = make_controller(provider)
    controller.start(QuizId("quiz-1"), free_user)
    controller.record_answer(0, "A")
    timers.tick(5)

    with pytest.raises(SubmitError) as excinfo:
        controller.submit()

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert controller.state is SessionState.ACTIVE
    assert controller.answer_at(0) == "A"
    assert len(timers.running()) == 1
    assert controller.remaining_seconds == 55

    assert controller.submit() is not None
    assert controller.state is SessionState.COMPLETED


def test_unexpected_failure_during_auto_submit_keeps_session_usable(make_controller, free_user, timers):
    provider = FakeContentProvider(make_quiz(time_limit_minutes=1))
    provider.finalize_errors.append(RuntimeError("client closed"))
    controller = make_controller(provider)
    controller.start(QuizId("quiz-1"), free_user)

    timers.tick(60)

    assert controller.state is SessionState.ACTIVE
    assert isinstance(controller.last_error, SubmitError)
    assert timers.running() == []
    assert controller.submit() is not None


def test_unexpected_save_failure_is_reported_as_save_error(make_controller, free_user):
    provider = FakeContentProvider(make_quiz())
    provider.update_errors.append(RuntimeError("client closed"))
    controller = make_controller(provider)
    controller.start(QuizId("quiz-1"), free_user)

    with pytest.raises(SaveError):
        controller.save_progress()

    assert controller.state is SessionState.ACTIVE
    controller.save_progress()
