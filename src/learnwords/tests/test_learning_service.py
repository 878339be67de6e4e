"""Tests for the learning record state machine."""
import random

import pytest

from learnwords.models.learning_models import (
    Day,
    DayStatistics,
    KnownPreviously,
    LearnRung,
    Learned,
    ToLearn,
    TrashWord,
)
from learnwords.services import learning_service


def test_fresh_record_is_due(ladder: list[LearnRung]) -> None:
    """Test that a new record on a zero-wait rung is due the same day."""
    record = ToLearn(translation="kot", last_practiced=Day(10))
    assert learning_service.is_due(record, Day(10), ladder)
    assert learning_service.has_hint(record, ladder)


def test_inert_records_are_never_due(ladder: list[LearnRung]) -> None:
    """Test that inert and learned records are excluded from scheduling."""
    for record in (KnownPreviously(), TrashWord(), Learned(translation="kot")):
        assert not learning_service.is_due(record, Day(100), ladder)
        assert learning_service.overdue_days(record, Day(100), ladder) == 0
        assert learning_service.attempts_remaining(record, Day(100), ladder) == 0


def test_record_is_learned_after_five_correct_attempts(ladder: list[LearnRung]) -> None:
    """Test the 2 + 3 correct attempts needed to clear both rungs."""
    record = ToLearn(translation="kot", last_practiced=Day(0))
    for attempt in range(4):
        record = learning_service.register_attempt(record, True, Day(0), ladder)
        assert isinstance(record, ToLearn), f"learned too early after {attempt + 1} attempts"

    assert record.ladder_index == 1
    assert record.rung_progress == 2

    record = learning_service.register_attempt(record, True, Day(0), ladder)
    assert isinstance(record, Learned)
    assert record.translation == "kot"
    assert record.stats.correct == 5
    assert record.stats.incorrect == 0


def test_rung_progress_and_advance(ladder: list[LearnRung]) -> None:
    """Test rung progress counting and reset on advance."""
    record = ToLearn(translation="kot", last_practiced=Day(3))
    record = learning_service.register_attempt(record, True, Day(5), ladder)
    assert (record.ladder_index, record.rung_progress, record.last_practiced) == (0, 1, 3)

    record = learning_service.register_attempt(record, True, Day(5), ladder)
    assert (record.ladder_index, record.rung_progress, record.last_practiced) == (1, 0, 5)
    assert not learning_service.has_hint(record, ladder)


def test_wrong_attempts_only_count(ladder: list[LearnRung]) -> None:
    """Test that repeated wrong answers never move the record."""
    record = ToLearn(translation="kot", last_practiced=Day(1), ladder_index=1, rung_progress=2)
    for _ in range(10):
        record = learning_service.register_attempt(record, False, Day(4), ladder)

    assert isinstance(record, ToLearn)
    assert (record.ladder_index, record.rung_progress, record.last_practiced) == (1, 2, 1)
    assert record.stats.incorrect == 10
    assert record.stats.correct == 0


def test_not_due_after_advance_until_wait_elapsed(waiting_ladder: list[LearnRung]) -> None:
    """Test that the new rung's waiting period starts at the advance."""
    record = ToLearn(translation="kot", last_practiced=Day(0))
    record = learning_service.register_attempt(record, True, Day(5), waiting_ladder)

    assert record.ladder_index == 1
    assert not learning_service.is_due(record, Day(5), waiting_ladder)
    assert not learning_service.is_due(record, Day(6), waiting_ladder)
    assert learning_service.is_due(record, Day(7), waiting_ladder)


def test_correct_attempt_on_rung_not_due_only_counts(waiting_ladder: list[LearnRung]) -> None:
    """Test that a correct answer before the wait elapsed does not advance."""
    record = ToLearn(translation="kot", last_practiced=Day(5), ladder_index=1)
    record = learning_service.register_attempt(record, True, Day(6), waiting_ladder)

    assert isinstance(record, ToLearn)
    assert record.ladder_index == 1
    assert record.rung_progress == 0
    assert record.stats.correct == 1


def test_day_before_last_practice_is_not_due(ladder: list[LearnRung]) -> None:
    """Test that a day earlier than the last practice is never due."""
    record = ToLearn(translation="kot", last_practiced=Day(10))
    assert not learning_service.is_due(record, Day(9), ladder)


def test_overdue_days_and_attempts_remaining(waiting_ladder: list[LearnRung]) -> None:
    """Test ranking figures of a due record."""
    record = ToLearn(translation="kot", last_practiced=Day(0), ladder_index=1)
    assert learning_service.overdue_days(record, Day(10), waiting_ladder) == 8
    assert learning_service.overdue_days(record, Day(2), waiting_ladder) == 0
    assert learning_service.overdue_days(record, Day(1), waiting_ladder) == 0
    assert learning_service.attempts_remaining(record, Day(10), waiting_ladder) == 1
    assert learning_service.attempts_remaining(record, Day(1), waiting_ladder) == 0


def test_day_statistics_are_updated(ladder: list[LearnRung]) -> None:
    """Test that attempts are also counted in the day statistics."""
    day_stats = DayStatistics()
    record = ToLearn(translation="kot", last_practiced=Day(0))
    learning_service.register_attempt(record, True, Day(0), ladder, day_stats)
    learning_service.register_attempt(record, False, Day(0), ladder, day_stats)

    assert day_stats.attempts.correct == 1
    assert day_stats.attempts.incorrect == 1


@pytest.mark.parametrize("record", [KnownPreviously(), TrashWord(), Learned(translation="kot")])
def test_attempt_on_inactive_record_is_an_error(record, ladder: list[LearnRung]) -> None:
    """Test that attempts may only be routed to records being learned."""
    with pytest.raises(ValueError):
        learning_service.register_attempt(record, True, Day(0), ladder)


def test_invariants_hold_under_random_attempts() -> None:
    """Test ladder position invariants after every attempt."""
    ladder = [LearnRung.show(0, 2), LearnRung.guess(1, 3), LearnRung.guess(3, 2)]
    rng = random.Random(7)
    for _ in range(50):
        record = ToLearn(translation="kot", last_practiced=Day(0))
        today = 0
        while isinstance(record, ToLearn) and today < 200:
            today += rng.randint(0, 2)
            record = learning_service.register_attempt(record, rng.random() < 0.7, Day(today), ladder)
            if isinstance(record, ToLearn):
                assert 0 <= record.ladder_index < len(ladder)
                assert record.rung_progress < ladder[record.ladder_index].required_count
        assert isinstance(record, Learned)
