"""Tests for the scheduler service."""
import pytest

from learnwords.models.learning_models import Day, LearnRung, WordsToAdd
from learnwords.services.scheduler_service import RankedWord, SchedulerService
from learnwords.services.word_service import WordStore


@pytest.fixture
def words() -> WordStore:
    """Two pairs being repeated with different lateness and one new pair."""
    store = WordStore()
    store.add("one", WordsToAdd.to_learn(["uno"]), Day(0))
    store.add("two", WordsToAdd.to_learn(["dos"]), Day(0))
    store.add("three", WordsToAdd.to_learn(["tres"]), Day(5))
    for word in ("one", "uno"):
        store.edit_record(word, 0, ladder_index=1, last_practiced=Day(0))
    for word in ("two", "dos"):
        store.edit_record(word, 0, ladder_index=1, last_practiced=Day(3))
    return store


@pytest.fixture
def scheduler(words: WordStore, waiting_ladder: list[LearnRung]) -> SchedulerService:
    """Create a scheduler service instance."""
    return SchedulerService(words, waiting_ladder)


def test_due_queues_are_ranked_by_overdue_days(scheduler: SchedulerService) -> None:
    """Test most overdue first, word order among ties."""
    queues = scheduler.due_queues(Day(10))

    assert queues.repeat == [
        RankedWord("one", 8),
        RankedWord("uno", 8),
        RankedWord("dos", 5),
        RankedWord("two", 5),
    ]
    assert queues.new == [RankedWord("three", 5), RankedWord("tres", 5)]


def test_linked_due_words(scheduler: SchedulerService, words: WordStore) -> None:
    """Test that only due translations are linked."""
    assert scheduler.linked_due_words("one", Day(10)) == ["one", "uno"]
    assert scheduler.linked_due_words("one", Day(1)) == ["one"]


def test_build_batch_pulls_linked_translations(scheduler: SchedulerService) -> None:
    """Test that a pulled word brings its due translations along."""
    queues = scheduler.due_queues(Day(10))
    batch = scheduler.build_batch(queues, n_repeat=1, n_new=1, today=Day(10))

    assert batch == ["one", "three", "tres", "uno"]
    assert [ranked.word for ranked in queues.repeat] == ["dos", "two"]
    assert queues.new == []


def test_linked_words_count_toward_repeat_target(scheduler: SchedulerService) -> None:
    """Test that a repeat pick and its linked translation fill the repeat target together."""
    queues = scheduler.due_queues(Day(10))
    batch = scheduler.build_batch(queues, n_repeat=2, n_new=0, today=Day(10))

    assert batch == ["one", "uno"]
    assert [ranked.word for ranked in queues.repeat] == ["dos", "two"]
    assert [ranked.word for ranked in queues.new] == ["three", "tres"]


def test_build_batch_takes_whole_queues(scheduler: SchedulerService) -> None:
    """Test that asking for a full queue takes every word."""
    queues = scheduler.due_queues(Day(10))
    batch = scheduler.build_batch(queues, n_repeat=4, n_new=2, today=Day(10))

    assert batch == ["dos", "one", "three", "tres", "two", "uno"]
    assert queues.is_empty()


def test_build_empty_batch(scheduler: SchedulerService) -> None:
    """Test that zero targets select nothing."""
    queues = scheduler.due_queues(Day(10))
    assert scheduler.build_batch(queues, n_repeat=0, n_new=0, today=Day(10)) == []
    assert len(queues.repeat) == 4


def test_nothing_due(scheduler: SchedulerService) -> None:
    """Test that a day with nothing due gives empty queues."""
    queues = scheduler.due_queues(Day(1))
    assert queues.is_empty()
