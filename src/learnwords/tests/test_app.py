"""Tests for the application facade."""
import random
from typing import Generator
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from learnwords.app import LearnWordsApp, today_from_clock
from learnwords.config import settings
from learnwords.models.base import init_db
from learnwords.models.learning_models import Day, LearnRung, Statistics, WordType, WordsToAdd, current_day
from learnwords.services.cycle_service import SessionState
from learnwords.services.word_service import WordStore


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create a session on a fresh in-memory database."""
    engine = create_engine("sqlite://")
    init_db(engine)
    db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def app(ladder: list[LearnRung], rng: random.Random) -> LearnWordsApp:
    """Create an app with an empty store."""
    return LearnWordsApp(WordStore(), ladder, Statistics(), Day(100), rng)


def test_current_day() -> None:
    """Test converting timestamps to days with an hour offset."""
    assert current_day(0) == 0
    assert current_day(86399) == 0
    assert current_day(86400) == 1
    assert current_day(86400 - 3600, hour_offset=1) == 1
    assert current_day(86400, hour_offset=-3) == 0


def test_today_from_clock() -> None:
    """Test that the clock is read through the configured offset."""
    with patch("learnwords.app.time.time", return_value=10 * 86400 + 5):
        assert today_from_clock() == current_day(10 * 86400 + 5, settings.learning.day_hour_offset)


def test_add_word_refreshes_session(app: LearnWordsApp) -> None:
    """Test that added words become available for practice."""
    assert app.session.state == SessionState.IDLE

    app.add_word("apple", WordsToAdd.to_learn(["yabloko"]))

    assert app.session.state == SessionState.CHOOSING
    assert app.day_stats.new_unknown_words_count == 1
    assert {"apple", "yabloko"} <= app.known_words


def test_remove_and_rename(app: LearnWordsApp) -> None:
    """Test the editing entry points keep known words current."""
    app.add_word("apple", WordsToAdd.to_learn(["yabloko"]))
    assert app.rename_word("apple", "Apple")
    assert "apple" not in app.known_words
    assert app.remove_word("Apple")
    assert app.known_words == set()
    assert app.session.state == SessionState.IDLE


def test_candidate_words(app: LearnWordsApp) -> None:
    """Test that known words are filtered from a text."""
    app.add_word("the", WordsToAdd.known_previously())
    candidates = app.candidate_words("The cat saw the other cat")
    assert [word for word, _ in candidates] == ["cat", "other", "saw"]


def test_summary(app: LearnWordsApp) -> None:
    """Test the reporting figures."""
    app.add_word("apple", WordsToAdd.to_learn(["yabloko"]))
    app.add_word("the", WordsToAdd.known_previously())

    assert app.summary() == {
        "today": 100,
        "to_repeat": 0,
        "to_learn": 2,
        "counts": {"known": 1, "level:0": 2},
        "attempts": {"correct": 0, "incorrect": 0},
    }


def test_save_and_load(app: LearnWordsApp, db: Session, rng: random.Random) -> None:
    """Test that the stored state is restored with today's statistics."""
    app.add_word("apple", WordsToAdd.to_learn(["yabloko"]))
    app.session.choose()
    plan = app.session.prompt.plan
    app.session.check(list(plan.to_type), list(plan.to_guess))
    app.save(db, working_time=42.0)

    loaded = LearnWordsApp.load(db, Day(100), rng)
    assert loaded.words == app.words
    assert loaded.ladder == app.ladder
    assert loaded.stats.by_day[Day(100)].working_time == 42.0
    assert loaded.stats.by_day[Day(100)].attempts.correct == 1
    assert loaded.stats.by_day[Day(100)].word_count_by_level == {WordType.at_level(0): 2}


def test_load_without_stored_ladder_uses_settings(db: Session) -> None:
    """Test the fallback to the configured ladder."""
    loaded = LearnWordsApp.load(db, Day(0))
    assert loaded.ladder == settings.learning.ladder
    assert len(loaded.words) == 0


def test_candidate_words_from_subtitles(app: LearnWordsApp) -> None:
    """Test that subtitle timing lines never become candidates."""
    app.add_word("the", WordsToAdd.known_previously())
    subtitles = "1\n00:00:01,000 --> 00:00:02,000\nThe cat sat.\n\n2\n00:00:03,000 --> 00:00:04,000\nThe cat left.\n"
    candidates = app.candidate_words(subtitles, subtitles=True)
    assert [word for word, _ in candidates] == ["cat", "left", "sat"]
