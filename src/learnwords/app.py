"""Application facade tying the word store, ladder, statistics and session together."""
import logging
import random
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from learnwords.config import settings
from learnwords.models.learning_models import (
    Day,
    DayStatistics,
    LearnRung,
    Statistics,
    WordsToAdd,
    current_day,
)
from learnwords.services.cycle_service import CycleService, SessionState
from learnwords.services.statistics_service import StatisticsService
from learnwords.services.storage_service import StorageService
from learnwords.services.text_service import Span, extract_subtitle_words, extract_words, unknown_words
from learnwords.services.word_service import WordStore

logger = logging.getLogger(__name__)


def today_from_clock() -> Day:
    """Get today's Day from the wall clock and the configured day boundary."""
    return current_day(time.time(), settings.learning.day_hour_offset)


class LearnWordsApp:
    """The trainer as seen by its front ends."""

    def __init__(
        self,
        words: WordStore,
        ladder: Sequence[LearnRung],
        stats: Statistics,
        today: Day,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the app and compute today's session."""
        self.words = words
        self.ladder = list(ladder)
        self.stats = stats
        self.today = today
        self.rng = rng or random.Random(settings.learning.random_seed)
        self.statistics = StatisticsService(words)
        self.session = CycleService(words, self.ladder, self.rng)
        self.known_words = words.known_words()
        self.session.update(today, self.day_stats)

    @property
    def day_stats(self) -> DayStatistics:
        """Statistics entry of the current day."""
        return self.stats.day(self.today)

    @classmethod
    def load(cls, db: Session, today: Day, rng: Optional[random.Random] = None) -> "LearnWordsApp":
        """Load the stored state, falling back to the configured ladder."""
        words, ladder, stats = StorageService(db).load_state()
        if ladder is None:
            logger.info("No stored ladder, using the configured one")
            ladder = settings.learning.ladder
        return cls(words, ladder, stats, today, rng)

    def save(self, db: Session, working_time: float = 0.0) -> None:
        """Snapshot today's statistics and store the whole state."""
        self.statistics.update_day_statistics(self.stats, self.today, working_time)
        StorageService(db).save_state(self.words, self.ladder, self.stats)

    def set_today(self, today: Day) -> None:
        """Move to another day and recompute the session."""
        self.today = today
        self.session.update(today, self.day_stats)

    def _refresh_session(self) -> None:
        # Words being typed are kept; queues are refreshed between words
        if self.session.state in (SessionState.IDLE, SessionState.CHOOSING):
            self.session.update(self.today, self.day_stats)

    def add_word(self, word: str, info: WordsToAdd) -> None:
        """Add a word and make it available for practice."""
        self.words.add(word, info, self.today, self.day_stats)
        self.known_words.add(word)
        self.known_words.update(info.translations)
        self.known_words.update(info.learned)
        self._refresh_session()

    def remove_word(self, word: str) -> bool:
        """Remove a word and its mirrors."""
        removed = self.words.remove(word)
        self.known_words = self.words.known_words()
        self._refresh_session()
        return removed

    def rename_word(self, word: str, new_word: str) -> bool:
        """Rename a word everywhere it is referenced."""
        renamed = self.words.rename(word, new_word)
        self.known_words = self.words.known_words()
        self._refresh_session()
        return renamed

    def candidate_words(self, text: str, subtitles: bool = False) -> List[Tuple[str, List[Span]]]:
        """Words of a text or SRT subtitles that are not in the store yet, most frequent first."""
        extracted = extract_subtitle_words(text) if subtitles else extract_words(text)
        logger.info(f"Text has {extracted.words_count} words, {extracted.unique_words_count} unique")
        return unknown_words(extracted, self.known_words)

    def summary(self) -> Dict[str, Any]:
        """Figures for the reporting front end."""
        queues = self.session.scheduler.due_queues(self.today)
        totals = self.statistics.attempt_totals()
        return {
            "today": int(self.today),
            "to_repeat": len(queues.repeat),
            "to_learn": len(queues.new),
            "counts": {word_type.to_key(): count for word_type, count in self.statistics.counts_by_state().items()},
            "attempts": totals.to_data(),
        }
