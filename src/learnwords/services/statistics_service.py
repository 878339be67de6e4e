"""Read-only statistics derived from the word store."""
import logging
from typing import Dict

from learnwords.models.learning_models import (
    AttemptStats,
    Day,
    DayStatistics,
    KnownPreviously,
    Learned,
    Statistics,
    ToLearn,
    TrashWord,
    WordType,
)
from learnwords.services.word_service import WordStore

logger = logging.getLogger(__name__)


class StatisticsService:
    """Service computing counts and attempt totals for reporting."""

    def __init__(self, words: WordStore):
        """Initialize the service with the word store."""
        self.words = words

    def counts_by_state(self) -> Dict[WordType, int]:
        """Count records per statistics bucket."""
        result: Dict[WordType, int] = {}
        for _, records in self.words.items():
            for record in records:
                if isinstance(record, KnownPreviously):
                    word_type = WordType.known()
                elif isinstance(record, TrashWord):
                    word_type = WordType.trash()
                elif isinstance(record, ToLearn):
                    word_type = WordType.at_level(record.ladder_index)
                elif isinstance(record, Learned):
                    word_type = WordType.learned()
                else:
                    raise TypeError(f"Unknown record type: {type(record).__name__}")
                result[word_type] = result.get(word_type, 0) + 1
        return dict(sorted(result.items(), key=lambda item: item[0].sort_key()))

    def attempt_totals(self) -> AttemptStats:
        """Sum the attempt counters of records still being learned."""
        result = AttemptStats()
        for _, records in self.words.items():
            for record in records:
                if isinstance(record, ToLearn):
                    result.correct += record.stats.correct
                    result.incorrect += record.stats.incorrect
        return result

    def update_day_statistics(self, stats: Statistics, today: Day, working_time: float) -> DayStatistics:
        """Snapshot the current counts into today's statistics entry."""
        day_stats = stats.day(today)
        day_stats.working_time = working_time
        day_stats.word_count_by_level = self.counts_by_state()
        logger.debug(f"Day {today} statistics updated: {day_stats.word_count_by_level}")
        return day_stats
