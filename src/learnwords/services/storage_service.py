"""Service for saving and loading the trainer state with SQLAlchemy."""
import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from learnwords.models.learning_models import (
    AttemptStats,
    Day,
    DayStatistics,
    LearnRung,
    Learned,
    Statistics,
    ToLearn,
    WordRecord,
    WordType,
    record_from_data,
)
from learnwords.models.models import (
    DayLevelCount,
    DayStatisticsRow,
    LadderRung,
    WordEntry,
    WordRecordRow,
)
from learnwords.services.word_service import WordStore

logger = logging.getLogger(__name__)


def _record_row(position: int, record: WordRecord) -> WordRecordRow:
    row = WordRecordRow(position=position, status=record.status.value, correct=0, incorrect=0)
    if isinstance(record, (ToLearn, Learned)):
        row.translation = record.translation
        row.correct = record.stats.correct
        row.incorrect = record.stats.incorrect
    if isinstance(record, ToLearn):
        row.last_practiced = int(record.last_practiced)
        row.ladder_index = record.ladder_index
        row.rung_progress = record.rung_progress
    return row


def _row_record(row: WordRecordRow) -> WordRecord:
    return record_from_data({
        "status": row.status,
        "translation": row.translation,
        "last_practiced": row.last_practiced,
        "ladder_index": row.ladder_index,
        "rung_progress": row.rung_progress,
        "stats": {"correct": row.correct or 0, "incorrect": row.incorrect or 0},
    })


class StorageService:
    """Persists the word store, ladder and statistics as replaceable snapshots."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    def _commit(self, what: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving {what}: {e}")
            raise
        logger.info(f"Saved {what}")

    def save_words(self, words: WordStore) -> None:
        """Replace the stored words with the given store."""
        self.db.query(WordRecordRow).delete()
        self.db.query(WordEntry).delete()
        for word, records in words.items():
            entry = WordEntry(text=word)
            entry.records = [_record_row(position, record) for position, record in enumerate(records)]
            self.db.add(entry)
        self._commit(f"{len(words)} words")

    def load_words(self) -> WordStore:
        """Load the stored word store."""
        entries = self.db.query(WordEntry).all()
        words = WordStore({entry.text: [_row_record(row) for row in entry.records] for entry in entries})
        logger.info(f"Loaded {len(words)} words")
        return words

    def save_ladder(self, ladder: List[LearnRung]) -> None:
        """Replace the stored learn ladder."""
        self.db.query(LadderRung).delete()
        for position, rung in enumerate(ladder):
            self.db.add(LadderRung(
                position=position,
                wait_days=rung.wait_days,
                required_count=rung.required_count,
                reveal_prompt=rung.reveal_prompt,
            ))
        self._commit(f"ladder with {len(ladder)} rungs")

    def load_ladder(self) -> Optional[List[LearnRung]]:
        """Load the stored learn ladder, None if none was saved."""
        rows = self.db.query(LadderRung).order_by(LadderRung.position).all()
        if not rows:
            return None
        return [LearnRung(row.wait_days, row.required_count, row.reveal_prompt) for row in rows]

    def save_statistics(self, stats: Statistics) -> None:
        """Replace the stored per-day statistics."""
        self.db.query(DayLevelCount).delete()
        self.db.query(DayStatisticsRow).delete()
        for day, day_stats in stats.by_day.items():
            row = DayStatisticsRow(
                day=int(day),
                correct=day_stats.attempts.correct,
                incorrect=day_stats.attempts.incorrect,
                new_unknown_words_count=day_stats.new_unknown_words_count,
                working_time=day_stats.working_time,
            )
            row.level_counts = [
                DayLevelCount(word_type=word_type.to_key(), count=count)
                for word_type, count in day_stats.word_count_by_level.items()
            ]
            self.db.add(row)
        self._commit(f"statistics for {len(stats.by_day)} days")

    def load_statistics(self) -> Statistics:
        """Load the stored per-day statistics."""
        stats = Statistics()
        for row in self.db.query(DayStatisticsRow).order_by(DayStatisticsRow.day).all():
            stats.by_day[Day(row.day)] = DayStatistics(
                attempts=AttemptStats(row.correct or 0, row.incorrect or 0),
                new_unknown_words_count=row.new_unknown_words_count or 0,
                word_count_by_level={
                    WordType.from_key(level.word_type): level.count for level in row.level_counts
                },
                working_time=row.working_time or 0.0,
            )
        return stats

    def save_state(self, words: WordStore, ladder: List[LearnRung], stats: Statistics) -> None:
        """Save the whole trainer state."""
        self.save_words(words)
        self.save_ladder(ladder)
        self.save_statistics(stats)

    def load_state(self) -> Tuple[WordStore, Optional[List[LearnRung]], Statistics]:
        """Load the whole trainer state."""
        return self.load_words(), self.load_ladder(), self.load_statistics()
