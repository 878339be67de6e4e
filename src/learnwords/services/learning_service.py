"""Learning record state machine: due checks and attempt registration for one word pair."""
import logging
from typing import Optional

from learnwords import monitoring
from learnwords.models.learning_models import (
    Day,
    DayStatistics,
    LearnLadder,
    LearnRung,
    Learned,
    ToLearn,
    WordRecord,
)

logger = logging.getLogger(__name__)


def current_rung(record: WordRecord, ladder: LearnLadder) -> Optional[LearnRung]:
    """Get the rung a ToLearn record currently sits on."""
    if not isinstance(record, ToLearn):
        return None
    if 0 <= record.ladder_index < len(ladder):
        return ladder[record.ladder_index]
    return None


def is_due(record: WordRecord, today: Day, ladder: LearnLadder) -> bool:
    """Check whether a record must be practiced today.

    Only the rung at the record's current ladder index is consulted.
    """
    rung = current_rung(record, ladder)
    if rung is None:
        return False
    return rung.is_open(record.last_practiced, today)


def has_hint(record: WordRecord, ladder: LearnLadder) -> bool:
    """Check whether the record is on a rung that reveals the answer."""
    rung = current_rung(record, ladder)
    return rung is not None and rung.reveal_prompt


def overdue_days(record: WordRecord, today: Day, ladder: LearnLadder) -> int:
    """Days elapsed beyond the current rung's waiting period, zero if not due."""
    if not is_due(record, today, ladder):
        return 0
    rung = ladder[record.ladder_index]
    return max(0, today - record.last_practiced - rung.wait_days)


def attempts_remaining(record: WordRecord, today: Day, ladder: LearnLadder) -> int:
    """Correct attempts still needed on the current rung, zero if not due."""
    if not is_due(record, today, ladder):
        return 0
    return ladder[record.ladder_index].required_count - record.rung_progress


def register_attempt(
    record: WordRecord,
    correct: bool,
    today: Day,
    ladder: LearnLadder,
    day_stats: Optional[DayStatistics] = None,
) -> WordRecord:
    """Register one attempt on a ToLearn record and return the resulting record.

    Wrong answers only bump the incorrect counter, the ladder never regresses.
    A correct answer on a due rung advances the rung progress, and once the
    required count is reached moves to the next rung. Leaving the last rung
    turns the record into Learned, which is the returned value.

    Raises:
        ValueError: if the record is not in the ToLearn state.
    """
    if not isinstance(record, ToLearn):
        raise ValueError(f"Attempt registered on a {record.status.value} record")

    record.stats.record(correct)
    if day_stats is not None:
        day_stats.attempts.record(correct)
    monitoring.attempts_registered.labels(result="correct" if correct else "incorrect").inc()

    if not correct or not is_due(record, today, ladder):
        return record

    rung = ladder[record.ladder_index]
    if record.rung_progress + 1 != rung.required_count:
        record.rung_progress += 1
        logger.debug(
            f"Progress for '{record.translation}': {record.rung_progress}/{rung.required_count} "
            f"on rung {record.ladder_index}"
        )
        return record

    record.rung_progress = 0
    record.last_practiced = today
    record.ladder_index += 1
    logger.debug(f"'{record.translation}' advanced to rung {record.ladder_index}")

    if record.ladder_index == len(ladder):
        monitoring.records_learned.inc()
        logger.debug(f"'{record.translation}' is learned")
        return Learned(translation=record.translation, stats=record.stats)
    return record
