"""Word store: the bidirectional word <-> translation relation and its learning records."""
import logging
from dataclasses import replace
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from learnwords import monitoring
from learnwords.models.learning_models import (
    AttemptStats,
    Day,
    DayStatistics,
    KnownPreviously,
    LearnLadder,
    Learned,
    RecordStatus,
    ToLearn,
    TrashWord,
    WordPlan,
    WordRecord,
    WordsToAdd,
    record_from_data,
    record_to_data,
    record_translation,
)
from learnwords.services import learning_service

logger = logging.getLogger(__name__)


class WordStore:
    """Map from word to its ordered list of learning records.

    Every ToLearn/Learned record under word A pointing at B has a mirrored
    record under B pointing back at A. All mutations go through this class
    so both sides always change together.
    """

    def __init__(self, words: Optional[Dict[str, List[WordRecord]]] = None):
        """Initialize the store, optionally from an existing mapping."""
        self._words: Dict[str, List[WordRecord]] = dict(words or {})

    def __contains__(self, word: str) -> bool:
        return word in self._words

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._words))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WordStore):
            return NotImplemented
        return self._words == other._words

    def records(self, word: str) -> List[WordRecord]:
        """Get a copy of the records under a word, empty if the word is unknown."""
        return list(self._words.get(word, []))

    def items(self) -> Iterator[Tuple[str, List[WordRecord]]]:
        """Iterate over (word, records) in word order."""
        for word in sorted(self._words):
            yield word, list(self._words[word])

    def known_words(self) -> Set[str]:
        """Get every word present in the store."""
        return set(self._words)

    def add(
        self,
        word: str,
        info: WordsToAdd,
        today: Day,
        day_stats: Optional[DayStatistics] = None,
    ) -> None:
        """Add a word with the given disposition.

        For words to learn, one ToLearn record is created per translation and
        one Learned record per already learned translation, each mirrored under
        the translation. Translations the word already points at are skipped.
        """
        entry = self._words.setdefault(word, [])
        if info.status == RecordStatus.KNOWN_PREVIOUSLY:
            entry.append(KnownPreviously())
            monitoring.translations_added.labels(disposition="known").inc()
            logger.info(f"Added known word '{word}'")
            return
        if info.status == RecordStatus.TRASH_WORD:
            entry.append(TrashWord())
            monitoring.translations_added.labels(disposition="trash").inc()
            logger.info(f"Added trash word '{word}'")
            return

        existing = {record_translation(record) for record in entry}
        pairs = [(translation, False) for translation in info.translations]
        pairs += [(translation, True) for translation in info.learned]
        for translation, learned in pairs:
            if translation == word:
                logger.warning(f"Word '{word}' cannot be its own translation, skipping")
                continue
            if translation in existing:
                logger.warning(f"Word '{word}' already has translation '{translation}', skipping")
                continue
            existing.add(translation)
            entry.append(self._new_record(translation, learned, today))
            self._words.setdefault(translation, []).append(self._new_record(word, learned, today))
            if day_stats is not None:
                day_stats.new_unknown_words_count += 1
            monitoring.translations_added.labels(disposition="learned" if learned else "to_learn").inc()

        if not entry:
            del self._words[word]
            logger.warning(f"Word '{word}' added without translations, ignoring")
            return
        logger.info(
            f"Added word '{word}' with {len(info.translations)} translations to learn "
            f"and {len(info.learned)} learned"
        )

    @staticmethod
    def _new_record(translation: str, learned: bool, today: Day) -> WordRecord:
        if learned:
            return Learned(translation=translation)
        return ToLearn(translation=translation, last_practiced=today)

    def is_fully_learned(self, word: str) -> bool:
        """Check that no record under the word is still being learned.

        An unknown word is reported as an inconsistency and treated as learned,
        since the caller may have raced with a deletion.
        """
        records = self._words.get(word)
        if records is None:
            logger.warning(f"Word '{word}' not found while checking whether it is learned")
            monitoring.inconsistencies.labels(operation="is_fully_learned").inc()
            return True
        return not any(isinstance(record, ToLearn) for record in records)

    def is_due(self, word: str, today: Day, ladder: LearnLadder) -> bool:
        """Check whether any record of the word must be practiced today."""
        return any(
            learning_service.is_due(record, today, ladder)
            for record in self._words.get(word, [])
        )

    def has_hint(self, word: str, ladder: LearnLadder) -> bool:
        """Check whether any record of the word is on a rung that reveals the answer."""
        return any(
            learning_service.has_hint(record, ladder)
            for record in self._words.get(word, [])
        )

    def due_words(self, today: Day, ladder: LearnLadder) -> List[str]:
        """Get the words having at least one due record, in word order."""
        return [word for word in sorted(self._words) if self.is_due(word, today, ladder)]

    def is_new_word(self, word: str, today: Day, ladder: LearnLadder) -> bool:
        """Check whether a due record of the word is still on the first rung."""
        return any(
            isinstance(record, ToLearn)
            and record.ladder_index == 0
            and learning_service.is_due(record, today, ladder)
            for record in self._words.get(word, [])
        )

    def partition_due_words(self, today: Day, ladder: LearnLadder) -> Tuple[List[str], List[str]]:
        """Split due words into (repeat, new) by first exposure."""
        repeat: List[str] = []
        new: List[str] = []
        for word in self.due_words(today, ladder):
            if self.is_new_word(word, today, ladder):
                new.append(word)
            else:
                repeat.append(word)
        return repeat, new

    def plan_for_word(self, word: str, today: Day, ladder: LearnLadder) -> WordPlan:
        """Classify the word's translations into known, to type and to guess."""
        plan = WordPlan()
        for record in self._words.get(word, []):
            if isinstance(record, Learned):
                plan.known.append(record.translation)
            elif isinstance(record, ToLearn):
                if not learning_service.is_due(record, today, ladder):
                    plan.known.append(record.translation)
                elif ladder[record.ladder_index].reveal_prompt:
                    plan.to_type.append(record.translation)
                else:
                    plan.to_guess.append(record.translation)
        return plan

    def overdue_days(self, word: str, today: Day, ladder: LearnLadder) -> int:
        """Largest overdue days across the word's records."""
        return max(
            (learning_service.overdue_days(record, today, ladder) for record in self._words.get(word, [])),
            default=0,
        )

    def remaining_attempts(self, word: str, today: Day, ladder: LearnLadder) -> int:
        """Largest number of correct attempts still needed across the word's due records."""
        return max(
            (learning_service.attempts_remaining(record, today, ladder) for record in self._words.get(word, [])),
            default=0,
        )

    def register_attempt(
        self,
        word: str,
        translation: str,
        correct: bool,
        today: Day,
        ladder: LearnLadder,
        day_stats: Optional[DayStatistics] = None,
    ) -> WordRecord:
        """Register an attempt for the record of ``word`` pointing at ``translation``.

        Raises:
            ValueError: if the word or translation is unknown, or the record is
                not being learned.
        """
        records = self._words.get(word)
        if records is None:
            raise ValueError(f"Word '{word}' not found")
        for position, record in enumerate(records):
            if record_translation(record) == translation:
                records[position] = learning_service.register_attempt(
                    record, correct, today, ladder, day_stats
                )
                logger.debug(f"Registered {'correct' if correct else 'wrong'} attempt for '{word}' -> '{translation}'")
                return records[position]
        raise ValueError(f"Translation '{translation}' not found for word '{word}'")

    def remove(self, word: str) -> bool:
        """Delete a word and every mirrored record pointing back at it."""
        records = self._words.pop(word, None)
        if records is None:
            logger.warning(f"Word '{word}' not found for removal")
            return False

        for translation in {record_translation(record) for record in records} - {None}:
            self._prune_mirror(translation, word)

        monitoring.words_removed.inc()
        logger.info(f"Removed word '{word}'")
        return True

    def _prune_mirror(self, translation: str, word: str) -> None:
        mirrors = self._words.get(translation)
        if mirrors is None:
            return
        mirrors[:] = [record for record in mirrors if record_translation(record) != word]
        if not mirrors:
            del self._words[translation]

    def rename(self, word: str, new_word: str) -> bool:
        """Move a word to a new key and repoint its mirrors.

        Renaming onto an existing word merges the record lists. A translation
        both words point at keeps the existing word's record, the renamed
        word's record and its mirror are dropped. Pairs between the two words
        themselves disappear, since a word cannot translate to itself.
        """
        if word == new_word:
            return True
        records = self._words.pop(word, None)
        if records is None:
            logger.warning(f"Word '{word}' not found for rename")
            return False

        repointed = []
        for translation in {record_translation(record) for record in records} - {None, word}:
            for record in self._words.get(translation, []):
                if record_translation(record) == word:
                    record.translation = new_word
                    repointed.append(record)

        target = self._words.setdefault(new_word, [])
        present = {record_translation(record) for record in target}
        for record in records:
            translation = record_translation(record)
            if translation is None:
                if record not in target:
                    target.append(record)
            elif translation in (word, new_word):
                continue
            elif translation in present:
                logger.warning(f"Word '{new_word}' already has translation '{translation}', dropping the duplicate")
                mirrors = self._words[translation]
                mirrors[:] = [mirror for mirror in mirrors if not any(mirror is item for item in repointed)]
            else:
                present.add(translation)
                target.append(record)

        # Mirrors of the dropped pairs between the two words
        target[:] = [record for record in target if record_translation(record) != new_word]
        if not target:
            del self._words[new_word]

        logger.info(f"Renamed word '{word}' to '{new_word}'")
        return True

    def _record_at(self, word: str, index: int) -> WordRecord:
        records = self._words.get(word)
        if records is None:
            raise ValueError(f"Word '{word}' not found")
        if not 0 <= index < len(records):
            raise ValueError(f"Word '{word}' has no record {index}")
        return records[index]

    def rename_translation(self, word: str, index: int, new_translation: str) -> bool:
        """Rename the translation a record points at, together with that word's own entry."""
        translation = record_translation(self._record_at(word, index))
        if translation is None:
            raise ValueError(f"Record {index} of '{word}' has no translation")
        return self.rename(translation, new_translation)

    def delete_record(self, word: str, index: int) -> None:
        """Delete one record and its mirror, dropping the word once it has no records."""
        record = self._record_at(word, index)
        records = self._words[word]
        del records[index]
        translation = record_translation(record)
        if translation is not None:
            mirrors = self._words.get(translation, [])
            for position, mirror in enumerate(mirrors):
                if record_translation(mirror) == word:
                    del mirrors[position]
                    break
            if translation in self._words and not mirrors:
                del self._words[translation]
        if word in self._words and not records:
            del self._words[word]
        logger.info(f"Deleted record {index} of word '{word}'")

    def edit_record(
        self,
        word: str,
        index: int,
        *,
        stats: Optional[AttemptStats] = None,
        last_practiced: Optional[Day] = None,
        ladder_index: Optional[int] = None,
        rung_progress: Optional[int] = None,
    ) -> WordRecord:
        """Directly adjust a record's stats or ladder position."""
        record = self._record_at(word, index)
        if isinstance(record, (KnownPreviously, TrashWord)):
            raise ValueError(f"Record {index} of '{word}' cannot be edited")
        changes: Dict[str, Any] = {}
        if stats is not None:
            changes["stats"] = stats
        if isinstance(record, ToLearn):
            if last_practiced is not None:
                changes["last_practiced"] = last_practiced
            if ladder_index is not None:
                changes["ladder_index"] = ladder_index
            if rung_progress is not None:
                changes["rung_progress"] = rung_progress
        elif last_practiced is not None or ladder_index is not None or rung_progress is not None:
            raise ValueError(f"Record {index} of '{word}' is learned and has no ladder position")
        edited = replace(record, **changes)
        self._words[word][index] = edited
        return edited

    def force_state(self, word: str, index: int, status: RecordStatus, today: Day) -> WordRecord:
        """Manually switch a record between ToLearn and Learned, keeping translation and stats."""
        record = self._record_at(word, index)
        translation = record_translation(record)
        if translation is None or status not in (RecordStatus.TO_LEARN, RecordStatus.LEARNED):
            raise ValueError(f"Cannot switch record {index} of '{word}' to {status.value}")
        if status == RecordStatus.TO_LEARN:
            forced: WordRecord = ToLearn(translation=translation, last_practiced=today, stats=record.stats)
        else:
            forced = Learned(translation=translation, stats=record.stats)
        self._words[word][index] = forced
        logger.info(f"Record {index} of word '{word}' forced to {status.value}")
        return forced

    def to_data(self) -> Dict[str, List[Dict[str, Any]]]:
        """Convert the store to plain data."""
        return {word: [record_to_data(record) for record in records] for word, records in self.items()}

    @classmethod
    def from_data(cls, data: Dict[str, List[Dict[str, Any]]]) -> "WordStore":
        """Create a store from plain data."""
        return cls({word: [record_from_data(record) for record in records] for word, records in data.items()})
