"""Service for ranking due words and assembling the day's practice batch."""
import logging
from dataclasses import dataclass, field
from typing import List, Set

from learnwords.models.learning_models import Day, LearnLadder, ToLearn
from learnwords.services import learning_service
from learnwords.services.word_service import WordStore

logger = logging.getLogger(__name__)


@dataclass
class RankedWord:
    """A due word with its overdue days."""
    word: str
    overdue: int


@dataclass
class DueQueues:
    """Due words split into repeat and new, most overdue first."""
    repeat: List[RankedWord] = field(default_factory=list)
    new: List[RankedWord] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.repeat and not self.new

    def discard(self, word: str) -> None:
        """Remove a word from both queues."""
        self.repeat = [ranked for ranked in self.repeat if ranked.word != word]
        self.new = [ranked for ranked in self.new if ranked.word != word]


class SchedulerService:
    """Pure queries over the word store used to build practice batches."""

    def __init__(self, words: WordStore, ladder: LearnLadder):
        """Initialize the service with the word store and the learn ladder."""
        self.words = words
        self.ladder = ladder

    def _rank(self, words: List[str], today: Day) -> List[RankedWord]:
        ranked = [RankedWord(word, self.words.overdue_days(word, today, self.ladder)) for word in words]
        # Stable sort keeps word order among equally overdue words
        ranked.sort(key=lambda item: item.overdue, reverse=True)
        return ranked

    def due_queues(self, today: Day) -> DueQueues:
        """Get today's repeat and new queues."""
        repeat, new = self.words.partition_due_words(today, self.ladder)
        queues = DueQueues(repeat=self._rank(repeat, today), new=self._rank(new, today))
        logger.debug(f"Due today: {len(queues.repeat)} to repeat, {len(queues.new)} new")
        return queues

    def linked_due_words(self, word: str, today: Day) -> List[str]:
        """Get the word itself followed by its directly linked translations that are due."""
        linked = [word]
        for record in self.words.records(word):
            if (
                isinstance(record, ToLearn)
                and learning_service.is_due(record, today, self.ladder)
                and record.translation not in linked
            ):
                linked.append(record.translation)
        return linked

    def build_batch(self, queues: DueQueues, n_repeat: int, n_new: int, today: Day) -> List[str]:
        """Pull words off the queues into a working pool.

        Repeat words are pulled until ``n_repeat`` words are selected, then new
        words until ``n_new`` more are selected. Every pulled word brings along
        its due translations, which are removed from both queues. Linked words
        pulled by repeat picks count toward ``n_repeat``, and ``n_new`` is
        counted on top of everything the repeat pass selected. Asking for
        the full size of a queue takes all of it. The queues are consumed.
        """
        all_repeat = len(queues.repeat)
        all_new = len(queues.new)
        batch: Set[str] = set()

        while queues.repeat and (n_repeat >= all_repeat or len(batch) < n_repeat):
            for word in self.linked_due_words(queues.repeat[0].word, today):
                queues.discard(word)
                batch.add(word)

        selected_repeat = len(batch)
        while queues.new and (n_new >= all_new or len(batch) < selected_repeat + n_new):
            for word in self.linked_due_words(queues.new[0].word, today):
                queues.discard(word)
                batch.add(word)

        logger.info(f"Batch built with {len(batch)} words ({selected_repeat} from the repeat queue)")
        return sorted(batch)
