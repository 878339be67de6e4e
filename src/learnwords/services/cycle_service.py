"""Service driving a practice session through the day's working pool."""
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from learnwords import monitoring
from learnwords.config import settings
from learnwords.models.learning_models import Day, DayStatistics, LearnLadder, WordPlan
from learnwords.services.scheduler_service import DueQueues, SchedulerService
from learnwords.services.word_service import WordStore

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """States of a practice session."""
    IDLE = "idle"  # Nothing left to practice today
    CHOOSING = "choosing"  # Due words exist, waiting for batch sizes
    TYPING = "typing"  # A word is presented
    CHECKED = "checked"  # Answers checked, some were wrong


@dataclass
class WordPrompt:
    """One word presented to the learner."""
    word: str
    plan: WordPlan
    attempts_remaining: int

    @property
    def with_hint(self) -> bool:
        return bool(self.plan.to_type)


@dataclass
class TypedAnswer:
    """Outcome of one typed or guessed translation."""
    translation: str
    typed: str
    correct: bool


@dataclass
class WorkingPool:
    """Words selected for today and the shuffled sub-batch being walked."""
    all_words: List[str]
    current_batch: List[str] = field(default_factory=list)


def match_guesses(expected: Sequence[str], typed: Sequence[str]) -> List[TypedAnswer]:
    """Pair guesses with expected translations, exact matches first.

    Guesses equal to a still unmatched expected translation are correct. Every
    other guess is paired with one of the remaining expected translations and
    is wrong, so guessing positions never earns a correct answer.
    """
    if len(expected) != len(typed):
        raise ValueError(f"Expected {len(expected)} guesses, got {len(typed)}")

    remaining = list(expected)
    matched = []
    for guess in typed:
        if guess in remaining:
            remaining.remove(guess)
            matched.append(guess)

    result = []
    for guess in typed:
        if guess in matched:
            matched.remove(guess)
            result.append(TypedAnswer(translation=guess, typed=guess, correct=True))
        else:
            result.append(TypedAnswer(translation=remaining.pop(0), typed=guess, correct=False))
    return result


class CycleService:
    """Walks the learner through the due words of one day.

    Attempts are registered as soon as answers are checked, so abandoning a
    session never loses anything.
    """

    def __init__(
        self,
        words: WordStore,
        ladder: LearnLadder,
        rng: random.Random,
        default_repeat: int = settings.learning.repeat_batch_size,
        default_new: int = settings.learning.new_batch_size,
    ):
        """Initialize the service with the word store, ladder and shuffle source."""
        self.words = words
        self.ladder = ladder
        self.rng = rng
        self.scheduler = SchedulerService(words, ladder)
        self.default_repeat = default_repeat
        self.default_new = default_new

        self.state = SessionState.IDLE
        self.queues = DueQueues()
        self.pool: Optional[WorkingPool] = None
        self.prompt: Optional[WordPrompt] = None
        self.results: List[TypedAnswer] = []
        self.corrections: List[str] = []
        self.today: Optional[Day] = None
        self.day_stats: Optional[DayStatistics] = None

    @property
    def words_remaining(self) -> int:
        """Number of words left in the working pool."""
        return len(self.pool.all_words) if self.pool else 0

    def update(self, today: Day, day_stats: Optional[DayStatistics] = None) -> SessionState:
        """Recompute today's queues and move to the next word if a pool is active."""
        self.today = today
        self.day_stats = day_stats
        self.queues = self.scheduler.due_queues(today)
        self._pick_next()
        return self.state

    def choose(self, n_repeat: Optional[int] = None, n_new: Optional[int] = None) -> SessionState:
        """Select the working pool and present its first word."""
        if self.state != SessionState.CHOOSING:
            raise ValueError(f"Cannot choose words in state {self.state.value}")
        if n_repeat is None:
            n_repeat = self.default_repeat
        if n_new is None:
            n_new = self.default_new

        batch = self.scheduler.build_batch(self.queues, n_repeat, n_new, self.today)
        self.pool = WorkingPool(all_words=batch)
        monitoring.learning_sessions.inc()
        logger.info(f"Session started with {len(batch)} words")
        self._pick_next()
        return self.state

    def _drop(self, word: str) -> None:
        self.pool.all_words = [item for item in self.pool.all_words if item != word]
        self.pool.current_batch = [item for item in self.pool.current_batch if item != word]

    def _pick_next(self) -> None:
        """Present the next word of the pool, or leave the session when it is exhausted."""
        self.prompt = None
        self.results = []
        self.corrections = []
        if self.pool is not None:
            self.pool.all_words = [
                word for word in self.pool.all_words if self.words.is_due(word, self.today, self.ladder)
            ]

        while True:
            if self.pool is not None and not self.pool.all_words and not self.pool.current_batch:
                self.pool = None
            if self.pool is None:
                self.state = SessionState.IDLE if self.queues.is_empty() else SessionState.CHOOSING
                logger.debug(f"No active pool, session is {self.state.value}")
                return

            if not self.pool.current_batch:
                hint_words = [word for word in self.pool.all_words if self.words.has_hint(word, self.ladder)]
                guess_words = [word for word in self.pool.all_words if word not in hint_words]
                self.pool.current_batch = hint_words or guess_words
                self.rng.shuffle(self.pool.current_batch)

            word = self.pool.current_batch.pop(0)
            if self.words.is_fully_learned(word):
                logger.debug(f"Word '{word}' is already learned, dropping it")
                self._drop(word)
                continue

            plan = self.words.plan_for_word(word, self.today, self.ladder)
            if plan.is_empty():
                logger.debug(f"Nothing due for '{word}', dropping it")
                self._drop(word)
                continue

            self.prompt = WordPrompt(
                word=word,
                plan=plan,
                attempts_remaining=self.words.remaining_attempts(word, self.today, self.ladder),
            )
            self.state = SessionState.TYPING
            logger.debug(f"Presenting '{word}': {len(plan.to_type)} to type, {len(plan.to_guess)} to guess")
            return

    def check(self, typed: Sequence[str], guessed: Sequence[str]) -> List[TypedAnswer]:
        """Check the answers for the presented word and register every attempt.

        Args:
            typed: answers for the translations shown as hints, in plan order.
            guessed: answers for the hidden translations, in any order.
        """
        if self.state != SessionState.TYPING:
            raise ValueError(f"Cannot check answers in state {self.state.value}")
        plan = self.prompt.plan
        if len(typed) != len(plan.to_type):
            raise ValueError(f"Expected {len(plan.to_type)} typed answers, got {len(typed)}")

        results = [
            TypedAnswer(translation=expected, typed=answer, correct=answer == expected)
            for expected, answer in zip(plan.to_type, typed)
        ]
        results += match_guesses(plan.to_guess, guessed)

        for answer in results:
            self.words.register_attempt(
                self.prompt.word, answer.translation, answer.correct, self.today, self.ladder, self.day_stats
            )

        if all(answer.correct for answer in results):
            self._pick_next()
        else:
            self.results = results
            self.corrections = ["" for _ in results]
            self.state = SessionState.CHECKED
        return results

    def retype(self, index: int, text: str) -> bool:
        """Let the learner re-type a wrong answer; nothing is registered."""
        if self.state != SessionState.CHECKED:
            raise ValueError(f"Cannot correct answers in state {self.state.value}")
        self.corrections[index] = text
        return text == self.results[index].translation

    def next_word(self) -> SessionState:
        """Confirm the checked answers and move on."""
        if self.state != SessionState.CHECKED:
            raise ValueError(f"Cannot move to the next word in state {self.state.value}")
        self._pick_next()
        return self.state

    def cancel(self) -> SessionState:
        """Abandon the working pool and go back to choosing from fresh queues."""
        logger.info(f"Session cancelled with {self.words_remaining} words remaining")
        self.pool = None
        self.queues = self.scheduler.due_queues(self.today)
        self._pick_next()
        return self.state
