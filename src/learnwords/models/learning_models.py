"""Value types for the learning core: days, ladder rungs, records and statistics."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NewType, Optional, Sequence, Union

# Whole days since the epoch, the only time unit the scheduler understands.
Day = NewType("Day", int)

SECONDS_PER_HOUR = 60 * 60


def current_day(timestamp: float, hour_offset: float = 0.0) -> Day:
    """Convert a unix timestamp to a Day, shifting the day boundary by ``hour_offset`` hours."""
    return Day(int((timestamp / SECONDS_PER_HOUR + hour_offset) // 24))


@dataclass(frozen=True)
class LearnRung:
    """One step of the learn ladder."""
    wait_days: int
    required_count: int
    reveal_prompt: bool

    @classmethod
    def show(cls, wait_days: int, required_count: int) -> "LearnRung":
        """Rung where the correct answer is shown while typing."""
        return cls(wait_days, required_count, True)

    @classmethod
    def guess(cls, wait_days: int, required_count: int) -> "LearnRung":
        """Rung where the answer must be recalled unaided."""
        return cls(wait_days, required_count, False)

    def is_open(self, last_practiced: Day, today: Day) -> bool:
        """Check whether the waiting period since ``last_practiced`` has elapsed."""
        if today < last_practiced:
            return False
        return today - last_practiced >= self.wait_days

    def to_data(self) -> Dict[str, Any]:
        return {
            "wait_days": self.wait_days,
            "required_count": self.required_count,
            "reveal_prompt": self.reveal_prompt,
        }

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "LearnRung":
        return cls(int(data["wait_days"]), int(data["required_count"]), bool(data["reveal_prompt"]))


LearnLadder = Sequence[LearnRung]


@dataclass
class AttemptStats:
    """Correct and incorrect attempt counters."""
    correct: int = 0
    incorrect: int = 0

    def record(self, correct: bool) -> None:
        if correct:
            self.correct += 1
        else:
            self.incorrect += 1

    def to_data(self) -> Dict[str, int]:
        return {"correct": self.correct, "incorrect": self.incorrect}

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "AttemptStats":
        return cls(int(data.get("correct", 0)), int(data.get("incorrect", 0)))


class RecordStatus(Enum):
    """Lifecycle states of one directional word->translation pair."""
    KNOWN_PREVIOUSLY = "known_previously"
    TRASH_WORD = "trash_word"
    TO_LEARN = "to_learn"
    LEARNED = "learned"


@dataclass(frozen=True)
class KnownPreviously:
    """The word was known before, nothing to learn."""
    status = RecordStatus.KNOWN_PREVIOUSLY


@dataclass(frozen=True)
class TrashWord:
    """Noise entry left over from approximate text parsing."""
    status = RecordStatus.TRASH_WORD


@dataclass
class ToLearn:
    """A pair that is being learned."""
    translation: str
    last_practiced: Day
    ladder_index: int = 0
    rung_progress: int = 0
    stats: AttemptStats = field(default_factory=AttemptStats)
    status = RecordStatus.TO_LEARN


@dataclass
class Learned:
    """A pair that went through the whole ladder."""
    translation: str
    stats: AttemptStats = field(default_factory=AttemptStats)
    status = RecordStatus.LEARNED


WordRecord = Union[KnownPreviously, TrashWord, ToLearn, Learned]


def record_translation(record: WordRecord) -> Optional[str]:
    """Get the translation a record points at, if it has one."""
    if isinstance(record, (ToLearn, Learned)):
        return record.translation
    return None


def record_to_data(record: WordRecord) -> Dict[str, Any]:
    """Convert a record to a plain dictionary."""
    data: Dict[str, Any] = {"status": record.status.value}
    if isinstance(record, ToLearn):
        data.update(
            translation=record.translation,
            last_practiced=int(record.last_practiced),
            ladder_index=record.ladder_index,
            rung_progress=record.rung_progress,
            stats=record.stats.to_data(),
        )
    elif isinstance(record, Learned):
        data.update(translation=record.translation, stats=record.stats.to_data())
    return data


def record_from_data(data: Dict[str, Any]) -> WordRecord:
    """Create a record from a plain dictionary."""
    status = RecordStatus(data["status"])
    if status == RecordStatus.KNOWN_PREVIOUSLY:
        return KnownPreviously()
    if status == RecordStatus.TRASH_WORD:
        return TrashWord()
    stats = AttemptStats.from_data(data.get("stats", {}))
    if status == RecordStatus.LEARNED:
        return Learned(translation=data["translation"], stats=stats)
    return ToLearn(
        translation=data["translation"],
        last_practiced=Day(int(data["last_practiced"])),
        ladder_index=int(data["ladder_index"]),
        rung_progress=int(data["rung_progress"]),
        stats=stats,
    )


@dataclass
class WordsToAdd:
    """How a new word enters the store."""
    status: RecordStatus
    translations: List[str] = field(default_factory=list)
    learned: List[str] = field(default_factory=list)

    @classmethod
    def known_previously(cls) -> "WordsToAdd":
        return cls(RecordStatus.KNOWN_PREVIOUSLY)

    @classmethod
    def trash_word(cls) -> "WordsToAdd":
        return cls(RecordStatus.TRASH_WORD)

    @classmethod
    def to_learn(cls, translations: Sequence[str], learned: Sequence[str] = ()) -> "WordsToAdd":
        return cls(RecordStatus.TO_LEARN, list(translations), list(learned))


@dataclass
class WordPlan:
    """What has to be typed or guessed for one word today."""
    known: List[str] = field(default_factory=list)
    to_type: List[str] = field(default_factory=list)
    to_guess: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.to_type and not self.to_guess


class WordKind(Enum):
    """Record categories used in the statistics."""
    KNOWN = "known"
    TRASH = "trash"
    LEVEL = "level"
    LEARNED = "learned"


_KIND_ORDER = {WordKind.KNOWN: 0, WordKind.TRASH: 1, WordKind.LEVEL: 2, WordKind.LEARNED: 3}


@dataclass(frozen=True)
class WordType:
    """Statistics bucket: Known, Trash, Level(n) or Learned."""
    kind: WordKind
    level: int = 0

    @classmethod
    def known(cls) -> "WordType":
        return cls(WordKind.KNOWN)

    @classmethod
    def trash(cls) -> "WordType":
        return cls(WordKind.TRASH)

    @classmethod
    def at_level(cls, level: int) -> "WordType":
        return cls(WordKind.LEVEL, level)

    @classmethod
    def learned(cls) -> "WordType":
        return cls(WordKind.LEARNED)

    def sort_key(self) -> tuple:
        return (_KIND_ORDER[self.kind], self.level)

    def to_key(self) -> str:
        if self.kind == WordKind.LEVEL:
            return f"level:{self.level}"
        return self.kind.value

    @classmethod
    def from_key(cls, key: str) -> "WordType":
        if key.startswith("level:"):
            return cls.at_level(int(key.split(":", 1)[1]))
        return cls(WordKind(key))


@dataclass
class DayStatistics:
    """Everything recorded for one day."""
    attempts: AttemptStats = field(default_factory=AttemptStats)
    new_unknown_words_count: int = 0
    word_count_by_level: Dict[WordType, int] = field(default_factory=dict)
    working_time: float = 0.0

    def to_data(self) -> Dict[str, Any]:
        return {
            "attempts": self.attempts.to_data(),
            "new_unknown_words_count": self.new_unknown_words_count,
            "word_count_by_level": {
                word_type.to_key(): count for word_type, count in self.word_count_by_level.items()
            },
            "working_time": self.working_time,
        }

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "DayStatistics":
        return cls(
            attempts=AttemptStats.from_data(data.get("attempts", {})),
            new_unknown_words_count=int(data.get("new_unknown_words_count", 0)),
            word_count_by_level={
                WordType.from_key(key): int(count)
                for key, count in data.get("word_count_by_level", {}).items()
            },
            working_time=float(data.get("working_time", 0.0)),
        )


@dataclass
class Statistics:
    """Per-day statistics history."""
    by_day: Dict[Day, DayStatistics] = field(default_factory=dict)

    def day(self, today: Day) -> DayStatistics:
        """Get the statistics entry for ``today``, creating it if needed."""
        if today not in self.by_day:
            self.by_day[today] = DayStatistics()
        return self.by_day[today]

    def to_data(self) -> Dict[str, Any]:
        return {str(day): stats.to_data() for day, stats in sorted(self.by_day.items())}

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "Statistics":
        return cls({Day(int(day)): DayStatistics.from_data(stats) for day, stats in data.items()})
