"""Database models for persisting the trainer state."""
from sqlalchemy import (
    Boolean,
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from learnwords.models.base import Base


class LadderRung(Base):
    """One rung of the learn ladder."""

    __tablename__ = "ladder_rungs"

    position = Column(Integer, primary_key=True)
    wait_days = Column(Integer, nullable=False)
    required_count = Column(Integer, nullable=False)
    reveal_prompt = Column(Boolean, nullable=False, default=False)


class WordEntry(Base):
    """A word key of the store."""

    __tablename__ = "words"

    id = Column(Integer, primary_key=True)
    text = Column(String, unique=True, nullable=False)

    # Relationships
    records = relationship(
        "WordRecordRow",
        back_populates="word",
        order_by="WordRecordRow.position",
        cascade="all, delete-orphan",
    )


class WordRecordRow(Base):
    """A learning record of one directional word pair."""

    __tablename__ = "word_records"
    __table_args__ = (UniqueConstraint("word_id", "position"),)

    id = Column(Integer, primary_key=True)
    word_id = Column(Integer, ForeignKey("words.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    status = Column(String, nullable=False)  # RecordStatus value
    translation = Column(String, nullable=True)
    last_practiced = Column(Integer, nullable=True)
    ladder_index = Column(Integer, nullable=True)
    rung_progress = Column(Integer, nullable=True)
    correct = Column(Integer, default=0)
    incorrect = Column(Integer, default=0)

    # Relationships
    word = relationship("WordEntry", back_populates="records")


class DayStatisticsRow(Base):
    """Statistics recorded for one day."""

    __tablename__ = "day_statistics"

    day = Column(Integer, primary_key=True)
    correct = Column(Integer, default=0)
    incorrect = Column(Integer, default=0)
    new_unknown_words_count = Column(Integer, default=0)
    working_time = Column(Float, default=0.0)  # in seconds

    # Relationships
    level_counts = relationship(
        "DayLevelCount",
        back_populates="day_statistics",
        cascade="all, delete-orphan",
    )


class DayLevelCount(Base):
    """Record count of one statistics bucket on one day."""

    __tablename__ = "day_level_counts"

    id = Column(Integer, primary_key=True)
    day = Column(Integer, ForeignKey("day_statistics.day", ondelete="CASCADE"), nullable=False)
    word_type = Column(String, nullable=False)  # e.g. "known", "level:2"
    count = Column(Integer, nullable=False, default=0)

    # Relationships
    day_statistics = relationship("DayStatisticsRow", back_populates="level_counts")
