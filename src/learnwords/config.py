"""Configuration settings for the vocabulary trainer."""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from learnwords.models.learning_models import LearnRung

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)

# Learning settings
DEFAULT_LADDER = "show:0:2,guess:0:3,guess:2:3,guess:7:2,guess:20:2"
DEFAULT_REPEAT_BATCH_SIZE = 30
DEFAULT_NEW_BATCH_SIZE = 15
MAX_RUNG_VALUE = 255  # wait days and counts are stored as small unsigned ints


def parse_ladder(text: str) -> List[LearnRung]:
    """Parse a ladder description like ``show:0:2,guess:2:3``."""
    ladder = []
    for chunk in text.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        parts = chunk.split(":")
        if len(parts) != 3:
            raise ValueError(f"Invalid ladder rung '{chunk}', expected mode:wait_days:count")
        mode, wait_days, count = parts
        if mode not in ("show", "guess"):
            raise ValueError(f"Invalid ladder mode '{mode}', expected 'show' or 'guess'")
        try:
            rung = LearnRung(
                wait_days=int(wait_days),
                required_count=int(count),
                reveal_prompt=mode == "show",
            )
        except ValueError as e:
            raise ValueError(f"Invalid ladder rung '{chunk}': {e}") from e
        ladder.append(rung)
    return ladder


def get_ladder() -> List[LearnRung]:
    """Get the learn ladder from environment variable."""
    return parse_ladder(os.getenv("LEARN_LADDER", DEFAULT_LADDER))


def get_random_seed() -> Optional[int]:
    """Get the shuffle seed from environment variable."""
    seed = os.getenv("RANDOM_SEED")
    return int(seed) if seed else None


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///learnwords.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class LearningSettings:
    """Learning process settings."""
    ladder: List[LearnRung] = field(default_factory=get_ladder)
    repeat_batch_size: int = int(os.getenv("REPEAT_BATCH_SIZE", str(DEFAULT_REPEAT_BATCH_SIZE)))
    new_batch_size: int = int(os.getenv("NEW_BATCH_SIZE", str(DEFAULT_NEW_BATCH_SIZE)))
    day_hour_offset: float = float(os.getenv("DAY_HOUR_OFFSET", "0"))
    random_seed: Optional[int] = field(default_factory=get_random_seed)
    pause_seconds: float = float(os.getenv("PAUSE_SECONDS", "15"))


@dataclass
class MonitoringSettings:
    """Metrics exporter settings."""
    port: Optional[int] = int(os.getenv("METRICS_PORT")) if os.getenv("METRICS_PORT") else None


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_learning_settings() -> LearningSettings:
    """Get learning settings."""
    return LearningSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    learning: LearningSettings = field(default_factory=get_learning_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if not self.learning.ladder:
            raise ValueError("LEARN_LADDER must contain at least one rung")

        for position, rung in enumerate(self.learning.ladder):
            if rung.required_count < 1:
                raise ValueError(f"Rung {position}: required count must be positive")
            if not 0 <= rung.wait_days <= MAX_RUNG_VALUE:
                raise ValueError(f"Rung {position}: wait days must be between 0 and {MAX_RUNG_VALUE}")
            if rung.required_count > MAX_RUNG_VALUE:
                raise ValueError(f"Rung {position}: required count must not exceed {MAX_RUNG_VALUE}")

        if self.learning.repeat_batch_size < 0 or self.learning.new_batch_size < 0:
            raise ValueError("REPEAT_BATCH_SIZE and NEW_BATCH_SIZE must not be negative")

        if self.learning.pause_seconds <= 0:
            raise ValueError("PAUSE_SECONDS must be positive")


# Create global settings instance
settings = Settings()
settings.validate()
