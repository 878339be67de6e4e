"""Main entry point: print today's practice summary."""
import logging

from learnwords.app import LearnWordsApp, today_from_clock
from learnwords.config import settings
from learnwords.logging_config import setup_logging
from learnwords.models.base import SessionLocal, init_db
from learnwords.monitoring import start_monitoring

logger = logging.getLogger(__name__)


def main() -> None:
    """Load the stored state and report what is due today."""
    setup_logging("Starting learnwords")
    if settings.monitoring.port is not None:
        start_monitoring(settings.monitoring.port)

    init_db()
    db = SessionLocal()
    try:
        app = LearnWordsApp.load(db, today_from_clock())
        summary = app.summary()
        logger.info(f"Day {summary['today']}: {summary['to_repeat']} words to repeat, {summary['to_learn']} new")
        for word_type, count in summary["counts"].items():
            logger.info(f"  {word_type}: {count}")
        logger.info(
            f"Attempts on words being learned: +{summary['attempts']['correct']}, "
            f"-{summary['attempts']['incorrect']}"
        )
        app.save(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
