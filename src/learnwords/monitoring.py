"""Monitoring configuration for the vocabulary trainer."""
from prometheus_client import Counter, start_http_server

# Learning metrics
attempts_registered = Counter(
    "learnwords_attempts_total",
    "Total number of practice attempts registered",
    ["result"],
)

records_learned = Counter(
    "learnwords_records_learned_total",
    "Total number of word pairs that reached the end of the ladder",
)

learning_sessions = Counter(
    "learnwords_learning_sessions_total",
    "Total number of practice sessions started",
)

# Word management metrics
translations_added = Counter(
    "learnwords_translations_added_total",
    "Total number of word records added to the store",
    ["disposition"],
)

words_removed = Counter(
    "learnwords_words_removed_total",
    "Total number of words removed from the store",
)

# Error metrics
inconsistencies = Counter(
    "learnwords_inconsistencies_total",
    "Total number of lookups for words no longer present in the store",
    ["operation"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
