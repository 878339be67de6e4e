"""Test configuration."""
import os
import random

import pytest

# Set test environment before any imports
os.environ["ENV"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite://")

# Import after environment setup
from learnwords.models.learning_models import LearnRung  # noqa: E402


@pytest.fixture
def ladder() -> list[LearnRung]:
    """Two rungs: two hinted repeats, then three unaided ones, no waiting."""
    return [LearnRung.show(0, 2), LearnRung.guess(0, 3)]


@pytest.fixture
def waiting_ladder() -> list[LearnRung]:
    """A ladder whose second rung waits two days."""
    return [LearnRung.show(0, 1), LearnRung.guess(2, 1)]


@pytest.fixture
def rng() -> random.Random:
    """Seeded shuffle source."""
    return random.Random(42)
