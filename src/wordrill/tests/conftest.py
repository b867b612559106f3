"""Test configuration."""
import os
from typing import Generator

import pytest

# Set test environment before any imports
os.environ["ENV"] = "test"

# Import after environment setup
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from wordrill.config import settings
from wordrill.models.base import create_db_engine, init_db
from wordrill.services.catalog import WordCatalog
from wordrill.store import SqlDocumentStore

CATALOG_WORDS = [
    {"word": "accommodate", "correct": "accommodate", "incorrect": ["acommodate", "accomodate"]},
    {"word": "definitely", "correct": "definitely", "incorrect": ["definately", "definitly"]},
    {"word": "necessary", "correct": "necessary", "incorrect": ["neccessary", "necesary"]},
    {"word": "separate", "correct": "separate", "incorrect": ["seperate"]},
    {"word": "rhythm", "correct": "rhythm", "incorrect": ["rythm", "rhythym"]},
]


@pytest.fixture
def engine(tmp_path) -> Generator[Engine, None, None]:
    """Create a fresh on-disk database for each test."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'wordrill_test.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def store(session_factory: sessionmaker) -> SqlDocumentStore:
    """Create a store over the test database."""
    return SqlDocumentStore(session_factory)


@pytest.fixture
def seeded_store(store: SqlDocumentStore) -> SqlDocumentStore:
    """Store whose words table holds CATALOG_WORDS."""
    for word in CATALOG_WORDS:
        store.put_item(settings.store.words_table, word)
    return store


@pytest.fixture
def catalog(seeded_store: SqlDocumentStore) -> WordCatalog:
    """Catalog loaded from the seeded store."""
    return WordCatalog.load(seeded_store)


def add_user(store: SqlDocumentStore, user_id: str, email: str) -> None:
    """Insert a user record."""
    store.put_item(settings.store.users_table, {"user_id": user_id, "email": email, "name": "", "provider": "google"})


def add_statistic(store: SqlDocumentStore, user_id: str, word: str, attempts: int, successes: int) -> None:
    """Insert a statistics record with a consistent ratio."""
    store.put_item(
        settings.store.word_statistics_table,
        {
            "user_id": user_id,
            "word": word,
            "attempts": attempts,
            "successes": successes,
            "success_ratio": successes / attempts,
        },
    )
