"""Tests for the identity cache."""
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import Mock

import pytest

from wordrill.errors import NotFound, StoreError
from wordrill.services.identity_service import IdentityCache
from wordrill.store import DocumentStore, SqlDocumentStore
from wordrill.tests.conftest import add_user


def test_resolve(store: SqlDocumentStore) -> None:
    add_user(store, "user-1", "ada@example.com")
    cache = IdentityCache(store)

    assert cache.resolve("ada@example.com") == "user-1"
    assert len(cache) == 1


def test_resolve_uses_cache() -> None:
    store = Mock(spec=DocumentStore)
    store.query_by_index.return_value = [{"user_id": "user-1", "email": "ada@example.com"}]
    cache = IdentityCache(store, index="email-index")

    assert cache.resolve("ada@example.com") == "user-1"
    assert cache.resolve("ada@example.com") == "user-1"
    store.query_by_index.assert_called_once_with("email-index", "ada@example.com", limit=1)


def test_unknown_email_is_not_cached(store: SqlDocumentStore) -> None:
    cache = IdentityCache(store)

    with pytest.raises(NotFound):
        cache.resolve("ada@example.com")

    # Provisioned after the failed lookup
    add_user(store, "user-1", "ada@example.com")
    assert cache.resolve("ada@example.com") == "user-1"


def test_unknown_email_is_not_logged(store: SqlDocumentStore, caplog) -> None:
    cache = IdentityCache(store)

    with caplog.at_level(logging.DEBUG, logger="wordrill.services.identity_service"):
        with pytest.raises(NotFound) as exc_info:
            cache.resolve("ada@example.com")

    assert "ada@example.com" not in str(exc_info.value)
    assert "ada@example.com" not in caplog.text
    assert not [record for record in caplog.records if record.levelno >= logging.WARNING]


def test_store_error_propagates() -> None:
    store = Mock(spec=DocumentStore)
    store.query_by_index.side_effect = StoreError("timeout")
    cache = IdentityCache(store)

    with pytest.raises(StoreError):
        cache.resolve("ada@example.com")
    assert len(cache) == 0


def test_concurrent_misses_issue_one_query() -> None:
    threads = 8
    barrier = threading.Barrier(threads)

    def slow_query(*args, **kwargs):
        time.sleep(0.05)
        return [{"user_id": "user-1"}]

    store = Mock(spec=DocumentStore)
    store.query_by_index.side_effect = slow_query
    cache = IdentityCache(store)

    def resolve():
        barrier.wait()
        return cache.resolve("ada@example.com")

    with ThreadPoolExecutor(max_workers=threads) as executor:
        results = [future.result() for future in [executor.submit(resolve) for _ in range(threads)]]

    assert results == ["user-1"] * threads
    assert store.query_by_index.call_count == 1
