"""Lookup of the words a user struggles with most."""
import logging
from typing import List, Optional

from wordrill.config import settings
from wordrill.models.word_models import WordEntry
from wordrill.services.catalog import WordCatalog
from wordrill.store import DocumentStore

logger = logging.getLogger(__name__)


class PerformanceService:
    """Fetches a user's weakest words via the success ratio index."""

    def __init__(
        self,
        store: DocumentStore,
        catalog: WordCatalog,
        weak_word_share: Optional[float] = None,
        index: Optional[str] = None,
    ):
        self.store = store
        self.catalog = catalog
        self.weak_word_share = settings.selection.weak_word_share if weak_word_share is None else weak_word_share
        self.index = index or settings.store.success_ratio_index

    def weak_word_limit(self, requested: int) -> int:
        """Number of weak words to fetch for a request of ``requested`` words, rounded down."""
        return int(requested * self.weak_word_share)

    def weak_words(self, user_id: str, requested: int) -> List[WordEntry]:
        """Return the user's lowest-ratio words, weakest first.

        Words missing from the catalog are skipped. A user without statistics
        gets an empty list.
        """
        limit = self.weak_word_limit(requested)
        if limit <= 0:
            return []

        records = self.store.query_by_index(self.index, user_id, ascending=True, limit=limit)

        words = []
        for record in records:
            entry = self.catalog.get(record["word"])
            if entry is None:
                logger.debug(f"Skipping word {record['word']!r} of user {user_id}: not in catalog")
                continue
            words.append(entry)
        return words
