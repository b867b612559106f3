"""Process-wide catalog of practice words."""
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Iterable, Iterator, Optional, Tuple, Union

from wordrill.config import settings
from wordrill.errors import ColdStartFailure, StoreError
from wordrill.models.word_models import WordEntry
from wordrill.store import DocumentStore

logger = logging.getLogger(__name__)


class WordCatalog(Mapping):
    """Read-only mapping of word id to WordEntry.

    Only ``load`` builds a catalog from the store, and it either returns a
    complete catalog or raises, so a half-built catalog is never visible to
    request handlers. Reads need no locking.
    """

    def __init__(self, words: Union[Mapping, Iterable[Tuple[str, WordEntry]]]):
        self._words = MappingProxyType(dict(words))

    @classmethod
    def load(cls, store: DocumentStore, table: Optional[str] = None) -> "WordCatalog":
        """Scan the words table; raises ColdStartFailure if it is empty or unreachable."""
        table = table or settings.store.words_table
        try:
            records = store.scan_all(table)
        except StoreError as e:
            logger.error(f"Failed to load word catalog from {table}: {e}")
            raise ColdStartFailure(f"Word catalog unavailable: {e}") from e

        if not records:
            logger.error(f"Word catalog table {table} is empty")
            raise ColdStartFailure("Failed to initialize the word catalog, no words available")

        catalog = cls((entry.id, entry) for entry in map(WordEntry.from_record, records))
        logger.info(f"Loaded {len(catalog)} words into the catalog")
        return catalog

    def __getitem__(self, word_id: str) -> WordEntry:
        return self._words[word_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __len__(self) -> int:
        return len(self._words)
