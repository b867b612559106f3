"""Recording of per-user word outcomes."""
import logging
from typing import Iterable, Optional

from wordrill.config import settings
from wordrill.models.word_models import WordResult, WordStatisticData
from wordrill.monitoring import outcomes_recorded
from wordrill.store import DocumentStore

logger = logging.getLogger(__name__)


class StatisticsService:
    """Applies attempt outcomes to user/word statistics.

    Counters are incremented by the store in a single atomic update, so
    concurrent submissions for the same user and word never lose an
    increment, and the success ratio always matches the stored counters.
    """

    def __init__(self, store: DocumentStore, table: Optional[str] = None):
        self.store = store
        self.table = table or settings.store.word_statistics_table

    def record_outcome(self, user_id: str, word: str, is_correct: bool) -> None:
        """Count one attempt of ``word`` by ``user_id``; raises StoreError."""
        self.store.atomic_update(
            self.table,
            key={"user_id": user_id, "word": word},
            increments={"attempts": 1, "successes": 1 if is_correct else 0},
            create_defaults={"attempts": 0, "successes": 0},
            ratios={"success_ratio": ("successes", "attempts")},
        )
        outcomes_recorded.labels(correct=str(is_correct).lower()).inc()
        logger.debug(f"Recorded {'correct' if is_correct else 'incorrect'} outcome of {word!r} for user {user_id}")

    def record_results(self, user_id: str, results: Iterable[WordResult]) -> int:
        """Record results in order, stopping at the first store failure."""
        recorded = 0
        for result in results:
            self.record_outcome(user_id, result.word, result.is_correct)
            recorded += 1
        logger.info(f"Recorded {recorded} outcomes for user {user_id}")
        return recorded

    def get_statistic(self, user_id: str, word: str) -> Optional[WordStatisticData]:
        """Get the statistics of one word, or None before its first outcome."""
        record = self.store.get_item(self.table, {"user_id": user_id, "word": word})
        return WordStatisticData.from_record(record) if record is not None else None
