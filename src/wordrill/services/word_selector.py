"""Selection of the word batch served to a user."""
import logging
from typing import Iterable, List, Set

from wordrill.errors import ValidationError
from wordrill.models.word_models import WordEntry
from wordrill.monitoring import words_served
from wordrill.services.performance_service import PerformanceService
from wordrill.services.sampler import RandomSampler

logger = logging.getLogger(__name__)


class WordSelector:
    """Blends a user's weak words with random catalog words."""

    def __init__(self, performance_service: PerformanceService, sampler: RandomSampler):
        self.performance_service = performance_service
        self.sampler = sampler

    @staticmethod
    def _append_unique(selected: List[WordEntry], seen: Set[str], words: Iterable[WordEntry]) -> int:
        added = 0
        for word in words:
            if word.id not in seen:
                selected.append(word)
                seen.add(word.id)
                added += 1
        return added

    def select(self, user_id: str, count: int) -> List[WordEntry]:
        """Return up to ``count`` distinct words, weak words first.

        Random catalog words, drawn from those not already selected, fill
        whatever the weak words leave open, so the result only falls short
        of ``count`` when the catalog itself has fewer distinct words.
        """
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise ValidationError(f"Word count must be a positive integer, got {count!r}")

        selected: List[WordEntry] = []
        seen: Set[str] = set()

        weak = self._append_unique(selected, seen, self.performance_service.weak_words(user_id, count))

        random_added = 0
        if len(selected) < count:
            random_added = self._append_unique(
                selected, seen, self.sampler.sample(count - len(selected), exclude=frozenset(seen))
            )

        selected = selected[:count]
        words_served.labels(source="weak").inc(min(weak, len(selected)))
        words_served.labels(source="random").inc(len(selected) - min(weak, len(selected)))
        logger.info(f"Selected {len(selected)} words for user {user_id} ({weak} weak, {random_added} random)")
        return selected
