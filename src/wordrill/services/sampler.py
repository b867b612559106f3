"""Uniform random sampling from the word catalog."""
import random
from typing import AbstractSet, List, Optional

from wordrill.models.word_models import WordEntry
from wordrill.services.catalog import WordCatalog

# Seeded once per process so rapid requests do not draw correlated samples
_process_random = random.Random()


class RandomSampler:
    """Draws words uniformly without replacement by reservoir sampling."""

    def __init__(self, catalog: WordCatalog, rng: Optional[random.Random] = None):
        self.catalog = catalog
        self.rng = rng or _process_random

    def sample(self, n: int, exclude: AbstractSet[str] = frozenset()) -> List[WordEntry]:
        """Return up to ``n`` distinct words in a single pass.

        Words whose ids are in ``exclude`` are skipped, so only the remaining
        words count towards ``n``.
        """
        reservoir: List[WordEntry] = []
        if n <= 0:
            return reservoir

        candidates = (word for word in self.catalog.values() if word.id not in exclude)
        for i, word in enumerate(candidates):
            if i < n:
                reservoir.append(word)
            else:
                r = self.rng.randint(0, i)
                if r < n:
                    reservoir[r] = word
        return reservoir
