"""Tests for the reservoir sampler."""
import random
from collections import Counter

import pytest

from wordrill.models.word_models import WordEntry
from wordrill.services.catalog import WordCatalog
from wordrill.services.sampler import RandomSampler


def _catalog(size: int) -> WordCatalog:
    return WordCatalog((f"word-{i}", WordEntry(f"word-{i}", f"word-{i}", frozenset())) for i in range(size))


@pytest.mark.parametrize("n, size, expected", [(1, 10, 1), (3, 10, 3), (10, 10, 10), (15, 10, 10), (4, 1, 1)])
def test_sample_size_and_distinct(n: int, size: int, expected: int) -> None:
    sampler = RandomSampler(_catalog(size), rng=random.Random(7))

    words = sampler.sample(n)

    assert len(words) == expected
    assert len({word.id for word in words}) == expected


def test_sample_zero() -> None:
    assert RandomSampler(_catalog(5)).sample(0) == []


def test_sample_is_uniform() -> None:
    size, n, trials = 10, 3, 3000
    sampler = RandomSampler(_catalog(size), rng=random.Random(1234))

    counts = Counter(word.id for _ in range(trials) for word in sampler.sample(n))

    assert set(counts) == {f"word-{i}" for i in range(size)}
    for count in counts.values():
        assert count / trials == pytest.approx(n / size, abs=0.05)


def test_default_random_source_is_shared() -> None:
    catalog = _catalog(3)
    assert RandomSampler(catalog).rng is RandomSampler(catalog).rng


def test_sample_skips_excluded_words() -> None:
    sampler = RandomSampler(_catalog(5), rng=random.Random(3))
    excluded = frozenset({"word-1", "word-3"})

    for _ in range(50):
        words = {word.id for word in sampler.sample(3, exclude=excluded)}
        assert words == {"word-0", "word-2", "word-4"}


def test_sample_with_exclusions_stays_uniform() -> None:
    trials = 3000
    sampler = RandomSampler(_catalog(6), rng=random.Random(99))

    counts = Counter(word.id for _ in range(trials) for word in sampler.sample(2, exclude={"word-0", "word-1"}))

    assert set(counts) == {"word-2", "word-3", "word-4", "word-5"}
    for count in counts.values():
        assert count / trials == pytest.approx(0.5, abs=0.05)
