"""Tests for database models and word records."""
import pytest
from faker import Faker
from sqlalchemy.orm import sessionmaker

from wordrill.errors import ValidationError
from wordrill.models.models import User, Word, WordStatistic
from wordrill.models.word_models import WordEntry, WordResult, WordStatisticData

fake = Faker()


def test_word_creation(session_factory: sessionmaker) -> None:
    """Test word creation."""
    with session_factory() as db:
        db.add(Word(word="rhythm", correct="rhythm", incorrect=["rythm"]))
        db.commit()

        word = db.get(Word, "rhythm")
        assert word.correct == "rhythm"
        assert word.incorrect == ["rythm"]


def test_user_creation(session_factory: sessionmaker) -> None:
    """Test user creation."""
    email = fake.email()
    with session_factory() as db:
        user = User(user_id=fake.uuid4(), email=email, name=fake.name())
        db.add(user)
        db.commit()
        db.refresh(user)

        assert user.email == email
        assert user.provider == "google"
        assert user.created_at is not None


def test_word_statistic_defaults(session_factory: sessionmaker) -> None:
    """Test word statistic creation with default counters."""
    with session_factory() as db:
        statistic = WordStatistic(user_id="user-1", word="rhythm")
        db.add(statistic)
        db.commit()
        db.refresh(statistic)

        assert statistic.attempts == 0
        assert statistic.successes == 0
        assert statistic.success_ratio == 0.0


def test_word_entry_round_trip_to_wire_form() -> None:
    entry = WordEntry.from_record({"word": "separate", "correct": "separate", "incorrect": ["seperate", "separete"]})

    assert entry.id == "separate"
    assert entry.incorrect_forms == frozenset({"seperate", "separete"})
    assert entry.to_dict() == {"word": "separate", "correct": "separate", "incorrect": ["separete", "seperate"]}


def test_word_entry_without_incorrect_forms() -> None:
    entry = WordEntry.from_record({"word": "a", "correct": "a", "incorrect": None})
    assert entry.incorrect_forms == frozenset()


def test_word_entry_is_immutable() -> None:
    entry = WordEntry("rhythm", "rhythm", frozenset())
    with pytest.raises(AttributeError):
        entry.correct_form = "rythm"


def test_word_result_from_dict() -> None:
    assert WordResult.from_dict({"word": "rhythm", "isCorrect": True}) == WordResult("rhythm", True)


@pytest.mark.parametrize(
    "data",
    [
        "rhythm",
        {"isCorrect": True},
        {"word": "", "isCorrect": True},
        {"word": "rhythm"},
        {"word": "rhythm", "isCorrect": "true"},
        {"word": "rhythm", "isCorrect": 1},
    ],
)
def test_word_result_rejects_malformed_items(data) -> None:
    with pytest.raises(ValidationError):
        WordResult.from_dict(data)


def test_word_result_list_requires_list() -> None:
    with pytest.raises(ValidationError):
        WordResult.list_from_json({"word": "rhythm", "isCorrect": True})


def test_word_statistic_data_from_record() -> None:
    data = WordStatisticData.from_record(
        {"user_id": "u", "word": "w", "attempts": 4, "successes": 1, "success_ratio": 0.25, "created_at": None}
    )
    assert data == WordStatisticData("u", "w", 4, 1, 0.25)
