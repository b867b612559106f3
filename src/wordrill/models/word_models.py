"""Models for word-related data structures."""
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Mapping

from wordrill.errors import ValidationError


@dataclass(frozen=True)
class WordEntry:
    """Catalog word; immutable once loaded."""
    id: str
    correct_form: str
    incorrect_forms: FrozenSet[str]

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "WordEntry":
        """Build an entry from a words table record."""
        return cls(
            id=record["word"],
            correct_form=record["correct"],
            incorrect_forms=frozenset(record.get("incorrect") or ()),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Wire form served to clients."""
        return {
            "word": self.id,
            "correct": self.correct_form,
            "incorrect": sorted(self.incorrect_forms),
        }


@dataclass(frozen=True)
class WordResult:
    """One submitted attempt outcome."""
    word: str
    is_correct: bool

    @classmethod
    def from_dict(cls, data: Any) -> "WordResult":
        """Parse a ``{word, isCorrect}`` object, rejecting anything else."""
        if not isinstance(data, dict):
            raise ValidationError(f"Expected an object, got {type(data).__name__}")
        word = data.get("word")
        is_correct = data.get("isCorrect")
        if not isinstance(word, str) or not word:
            raise ValidationError("'word' must be a non-empty string")
        if not isinstance(is_correct, bool):
            raise ValidationError("'isCorrect' must be a boolean")
        return cls(word=word, is_correct=is_correct)

    @classmethod
    def list_from_json(cls, data: Any) -> List["WordResult"]:
        """Parse a decoded request body into results."""
        if not isinstance(data, list):
            raise ValidationError("Request body must be a list of word results")
        return [cls.from_dict(item) for item in data]


@dataclass
class WordStatisticData:
    """Read model of a user's statistics for one word."""
    user_id: str
    word: str
    attempts: int
    successes: int
    success_ratio: float

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "WordStatisticData":
        return cls(
            user_id=record["user_id"],
            word=record["word"],
            attempts=record["attempts"],
            successes=record["successes"],
            success_ratio=record["success_ratio"],
        )
