"""
Data model for mock test sessions.
Questions are immutable once loaded; answer records are mutated only by the session.
"""
from dataclasses import dataclass, asdict
from typing import Dict, Optional, Tuple

from mocktest.errors import MalformedLocalData

OPTION_COUNT = 4
OPTION_COLUMNS = ("option_a", "option_b", "option_c", "option_d")
DIFFICULTIES = ("easy", "medium", "hard")


@dataclass(frozen=True)
class Question:
    id: str
    subject: str
    text: str
    options: Tuple[str, str, str, str]
    correct_answer: int  # 0-based index into options
    difficulty: str
    explanation: Optional[str] = None

    def validate(self) -> "Question":
        """Raise ValueError if the question breaks the bank's constraints."""
        if not self.id:
            raise ValueError("question id is empty")
        if not self.subject:
            raise ValueError(f"question {self.id}: subject is empty")
        if len(self.options) != OPTION_COUNT:
            raise ValueError(f"question {self.id}: expected {OPTION_COUNT} options, got {len(self.options)}")
        if not isinstance(self.correct_answer, int) or not 0 <= self.correct_answer < OPTION_COUNT:
            raise ValueError(f"question {self.id}: correct_answer {self.correct_answer!r} out of range")
        if self.difficulty not in DIFFICULTIES:
            raise ValueError(f"question {self.id}: unknown difficulty {self.difficulty!r}")
        return self

    @classmethod
    def from_row(cls, row: Dict) -> "Question":
        """
        Build a question from a `questions` table row.

        Rows store the four options in option_a..option_d and a 1-based correct_answer.
        Raises ValueError (or KeyError/TypeError) on malformed rows.
        """
        options = tuple(row[col] for col in OPTION_COLUMNS)
        if any(not isinstance(o, str) for o in options):
            raise ValueError(f"question {row.get('id')}: non-text option")
        correct = row["correct_answer"]
        if isinstance(correct, bool) or not isinstance(correct, int):
            raise ValueError(f"question {row.get('id')}: correct_answer must be an integer")
        question = cls(
            id=str(row["id"]),
            subject=row["subject"],
            text=row["question"],
            options=options,
            correct_answer=correct - 1,
            difficulty=row["difficulty"],
            explanation=row.get("explanation"),
        )
        return question.validate()

    def to_dict(self) -> Dict:
        """Session form (0-based correct_answer), as stored in result snapshots next to the answers."""
        data = asdict(self)
        data["options"] = list(self.options)
        return data


@dataclass
class AnswerRecord:
    question_id: str
    selected_answer: Optional[int] = None
    time_spent: float = 0.0
    marked: bool = False

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class Identity:
    """Authenticated user as seen by the engine. Only email is consumed."""
    id: str
    email: str
    name: str = "User"
    picture_url: Optional[str] = None
    is_registered: bool = False


@dataclass(frozen=True)
class SubjectScore:
    correct: int
    total: int
    percentage: int


def validate_fallback(questions) -> list:
    """Validate the built-in question set. Any defect is fatal."""
    seen = set()
    out = []
    for q in questions:
        try:
            q.validate()
        except (ValueError, TypeError, AttributeError) as e:
            raise MalformedLocalData(f"Built-in question set is malformed: {e}") from e
        if q.id in seen:
            raise MalformedLocalData(f"Built-in question set has duplicate id {q.id!r}")
        seen.add(q.id)
        out.append(q)
    if not out:
        raise MalformedLocalData("Built-in question set is empty")
    return out
