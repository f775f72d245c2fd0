"""
Question source: remote question bank with a built-in fallback set.
Selection = fetch, uniform shuffle, truncate to session size.
"""
import logging
import random
from typing import List, Optional

from mocktest.database import DatabaseClient
from mocktest.errors import QuestionLoadFailure
from mocktest.models import AnswerRecord, Question, validate_fallback

logger = logging.getLogger(__name__)


FALLBACK_QUESTIONS = (
    # Math
    Question("math_1", "Math", "What is 15 × 8?", ("120", "110", "130", "125"), 0, "easy",
             "15 × 8 = 120"),
    Question("math_2", "Math", "Solve for x: 2x + 5 = 17", ("6", "5", "7", "8"), 0, "medium",
             "2x = 17 - 5 = 12, so x = 6"),
    Question("math_3", "Math", "What is the area of a circle with radius 5?", ("25π", "10π", "50π", "15π"), 0, "medium",
             "Area = πr² = π(5)² = 25π"),
    Question("math_4", "Math", "If f(x) = 2x + 3, what is f(4)?", ("11", "10", "12", "9"), 0, "easy",
             "f(4) = 2(4) + 3 = 8 + 3 = 11"),
    # Science
    Question("science_1", "Science", "What is the chemical symbol for gold?", ("Go", "Gd", "Au", "Ag"), 2, "easy",
             "Gold has the chemical symbol Au from the Latin word aurum"),
    Question("science_2", "Science", "Which planet is known as the Red Planet?", ("Venus", "Mars", "Jupiter", "Saturn"), 1, "easy",
             "Mars appears red due to iron oxide (rust) on its surface"),
    Question("science_3", "Science", "What is the atomic number of carbon?", ("6", "12", "8", "14"), 0, "easy",
             "Carbon has six protons"),
    Question("science_4", "Science", "Which gas makes up about 78% of Earth's atmosphere?",
             ("Oxygen", "Nitrogen", "Carbon Dioxide", "Argon"), 1, "medium",
             "Nitrogen makes up about 78% of Earth's atmosphere"),
    # Reasoning
    Question("reasoning_1", "Reasoning", "If all roses are flowers and some flowers are red, then:",
             ("All roses are red", "Some roses are red", "No roses are red", "Cannot be determined"), 3, "medium",
             "We cannot determine the color of roses from the given information"),
    Question("reasoning_2", "Reasoning", "What comes next in the sequence: 2, 6, 12, 20, ?", ("28", "30", "32", "34"), 1, "medium",
             "The differences are 4, 6, 8, so the next difference is 10: 20 + 10 = 30"),
    Question("reasoning_3", "Reasoning", "If A = 1, B = 2, C = 3, what is the value of CAB?", ("312", "321", "123", "132"), 0, "easy",
             "C=3, A=1, B=2, so CAB = 312"),
    Question("reasoning_4", "Reasoning", "If today is Monday, what day will it be 100 days from now?",
             ("Monday", "Tuesday", "Wednesday", "Thursday"), 2, "hard",
             "100 = 14 × 7 + 2, so two days after Monday"),
)


class QuestionSource:
    """Supplies question pools; never raises on remote failure."""

    def __init__(self, db: Optional[DatabaseClient] = None, fallback=FALLBACK_QUESTIONS):
        self.db = db
        self._fallback = fallback

    @property
    def fallback(self) -> List[Question]:
        """Validated built-in set. Raises MalformedLocalData if it is broken."""
        return validate_fallback(self._fallback)

    def _fetch_remote(self, limit: int) -> List[Question]:
        if self.db is None:
            raise QuestionLoadFailure("No question bank configured")
        try:
            rows = self.db.fetch_question_rows(limit)
        except Exception as e:
            raise QuestionLoadFailure(f"Question bank unavailable: {e}") from e
        if not rows:
            raise QuestionLoadFailure("Question bank returned no rows")
        try:
            return [Question.from_row(row) for row in rows[:limit]]
        except (KeyError, TypeError, ValueError) as e:
            raise QuestionLoadFailure(f"Malformed question row: {e}") from e

    def fetch(self, limit: int) -> List[Question]:
        """Up to `limit` remote questions, or the full fallback set when the bank is unusable."""
        try:
            questions = self._fetch_remote(limit)
            logger.info("Loaded %d questions from question bank", len(questions))
            return questions
        except QuestionLoadFailure as e:
            logger.warning("%s; using built-in questions", e)
        return self.fallback

    def select(
        self,
        limit: int,
        session_size: int,
        rng: Optional[random.Random] = None,
        shuffle: bool = True,
        per_subject: Optional[int] = None,
    ) -> List[Question]:
        """
        Fetch a pool, shuffle it uniformly and keep the first `session_size` questions,
        taking at most `per_subject` questions from any one subject.
        """
        pool = list(self.fetch(limit))
        if shuffle:
            # random.shuffle is Fisher-Yates: every permutation equally likely
            (rng or random).shuffle(pool)
        if per_subject is not None:
            taken = {}
            capped = []
            for q in pool:
                if taken.get(q.subject, 0) < per_subject:
                    taken[q.subject] = taken.get(q.subject, 0) + 1
                    capped.append(q)
            pool = capped
        selected = pool[: max(0, min(session_size, len(pool)))]
        logger.info("Selected %d of %d questions", len(selected), len(pool))
        return selected

    def subjects(self) -> List[str]:
        """Names of active subjects; subjects of the built-in set if the table is unavailable."""
        rows = self.db.fetch_subject_rows() if self.db is not None else []
        names = [row["name"] for row in rows if row.get("name")]
        if names:
            return names
        return list(dict.fromkeys(q.subject for q in self.fallback))


def build_answers(questions: List[Question]) -> List[AnswerRecord]:
    """One default answer record per question, same order."""
    return [AnswerRecord(question_id=q.id) for q in questions]
