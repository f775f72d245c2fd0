"""
Test session state machine.
Owns the selected questions, the parallel answer records, the navigation cursor and the countdown.
"""
import logging
import random
import time
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from mocktest.config import SessionConfig
from mocktest.errors import OptionOutOfRange, QuestionIndexOutOfRange
from mocktest.models import AnswerRecord, Question
from mocktest.question_source import QuestionSource, build_answers

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TestSession:
    """
    A single mock test, Inactive -> Active -> Inactive.

    Policies:
    - start() while active discards the running session and starts over.
    - Every other mutation is ignored (and logged) while inactive.
    - navigate_to_question() rejects indices outside the question list.
    - select_answer() rejects option indices outside the question's options.
    - The countdown is driven from outside through tick(); the session ends at zero.
    """

    __test__ = False  # not a pytest class

    def __init__(
        self,
        source: QuestionSource,
        config: Optional[SessionConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = utcnow,
    ):
        self.source = source
        self.config = config or SessionConfig()
        self.rng = rng
        self._clock = clock
        self._now = now

        self.questions: List[Question] = []
        self.answers: List[AnswerRecord] = []
        self.current_question = 0
        self.time_remaining = self.config.time_limit_seconds
        self.is_active = False
        self.start_time: Optional[datetime] = None
        self.submitted = False

        # clock reading when the cursor last landed on a question
        self._entered_at: Optional[float] = None

    # ============= Lifecycle =============

    def start(self) -> List[Question]:
        """Load questions and activate. Returns the selected questions."""
        if self.is_active:
            logger.warning("Starting a new session; discarding %d in-progress answers", len(self.answers))

        questions = self.source.select(
            self.config.fetch_limit,
            self.config.session_size,
            rng=self.rng,
            shuffle=self.config.randomize_questions,
            per_subject=self.config.questions_per_subject,
        )
        self.questions = questions
        self.answers = build_answers(questions)
        self.current_question = 0
        self.time_remaining = self.config.time_limit_seconds
        self.start_time = self._now()
        self.submitted = False
        self.is_active = True
        self._entered_at = self._clock()

        logger.info(
            f"Session started at {self.start_time.isoformat()}: {len(questions)} questions, "
            f"{self.time_remaining}s"
        )
        return questions

    def end(self) -> None:
        """Deactivate. Questions, answers and cursor are kept for inspection."""
        if not self.is_active:
            return
        self._accrue_time()
        self._entered_at = None
        self.is_active = False
        logger.info("Session ended (%d s remaining)", self.time_remaining)

    def checkpoint(self) -> None:
        """Credit time on the current question up to now. Does not change the lifecycle state."""
        if self.is_active:
            self._accrue_time()

    def mark_submitted(self) -> None:
        """Called by the submitter once results are persisted. Terminal for this session."""
        self.end()
        self.submitted = True

    def tick(self, seconds: int = 1) -> None:
        """Timer entry point: count down and end the session at zero."""
        if not self._guard("tick"):
            return
        self.time_remaining = max(0, self.time_remaining - seconds)
        if self.time_remaining == 0:
            logger.info("Time is up")
            self.end()

    # ============= Answers =============

    def select_answer(self, question_id: str, option: int) -> None:
        if not self._guard("select_answer"):
            return
        idx = self._index_of(question_id)
        if idx is None:
            logger.warning(f"Question {question_id} not found in session")
            return
        n_options = len(self.questions[idx].options)
        if isinstance(option, bool) or not isinstance(option, int) or not 0 <= option < n_options:
            raise OptionOutOfRange(f"Option {option!r} out of range for question {question_id} ({n_options} options)")
        self.answers[idx].selected_answer = option
        logger.debug(f"Answer recorded: Q={question_id}, option={option}")

    def mark_for_review(self, question_id: str) -> Optional[bool]:
        """Toggle the review flag. Returns the new flag, or None if nothing changed."""
        if not self._guard("mark_for_review"):
            return None
        if not self.config.allow_review:
            logger.info("Review marking is disabled")
            return None
        idx = self._index_of(question_id)
        if idx is None:
            logger.warning(f"Question {question_id} not found in session")
            return None
        answer = self.answers[idx]
        answer.marked = not answer.marked
        return answer.marked

    # ============= Navigation =============

    def navigate_to_question(self, index: int) -> None:
        if not self._guard("navigate_to_question"):
            return
        if not 0 <= index < len(self.questions):
            raise QuestionIndexOutOfRange(f"Question index {index} outside 0..{len(self.questions) - 1}")
        self._move_to(index)

    def next_question(self) -> None:
        if not self._guard("next_question") or not self.questions:
            return
        self._move_to(min(self.current_question + 1, len(self.questions) - 1))

    def previous_question(self) -> None:
        if not self._guard("previous_question") or not self.questions:
            return
        self._move_to(max(self.current_question - 1, 0))

    # ============= Queries =============

    def current(self) -> Optional[Question]:
        if not self.questions:
            return None
        return self.questions[self.current_question]

    def answer_for(self, question_id: str) -> Optional[AnswerRecord]:
        idx = self._index_of(question_id)
        return None if idx is None else self.answers[idx]

    def elapsed_seconds(self, at: Optional[datetime] = None) -> int:
        """Whole seconds since start; 0 if never started."""
        if self.start_time is None:
            return 0
        delta = (at or self._now()) - self.start_time
        return max(0, int(delta.total_seconds()))

    def get_session_summary(self) -> Dict:
        """Real-time summary for display during the exam."""
        answered = sum(1 for a in self.answers if a.selected_answer is not None)
        return {
            "is_active": self.is_active,
            "current_question": self.current_question + 1,
            "total_questions": len(self.questions),
            "questions_answered": answered,
            "questions_unanswered": len(self.questions) - answered,
            "questions_marked": sum(1 for a in self.answers if a.marked),
            "time_remaining_sec": self.time_remaining,
        }

    # ============= Internals =============

    def _guard(self, op: str) -> bool:
        if not self.is_active:
            logger.warning("%s ignored: session is not active", op)
            return False
        return True

    def _index_of(self, question_id: str) -> Optional[int]:
        return next((i for i, a in enumerate(self.answers) if a.question_id == question_id), None)

    def _accrue_time(self) -> None:
        if self._entered_at is None or not self.answers:
            return
        now = self._clock()
        self.answers[self.current_question].time_spent += max(0.0, now - self._entered_at)
        self._entered_at = now

    def _move_to(self, index: int) -> None:
        self._accrue_time()
        self.current_question = index
