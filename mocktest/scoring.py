"""Pure scoring: per-subject correct/total/percentage. No partial credit, no negative marking."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Sequence

from mocktest.models import AnswerRecord, Question, SubjectScore


def percentage(correct: int, total: int) -> int:
    """Whole-number percentage, halves rounded up; 0 when there is nothing to score."""
    if total <= 0:
        return 0
    value = Decimal(100 * correct) / Decimal(total)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def score_by_subject(
    questions: Sequence[Question], answers: Sequence[AnswerRecord]
) -> Dict[str, SubjectScore]:
    """
    Tally answers against questions by subject.

    `answers[i]` must belong to `questions[i]`. Only subjects present in
    `questions` appear in the result, in first-seen order. An unanswered
    question (selected_answer None) is never correct.
    """
    if len(questions) != len(answers):
        raise ValueError(f"{len(answers)} answers for {len(questions)} questions")

    tallies: Dict[str, Dict[str, int]] = {}
    for question, answer in zip(questions, answers):
        if answer.question_id != question.id:
            raise ValueError(f"answer for {answer.question_id} does not match question {question.id}")
        stats = tallies.setdefault(question.subject, {"correct": 0, "total": 0})
        stats["total"] += 1
        if answer.selected_answer is not None and answer.selected_answer == question.correct_answer:
            stats["correct"] += 1

    return {
        subject: SubjectScore(s["correct"], s["total"], percentage(s["correct"], s["total"]))
        for subject, s in tallies.items()
    }
