import pytest

from mocktest.models import AnswerRecord, Question, SubjectScore
from mocktest.scoring import percentage, score_by_subject


def q(qid, subject, correct):
    return Question(qid, subject, f"{qid}?", ("a", "b", "c", "d"), correct, "easy")


def test_half_correct_math():
    questions = [q("m1", "Math", 0), q("m2", "Math", 1)]
    answers = [AnswerRecord("m1", selected_answer=0), AnswerRecord("m2", selected_answer=0)]
    assert score_by_subject(questions, answers) == {"Math": SubjectScore(correct=1, total=2, percentage=50)}


def test_only_present_subjects_appear():
    questions = [q("s1", "Science", 2), q("r1", "Reasoning", 3)]
    answers = [AnswerRecord("s1", 2), AnswerRecord("r1", 0)]
    scores = score_by_subject(questions, answers)
    assert set(scores) == {"Science", "Reasoning"}
    assert "Math" not in scores
    assert scores["Science"].percentage == 100
    assert scores["Reasoning"].percentage == 0


def test_unanswered_never_correct():
    questions = [q("m1", "Math", 0)]
    answers = [AnswerRecord("m1", selected_answer=None)]
    assert score_by_subject(questions, answers)["Math"] == SubjectScore(0, 1, 0)


def test_empty_session_scores_nothing():
    assert score_by_subject([], []) == {}


def test_misaligned_sequences_rejected():
    with pytest.raises(ValueError):
        score_by_subject([q("m1", "Math", 0)], [])
    with pytest.raises(ValueError):
        score_by_subject([q("m1", "Math", 0)], [AnswerRecord("m2", 0)])


@pytest.mark.parametrize("correct,total,expected", [
    (1, 3, 33),
    (2, 3, 67),
    (1, 8, 13),  # 12.5 rounds up
    (0, 0, 0),
    (5, 5, 100),
])
def test_percentage_rounding(correct, total, expected):
    assert percentage(correct, total) == expected
