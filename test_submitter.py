import json

import pytest

from conftest import START
from mocktest.database import DatabaseClient
from mocktest.errors import AuthenticationRequired, PersistenceFailure, SessionError
from mocktest.models import Identity
from mocktest.submitter import ResultSubmitter, build_records


def test_submit_without_identity_leaves_session_untouched(session, db, fake_client):
    session.start()
    session.select_answer(session.questions[0].id, 1)
    with pytest.raises(AuthenticationRequired):
        ResultSubmitter(db).submit(session, None)
    with pytest.raises(AuthenticationRequired):
        ResultSubmitter(db).submit(session, Identity(id="u", email=""))
    assert session.is_active
    assert not session.submitted
    assert fake_client.inserts == []


def test_submit_writes_one_batch_with_a_row_per_subject(session, db, fake_client, identity, later):
    session.start()
    records = ResultSubmitter(db, now=later).submit(session, identity)

    assert len(fake_client.inserts) == 1
    table, rows = fake_client.inserts[0]
    assert table == "test_results"
    assert rows == records

    subjects = {q.subject for q in session.questions}
    assert {r["subject"] for r in records} == subjects
    for r in records:
        assert r["email"] == "student@example.com"
        assert r["test_time"] == START.isoformat()
        assert r["duration_seconds"] == 754
        assert r["score"] == 0

    assert not session.is_active
    assert session.submitted


def test_records_snapshot_only_their_subject(session, identity):
    session.start()
    target = session.questions[0]
    session.select_answer(target.id, target.correct_answer)
    session.mark_for_review(target.id)

    records = build_records(session, identity.email, 30)
    for r in records:
        questions = json.loads(r["questions"])
        answers = json.loads(r["answers"])
        assert len(questions) == len(answers)
        assert all(q["subject"] == r["subject"] for q in questions)
        assert [q["id"] for q in questions] == [a["question_id"] for a in answers]

    mine = next(r for r in records if r["subject"] == target.subject)
    answer = next(a for a in json.loads(mine["answers"]) if a["question_id"] == target.id)
    assert answer["selected_answer"] == target.correct_answer
    assert answer["marked"] is True
    question = next(q for q in json.loads(mine["questions"]) if q["id"] == target.id)
    assert question["correct_answer"] == target.correct_answer
    assert question["options"] == list(target.options)


def test_stored_answers_match_stored_questions(session, db, identity):
    session.start()
    for q in session.questions:
        session.select_answer(q.id, q.correct_answer)
    records = ResultSubmitter(db).submit(session, identity)

    for r in records:
        assert r["score"] == 100
        questions = json.loads(r["questions"])
        answers = json.loads(r["answers"])
        for q, a in zip(questions, answers):
            assert a["selected_answer"] == q["correct_answer"]


def test_time_on_current_question_is_persisted(session, db, clock, identity):
    session.start()
    first = session.questions[0]
    clock.advance(40)
    records = ResultSubmitter(db).submit(session, identity)

    mine = next(r for r in records if r["subject"] == first.subject)
    answer = next(a for a in json.loads(mine["answers"]) if a["question_id"] == first.id)
    assert answer["time_spent"] == 40
    assert session.answer_for(first.id).time_spent == 40


def test_failed_submit_credits_time_once_and_stays_active(session, fake_client, clock, identity):
    fake_client.errors["test_results"] = RuntimeError("down")
    session.start()
    first = session.questions[0].id
    clock.advance(10)
    with pytest.raises(PersistenceFailure):
        ResultSubmitter(DatabaseClient(fake_client)).submit(session, identity)
    assert session.is_active
    assert session.answer_for(first).time_spent == 10

    clock.advance(5)
    session.end()
    assert session.answer_for(first).time_spent == 15


def test_persistence_failure_keeps_session_active(session, fake_client, identity):
    fake_client.errors["test_results"] = RuntimeError("connection reset")
    session.start()
    with pytest.raises(PersistenceFailure) as exc:
        ResultSubmitter(DatabaseClient(fake_client)).submit(session, identity)
    assert isinstance(exc.value.__cause__, RuntimeError)
    assert session.is_active
    assert not session.submitted

    # caller may retry once the store is back
    del fake_client.errors["test_results"]
    ResultSubmitter(DatabaseClient(fake_client)).submit(session, identity)
    assert session.submitted


def test_submit_after_time_up_is_allowed(session, db, identity):
    session.start()
    session.tick(session.time_remaining)
    assert not session.is_active
    records = ResultSubmitter(db).submit(session, identity)
    assert records
    assert session.submitted


def test_cannot_submit_twice_or_before_start(session, db, identity):
    with pytest.raises(SessionError):
        ResultSubmitter(db).submit(session, identity)
    session.start()
    ResultSubmitter(db).submit(session, identity)
    with pytest.raises(SessionError):
        ResultSubmitter(db).submit(session, identity)
