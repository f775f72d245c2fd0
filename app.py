"""Mock test page: start, answer, mark for review, navigate, submit."""
import logging
import sys
import time
from pathlib import Path

# Ensure project root is in path
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import streamlit as st

from db import get_database, get_session_config, get_supabase
from mocktest.errors import AuthenticationRequired, PersistenceFailure
from mocktest.identity import current_identity
from mocktest.question_source import QuestionSource
from mocktest.session import TestSession
from mocktest.submitter import ResultSubmitter

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

OPTION_LABELS = "ABCD"

st.set_page_config(page_title="Mock Test", layout="wide")
st.header("Mock Test")

db = get_database()
identity = current_identity(get_supabase(), db)

if "session" not in st.session_state:
    config = get_session_config(db)
    st.session_state["session"] = TestSession(QuestionSource(db), config)
    st.session_state["last_tick"] = None
    st.session_state["results"] = None
session: TestSession = st.session_state["session"]

# ----- Not started / finished -----
if not session.is_active and not session.questions:
    st.caption(f"{session.config.session_size} questions · {session.config.time_limit_seconds // 60} minutes")
    if st.button("Start exam", type="primary"):
        session.start()
        st.session_state["last_tick"] = time.monotonic()
        st.rerun()
    st.stop()

if session.submitted:
    st.success("Test submitted.")
    for row in st.session_state["results"] or []:
        st.metric(row["subject"], f"{row['score']}%")
    if st.button("Start a new test"):
        del st.session_state["session"]
        st.rerun()
    st.stop()

# ----- Timer: the page is the ticking collaborator -----
# The countdown only advances when the script reruns (any widget interaction),
# so "time up" shows on the first rerun after the limit; submission still works then.
if session.is_active and st.session_state["last_tick"] is not None:
    now = time.monotonic()
    elapsed = int(now - st.session_state["last_tick"])
    if elapsed > 0:
        session.tick(elapsed)
        st.session_state["last_tick"] += elapsed

summary = session.get_session_summary()
m, s = divmod(summary["time_remaining_sec"], 60)
st.sidebar.metric("Time left", f"{m}:{s:02d}")
n = summary["total_questions"]
st.sidebar.progress(summary["questions_answered"] / n if n else 0)
st.sidebar.caption(f"{summary['questions_answered']}/{n} answered · {summary['questions_marked']} marked")

# Question palette
cols = st.sidebar.columns(6)
for i, answer in enumerate(session.answers):
    flag = "★" if answer.marked else ("●" if answer.selected_answer is not None else "○")
    if cols[i % 6].button(f"{i + 1}{flag}", key=f"nav_{i}", disabled=not session.is_active):
        session.navigate_to_question(i)
        st.rerun()

# ----- Current question -----
q = session.current()
if q is None:
    st.warning("No questions are available for this test.")
    st.stop()
answer = session.answer_for(q.id)
st.subheader(f"Question {session.current_question + 1} of {n} · {q.subject} ({q.difficulty})")
st.write(q.text)

choice = st.radio(
    "Choose one:",
    range(len(q.options)),
    format_func=lambda i: f"{OPTION_LABELS[i]}. {q.options[i]}",
    key=f"q_{q.id}",
    index=answer.selected_answer,
    disabled=not session.is_active,
)
if choice is not None and choice != answer.selected_answer:
    session.select_answer(q.id, choice)

if not session.is_active:
    st.warning("Time is up. Submit your answers.")

col1, col2, col3, col4 = st.columns([1, 1, 1, 2])
with col1:
    if st.button("Previous", disabled=not session.is_active):
        session.previous_question()
        st.rerun()
with col2:
    if st.button("Next", disabled=not session.is_active):
        session.next_question()
        st.rerun()
with col3:
    label = "Unmark" if answer.marked else "Mark for review"
    if st.button(label, disabled=not session.is_active or not session.config.allow_review):
        session.mark_for_review(q.id)
        st.rerun()
with col4:
    if st.button("Submit exam", type="primary"):
        try:
            st.session_state["results"] = ResultSubmitter(db).submit(session, identity)
            st.rerun()
        except AuthenticationRequired:
            st.error("Please sign in before submitting.")
        except PersistenceFailure as e:
            st.error(f"Could not save your results, please try again. {e}")
