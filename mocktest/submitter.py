"""
Result submission: score the session, build one test_results row per subject, insert them in one batch.
"""
import json
import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from mocktest.database import DatabaseClient
from mocktest.errors import AuthenticationRequired, PersistenceFailure, SessionError
from mocktest.models import Identity
from mocktest.scoring import score_by_subject
from mocktest.session import TestSession, utcnow

logger = logging.getLogger(__name__)


def build_records(session: TestSession, email: str, duration_seconds: int) -> List[Dict]:
    """
    One test_results row per subject present in the session.

    Each row snapshots exactly that subject's questions and answer records,
    serialized as JSON text.
    """
    scores = score_by_subject(session.questions, session.answers)
    test_time = session.start_time.isoformat() if session.start_time else None

    records = []
    for subject, score in scores.items():
        pairs = [(q, a) for q, a in zip(session.questions, session.answers) if q.subject == subject]
        records.append({
            "email": email,
            "test_time": test_time,
            "subject": subject,
            "questions": json.dumps([q.to_dict() for q, _ in pairs]),
            "answers": json.dumps([a.to_dict() for _, a in pairs]),
            "score": score.percentage,
            "duration_seconds": duration_seconds,
        })
    return records


class ResultSubmitter:
    """Persists a finished session's per-subject results."""

    def __init__(self, db: DatabaseClient, now: Callable[[], datetime] = utcnow):
        self.db = db
        self._now = now

    def submit(self, session: TestSession, identity: Optional[Identity]) -> List[Dict]:
        """
        Score and persist `session` for `identity`.

        Raises AuthenticationRequired without an identity/email, SessionError if
        the session was never started or is already submitted, and
        PersistenceFailure if the insert fails. The session is left untouched on
        every failure; on success it is ended and marked submitted.
        """
        if identity is None or not identity.email:
            raise AuthenticationRequired("User not authenticated")
        if session.start_time is None:
            raise SessionError("Session was never started")
        if session.submitted:
            raise SessionError("Session already submitted")

        duration = session.elapsed_seconds(self._now())
        session.checkpoint()
        records = build_records(session, identity.email, duration)

        try:
            self.db.insert_test_results(records)
        except Exception as e:
            logger.error(f"Error submitting test: {e}")
            raise PersistenceFailure(f"Could not save test results: {e}") from e

        session.mark_submitted()
        logger.info(
            "Submitted %d subject results for %s in %ds",
            len(records), identity.email, duration,
        )
        return records
