"""Session tunables. Defaults here, overridable from .env and the system_config table."""
import logging
import os
from dataclasses import dataclass, replace
from typing import Dict, List

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Defaults
FETCH_LIMIT = 60  # 20 per subject ideally
SESSION_SIZE = 6  # short demo session
QUESTIONS_PER_SUBJECT = 20
TIME_LIMIT_MINUTES = 60
TIME_LIMIT_SECONDS = TIME_LIMIT_MINUTES * 60


@dataclass(frozen=True)
class SessionConfig:
    fetch_limit: int = FETCH_LIMIT
    session_size: int = SESSION_SIZE
    time_limit_seconds: int = TIME_LIMIT_SECONDS
    questions_per_subject: int = QUESTIONS_PER_SUBJECT
    randomize_questions: bool = True
    allow_review: bool = True

    def with_system_config(self, rows: List[Dict]) -> "SessionConfig":
        """
        Apply rows from the system_config table ({config_key, config_value}).
        Unknown keys are ignored; bad values are logged and skipped.
        """
        changes = {}
        for row in rows:
            key = row.get("config_key")
            value = row.get("config_value")
            try:
                if key == "test_duration_minutes":
                    changes["time_limit_seconds"] = int(value) * 60
                elif key == "questions_per_subject":
                    changes["questions_per_subject"] = int(value)
                elif key == "randomize_questions":
                    changes["randomize_questions"] = _as_bool(value)
                elif key == "allow_review":
                    changes["allow_review"] = _as_bool(value)
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid system_config value %s=%r", key, value)
        return replace(self, **changes)


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"not a boolean: {value!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("%s=%r is not an integer, using %d", name, raw, default)
        return default


def load_config() -> SessionConfig:
    """Read MOCKTEST_* overrides from the environment (.env is loaded first)."""
    load_dotenv()
    return SessionConfig(
        fetch_limit=_env_int("MOCKTEST_FETCH_LIMIT", FETCH_LIMIT),
        session_size=_env_int("MOCKTEST_SESSION_SIZE", SESSION_SIZE),
        time_limit_seconds=_env_int("MOCKTEST_TIME_LIMIT_SECONDS", TIME_LIMIT_SECONDS),
        questions_per_subject=_env_int("MOCKTEST_QUESTIONS_PER_SUBJECT", QUESTIONS_PER_SUBJECT),
    )
