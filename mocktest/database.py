"""
Database operations for the mock test engine.
Wraps an injected Supabase client: question bank reads, subject/config lookups, result inserts.
"""
import logging
from typing import List, Dict

from supabase import Client

logger = logging.getLogger(__name__)

# PostgREST code for ".single()" matching zero rows
NO_ROWS_CODE = "PGRST116"


class DatabaseClient:
    """Wrapper around a Supabase client with mock-test-specific operations."""

    def __init__(self, client: Client):
        self.client = client

    # ============= Questions =============

    def fetch_question_rows(self, limit: int) -> List[Dict]:
        """
        Fetch up to `limit` rows from the questions table.

        Errors are NOT swallowed here; the question source decides how to recover.
        """
        response = self.client.table("questions").select("*").limit(limit).execute()
        return response.data if response.data else []

    def fetch_subject_rows(self) -> List[Dict]:
        """Active subjects (RLS already hides inactive ones from end users)."""
        try:
            response = self.client.table("subjects").select("*").eq("is_active", True).execute()
            return response.data if response.data else []
        except Exception as e:
            logger.error(f"Error fetching subjects: {e}")
            return []

    # ============= Config =============

    def fetch_system_config(self) -> List[Dict]:
        """Rows of {config_key, config_value} from system_config (extended deployments only)."""
        try:
            response = (
                self.client.table("system_config")
                .select("config_key", "config_value")
                .eq("is_active", True)
                .execute()
            )
            return response.data if response.data else []
        except Exception as e:
            logger.warning(f"system_config unavailable, using defaults: {e}")
            return []

    # ============= Results =============

    def insert_test_results(self, rows: List[Dict]) -> List[Dict]:
        """
        Insert all result rows in a single call.

        Users may insert into test_results but never read it back, so the
        returned data may be empty even on success. Errors propagate.
        """
        logger.info("Inserting %d test_results rows", len(rows))
        response = self.client.table("test_results").insert(rows).execute()
        return response.data or []

    # ============= Registrations =============

    def is_registered(self, email: str) -> bool:
        """True if a registrations row exists for this email."""
        try:
            response = (
                self.client.table("registrations")
                .select("email")
                .eq("email", email)
                .limit(1)
                .execute()
            )
            return bool(response.data)
        except Exception as e:
            if getattr(e, "code", None) != NO_ROWS_CODE:
                logger.error(f"Error checking registration: {e}")
            return False
