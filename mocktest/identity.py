"""Map Supabase auth users to engine identities."""
import logging
from typing import Optional

from supabase import Client

from mocktest.database import DatabaseClient
from mocktest.models import Identity

logger = logging.getLogger(__name__)


def identity_from_auth_user(user, is_registered: bool = False) -> Identity:
    """Build an Identity from a Supabase auth user (OAuth metadata: full_name/name, avatar_url/picture)."""
    meta = getattr(user, "user_metadata", None) or {}
    return Identity(
        id=str(user.id),
        email=user.email or "",
        name=meta.get("full_name") or meta.get("name") or "User",
        picture_url=meta.get("avatar_url") or meta.get("picture"),
        is_registered=is_registered,
    )


def current_identity(client: Client, db: Optional[DatabaseClient] = None) -> Optional[Identity]:
    """Identity of the signed-in user, or None. Registration status is looked up when `db` is given."""
    try:
        session = client.auth.get_session()
    except Exception as e:
        logger.error(f"Error reading auth session: {e}")
        return None
    if session is None or session.user is None:
        return None
    user = session.user
    registered = bool(user.email) and db is not None and db.is_registered(user.email)
    return identity_from_auth_user(user, is_registered=registered)
