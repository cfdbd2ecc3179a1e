import logging
from supabase import Client
from typing import Optional

from app.modules.auth.errors import CredentialStoreError

logger = logging.getLogger(__name__)


class UserService:
    """Read-only lookups against the user_profiles table."""

    TABLE = "user_profiles"

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _find_one(self, column: str, value: str, fields: str = "id"):
        try:
            result = self.supabase.table(self.TABLE)\
                .select(fields)\
                .eq(column, value)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error looking up user by {column}: {e}")
            raise CredentialStoreError() from e
        return result.data[0] if result.data else None

    def is_registered(self, email: str) -> bool:
        """True if an account with exactly this email exists"""
        return self._find_one("email", email) is not None

    def is_username_taken(self, username: str) -> bool:
        return self._find_one("username", username) is not None

    def get_email_by_username(self, username: str) -> Optional[str]:
        row = self._find_one("username", username, fields="email")
        if row is None:
            return None
        return row.get("email")
