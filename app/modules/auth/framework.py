"""
Boundary to Supabase Auth.

Every call either returns a Session / code or raises AuthError carrying
the message Supabase gave back, so nothing above this layer needs to
know about supabase-py response shapes.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from app.database.supabase_client import SupabaseClients
from app.modules.auth.errors import AuthError
from app.modules.auth.models import Session, SignUpResult

logger = logging.getLogger(__name__)


def _error_message(exc: Exception) -> Optional[str]:
    return getattr(exc, "message", None) or str(exc) or None


def _to_session(auth_response, fallback_email: str) -> Optional[Session]:
    user = auth_response.user
    session = auth_response.session
    if not user or not session:
        return None
    metadata = user.user_metadata or {}
    expires_at = None
    if getattr(session, "expires_at", None):
        expires_at = datetime.fromtimestamp(session.expires_at, tz=timezone.utc)
    return Session(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        user_id=user.id,
        email=user.email or fallback_email,
        username=metadata.get("username"),
        expires_at=expires_at,
    )


class SupabaseAuthFramework:
    def __init__(self, clients: SupabaseClients):
        self.clients = clients

    @property
    def auth(self):
        return self.clients.client.auth

    def sign_in_with_email_password(self, email: str, password: str) -> Session:
        try:
            auth_response = self.auth.sign_in_with_password({
                "email": email,
                "password": password
            })
        except Exception as e:
            logger.info(f"Sign-in rejected for {email}: {e}")
            raise AuthError(_error_message(e)) from e

        session = _to_session(auth_response, email)
        if session is None:
            raise AuthError("Invalid credentials")
        return session

    def sign_up_with_email_password(
        self, email: str, password: str, username: str, auto_sign_in: bool = True
    ) -> SignUpResult:
        """Create the account. The result carries the stored email and,
        when one is available, a session.

        Supabase withholds the session when its own email confirmation is on;
        with auto_sign_in we then sign in directly.
        """
        try:
            auth_response = self.auth.sign_up({
                "email": email,
                "password": password,
                "options": {
                    "data": {"username": username}
                }
            })
        except Exception as e:
            logger.info(f"Sign-up rejected for {email}: {e}")
            raise AuthError(_error_message(e)) from e

        if not auth_response.user:
            raise AuthError("Failed to register user")

        stored_email = auth_response.user.email or email
        session = _to_session(auth_response, stored_email)
        if session is None and auto_sign_in:
            session = self.sign_in_with_email_password(stored_email, password)
        if session is not None and session.username is None:
            session.username = username
        return SignUpResult(email=stored_email, session=session)

    def generate_email_otp(self, email: str) -> str:
        """Ask Supabase to mint a one-time code for email without sending it"""
        try:
            response = self.clients.admin.auth.admin.generate_link({
                "type": "magiclink",
                "email": email,
            })
        except Exception as e:
            logger.error(f"Failed to generate verification code for {email}: {e}")
            raise AuthError(_error_message(e)) from e
        return response.properties.email_otp

    def verify_email_otp(self, email: str, otp: str) -> Session:
        try:
            auth_response = self.auth.verify_otp({
                "email": email,
                "token": otp,
                "type": "email",
            })
        except Exception as e:
            raise AuthError(_error_message(e)) from e

        session = _to_session(auth_response, email)
        if session is None:
            raise AuthError("Invalid or expired verification code")
        return session

    def sign_out(self) -> bool:
        # Supabase tokens are stateless JWTs; this only clears the client session
        try:
            self.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign-out failed: {e}")
            return False
