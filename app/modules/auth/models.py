# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User registration (auth.users table)
# - User login and session management
# - One-time code generation and expiry
# - Password hashing and security

"""
Supabase Auth provides:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.admin.generate_link() - Issue a one-time email code
- auth.verify_otp() - Redeem a one-time email code
- auth.sign_out() - Logout users

The dataclasses below are the shapes this app hands around after a call
to Supabase returns. They are never persisted by this app.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Session:
    access_token: str
    user_id: str
    email: str
    username: Optional[str] = None
    refresh_token: Optional[str] = None
    issued_at: datetime = field(default_factory=_utcnow)
    expires_at: Optional[datetime] = None


@dataclass
class SignUpResult:
    # email as Supabase stored it, which may differ in case from the input
    email: str
    session: Optional[Session] = None


@dataclass
class SendReceipt:
    id: str
    email: str
    sent_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class AuthOptions:
    email_password_enabled: bool = True
    require_email_verification: bool = False
    otp_disable_sign_up: bool = True
    otp_send_on_sign_up: bool = True
