"""
Explicit construction of the auth object graph.

Built once per application (see app.main.create_app) and stored on
app.state; request handlers reach it through app.core.dependencies.
"""
from dataclasses import dataclass

from app.config import Settings
from app.database.supabase_client import create_supabase_clients
from app.modules.auth.framework import SupabaseAuthFramework
from app.modules.auth.models import AuthOptions
from app.modules.auth.service import AuthService
from app.modules.auth.verification import VerificationCodeDispatcher
from app.modules.email.provider import ResendEmailProvider
from app.modules.users.service import UserService


@dataclass
class AuthComponents:
    auth_service: AuthService
    user_service: UserService
    dispatcher: VerificationCodeDispatcher


def auth_options_from_settings(settings: Settings) -> AuthOptions:
    return AuthOptions(
        email_password_enabled=settings.email_password_enabled,
        require_email_verification=settings.require_email_verification,
        otp_disable_sign_up=settings.otp_disable_sign_up,
        otp_send_on_sign_up=settings.otp_send_on_sign_up,
    )


def build_auth_components(settings: Settings) -> AuthComponents:
    clients = create_supabase_clients(settings)
    # Lookups go through the service client so RLS never hides a registered row
    users = UserService(clients.admin)
    provider = ResendEmailProvider(settings.resend_api_key, default_sender=settings.sender_email)
    dispatcher = VerificationCodeDispatcher(
        users,
        provider,
        sender=settings.sender_email,
        subject=settings.verification_email_subject,
        max_attempts=settings.email_delivery_max_attempts,
    )
    auth_service = AuthService(
        SupabaseAuthFramework(clients),
        users,
        dispatcher,
        auth_options_from_settings(settings),
    )
    return AuthComponents(auth_service=auth_service, user_service=users, dispatcher=dispatcher)
