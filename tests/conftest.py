"""
tests/conftest.py -- Shared fixtures.

Supabase and Resend are never reached: the framework gateway, the user
lookups and the email provider are MagicMocks built with spec= so a typo
in a method name fails loudly instead of returning another mock.

create_app() receives a ready AuthComponents, so the lifespan never calls
build_auth_components() and no real client is constructed.
"""

from __future__ import annotations

from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.core.components import AuthComponents
from app.main import create_app
from app.modules.auth.framework import SupabaseAuthFramework
from app.modules.auth.models import AuthOptions, Session, SignUpResult
from app.modules.auth.service import AuthService
from app.modules.auth.verification import VerificationCodeDispatcher
from app.modules.email.provider import ResendEmailProvider
from app.modules.users.service import UserService


def make_session(email: str = "user@example.com", username: str | None = "someone") -> Session:
    return Session(
        access_token="access-token",
        refresh_token="refresh-token",
        user_id="user-1",
        email=email,
        username=username,
    )


@pytest.fixture
def framework() -> MagicMock:
    fw = MagicMock(spec=SupabaseAuthFramework)
    fw.sign_in_with_email_password.return_value = make_session()
    fw.sign_up_with_email_password.return_value = SignUpResult(
        email="new@example.com", session=make_session(email="new@example.com", username="newbie")
    )
    fw.generate_email_otp.return_value = "123456"
    fw.verify_email_otp.return_value = make_session()
    fw.sign_out.return_value = True
    return fw


@pytest.fixture
def users() -> MagicMock:
    u = MagicMock(spec=UserService)
    u.is_registered.return_value = True
    u.is_username_taken.return_value = False
    u.get_email_by_username.return_value = "user@example.com"
    return u


@pytest.fixture
def provider() -> MagicMock:
    p = MagicMock(spec=ResendEmailProvider)
    p.send.return_value = {"id": "email-1"}
    return p


@pytest.fixture
def dispatcher(users: MagicMock, provider: MagicMock) -> VerificationCodeDispatcher:
    return VerificationCodeDispatcher(users, provider, sender="noreply@example.com")


@pytest.fixture
def auth_service(framework: MagicMock, users: MagicMock, dispatcher: VerificationCodeDispatcher) -> AuthService:
    return AuthService(framework, users, dispatcher, AuthOptions())


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        supabase_url="http://supabase.test",
        supabase_key="anon-key",
        rate_limit="1000/minute",
        auth_success_redirect="/dashboard",
    )


@pytest.fixture
def client(
    test_settings: Settings,
    auth_service: AuthService,
    users: MagicMock,
    dispatcher: VerificationCodeDispatcher,
) -> Generator[TestClient, None, None]:
    """TestClient over the real app wired to the mocked components.

    follow_redirects=False so form tests can assert on the 303 Location.
    """
    components = AuthComponents(auth_service=auth_service, user_service=users, dispatcher=dispatcher)
    app = create_app(settings=test_settings, components=components)
    with TestClient(app, follow_redirects=False) as c:
        yield c
