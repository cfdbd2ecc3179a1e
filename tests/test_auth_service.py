"""Unit tests for AuthService sign-in / sign-up orchestration."""

from unittest.mock import MagicMock

import pytest

from app.modules.auth.errors import (
    AuthError,
    CredentialStoreError,
    UnregisteredEmailError,
    UsernameValidationError,
)
from app.modules.auth.models import AuthOptions, SignUpResult
from app.modules.auth.service import CODE_NOT_SENT, INVALID_USERNAME_LOGIN, USERNAME_TAKEN, AuthService


class TestSignIn:
    def test_returns_framework_session(self, auth_service: AuthService, framework: MagicMock) -> None:
        session = auth_service.sign_in("user@example.com", "secret")
        framework.sign_in_with_email_password.assert_called_once_with("user@example.com", "secret")
        assert session.access_token == "access-token"

    def test_framework_message_passes_through(self, auth_service: AuthService, framework: MagicMock) -> None:
        framework.sign_in_with_email_password.side_effect = AuthError("Invalid credentials")
        with pytest.raises(AuthError) as exc_info:
            auth_service.sign_in("user@example.com", "wrongpass")
        assert exc_info.value.message == "Invalid credentials"

    def test_repeated_failure_is_identical(self, auth_service: AuthService, framework: MagicMock) -> None:
        framework.sign_in_with_email_password.side_effect = AuthError("Invalid credentials")
        messages = []
        for _ in range(2):
            with pytest.raises(AuthError) as exc_info:
                auth_service.sign_in("user@example.com", "wrongpass")
            messages.append(exc_info.value.message)
        assert messages[0] == messages[1]

    def test_disabled_email_password(self, framework, users, dispatcher) -> None:
        service = AuthService(framework, users, dispatcher, AuthOptions(email_password_enabled=False))
        with pytest.raises(AuthError):
            service.sign_in("user@example.com", "secret")
        framework.sign_in_with_email_password.assert_not_called()


class TestSignInWithUsername:
    def test_resolves_email(self, auth_service: AuthService, users: MagicMock, framework: MagicMock) -> None:
        auth_service.sign_in_with_username("Someone", "secret")
        users.get_email_by_username.assert_called_once_with("someone")
        framework.sign_in_with_email_password.assert_called_once_with("user@example.com", "secret")

    def test_unknown_username_is_generic(self, auth_service: AuthService, users: MagicMock, framework: MagicMock) -> None:
        users.get_email_by_username.return_value = None
        with pytest.raises(AuthError) as exc_info:
            auth_service.sign_in_with_username("ghost", "secret")
        assert exc_info.value.message == INVALID_USERNAME_LOGIN
        framework.sign_in_with_email_password.assert_not_called()

    def test_wrong_password_is_generic(self, auth_service: AuthService, framework: MagicMock) -> None:
        framework.sign_in_with_email_password.side_effect = AuthError("Invalid login credentials")
        with pytest.raises(AuthError) as exc_info:
            auth_service.sign_in_with_username("someone", "bad")
        assert exc_info.value.message == INVALID_USERNAME_LOGIN


class TestSignUp:
    def test_invalid_username_has_no_side_effects(
        self, auth_service: AuthService, framework: MagicMock, users: MagicMock, provider: MagicMock
    ) -> None:
        with pytest.raises(UsernameValidationError) as exc_info:
            auth_service.sign_up("new@example.com", "secret", "ab")

        assert exc_info.value.message == "Username must be at least 3 characters"
        assert framework.sign_up_with_email_password.call_count == 0
        assert users.is_username_taken.call_count == 0
        assert provider.send.call_count == 0

    def test_creates_account_with_sanitized_username_and_sends_one_code(
        self, auth_service: AuthService, framework: MagicMock, provider: MagicMock
    ) -> None:
        session = auth_service.sign_up("new@example.com", "secret", "  NewBie ")

        framework.sign_up_with_email_password.assert_called_once_with(
            "new@example.com", "secret", "newbie", auto_sign_in=True
        )
        framework.generate_email_otp.assert_called_once_with("new@example.com")
        assert provider.send.call_count == 1
        assert session.username == "newbie"

    def test_no_code_when_send_on_sign_up_is_off(self, framework, users, dispatcher, provider) -> None:
        service = AuthService(framework, users, dispatcher, AuthOptions(otp_send_on_sign_up=False))
        service.sign_up("new@example.com", "secret", "newbie")
        framework.generate_email_otp.assert_not_called()
        assert provider.send.call_count == 0

    def test_taken_username(self, auth_service: AuthService, users: MagicMock, framework: MagicMock) -> None:
        users.is_username_taken.return_value = True
        with pytest.raises(AuthError) as exc_info:
            auth_service.sign_up("new@example.com", "secret", "newbie")
        assert exc_info.value.message == USERNAME_TAKEN
        framework.sign_up_with_email_password.assert_not_called()

    def test_missing_password(self, auth_service: AuthService, framework: MagicMock) -> None:
        with pytest.raises(AuthError):
            auth_service.sign_up("new@example.com", "", "newbie")
        framework.sign_up_with_email_password.assert_not_called()

    def test_framework_rejection(self, auth_service: AuthService, framework: MagicMock, provider: MagicMock) -> None:
        framework.sign_up_with_email_password.side_effect = AuthError("User already registered")
        with pytest.raises(AuthError) as exc_info:
            auth_service.sign_up("new@example.com", "secret", "newbie")
        assert exc_info.value.message == "User already registered"
        assert provider.send.call_count == 0

    def test_delivery_failure_says_account_exists(self, auth_service: AuthService, provider: MagicMock) -> None:
        provider.send.side_effect = RuntimeError("provider down")
        with pytest.raises(AuthError) as exc_info:
            auth_service.sign_up("new@example.com", "secret", "newbie")
        assert exc_info.value.message == CODE_NOT_SENT.format(reason="Failed to send email")
        assert "account was created" in exc_info.value.message

    def test_code_goes_to_stored_email_when_input_case_differs(
        self, auth_service: AuthService, users: MagicMock, framework: MagicMock, provider: MagicMock
    ) -> None:
        """Supabase lower-cases emails; the code must follow the stored address."""
        users.is_registered.side_effect = lambda email: email == "new@example.com"

        session = auth_service.sign_up("New@Example.com", "secret", "newbie")

        framework.sign_up_with_email_password.assert_called_once_with(
            "New@Example.com", "secret", "newbie", auto_sign_in=True
        )
        framework.generate_email_otp.assert_called_once_with("new@example.com")
        users.is_registered.assert_called_once_with("new@example.com")
        assert provider.send.call_count == 1
        assert provider.send.call_args.args[1] == "new@example.com"
        assert session.email == "new@example.com"

    def test_no_session_when_verification_required(self, framework, users, dispatcher) -> None:
        framework.sign_up_with_email_password.return_value = SignUpResult(email="new@example.com")
        service = AuthService(framework, users, dispatcher, AuthOptions(require_email_verification=True))
        with pytest.raises(AuthError):
            service.sign_up("new@example.com", "secret", "newbie")
        framework.sign_up_with_email_password.assert_called_once_with(
            "new@example.com", "secret", "newbie", auto_sign_in=False
        )


class TestStandaloneVerification:
    def test_sends_for_registered_email(self, auth_service: AuthService, framework: MagicMock, provider: MagicMock) -> None:
        receipt = auth_service.send_verification_otp("user@example.com")
        framework.generate_email_otp.assert_called_once_with("user@example.com")
        assert receipt.id == "email-1"
        assert provider.send.call_count == 1

    def test_unregistered_email_mints_no_code(
        self, auth_service: AuthService, users: MagicMock, framework: MagicMock, provider: MagicMock
    ) -> None:
        users.is_registered.return_value = False
        with pytest.raises(UnregisteredEmailError):
            auth_service.send_verification_otp("new@example.com")
        framework.generate_email_otp.assert_not_called()
        assert provider.send.call_count == 0

    def test_lookup_failure_propagates(self, auth_service: AuthService, users: MagicMock, provider: MagicMock) -> None:
        users.is_registered.side_effect = CredentialStoreError()
        with pytest.raises(CredentialStoreError):
            auth_service.send_verification_otp("user@example.com")
        assert provider.send.call_count == 0

    def test_verify_email_otp(self, auth_service: AuthService, framework: MagicMock) -> None:
        session = auth_service.verify_email_otp("user@example.com", "123456")
        framework.verify_email_otp.assert_called_once_with("user@example.com", "123456")
        assert session.user_id == "user-1"
