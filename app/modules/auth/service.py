import logging
from typing import Optional

from app.modules.auth.errors import (
    AuthError, DeliveryError, UnregisteredEmailError, UsernameValidationError
)
from app.modules.auth.framework import SupabaseAuthFramework
from app.modules.auth.models import AuthOptions, SendReceipt, Session
from app.modules.auth.username import validate_username
from app.modules.auth.verification import VerificationCodeDispatcher
from app.modules.users.service import UserService

logger = logging.getLogger(__name__)

INVALID_USERNAME_LOGIN = "Invalid username or password"
USERNAME_TAKEN = "Username is already taken. Please try another."
CODE_NOT_SENT = (
    "Your account was created, but the verification code could not be sent "
    "({reason}). Sign in to continue."
)


class AuthService:
    def __init__(
        self,
        framework: SupabaseAuthFramework,
        users: UserService,
        dispatcher: VerificationCodeDispatcher,
        options: Optional[AuthOptions] = None,
    ):
        self.framework = framework
        self.users = users
        self.dispatcher = dispatcher
        self.options = options or AuthOptions()

    def _require_email_password(self):
        if not self.options.email_password_enabled:
            raise AuthError("Email and password authentication is disabled")

    def sign_in(self, email: str, password: str) -> Session:
        """Authenticate with email and password"""
        self._require_email_password()
        session = self.framework.sign_in_with_email_password(email, password)
        logger.info(f"User signed in: {session.user_id}")
        return session

    def sign_in_with_username(self, username: str, password: str) -> Session:
        """Authenticate with username and password"""
        self._require_email_password()
        validation = validate_username(username)
        if not validation.valid:
            raise AuthError(INVALID_USERNAME_LOGIN)
        email = self.users.get_email_by_username(validation.sanitized)
        if email is None:
            raise AuthError(INVALID_USERNAME_LOGIN)
        try:
            return self.sign_in(email, password)
        except AuthError as e:
            raise AuthError(INVALID_USERNAME_LOGIN) from e

    def sign_up(self, email: str, password: str, username: str) -> Session:
        """Create an account and sign it in.

        The username is checked before anything touches Supabase. When
        otp_send_on_sign_up is set, exactly one verification code is sent
        after the account exists; the account is kept if that send fails.
        """
        self._require_email_password()
        validation = validate_username(username)
        if not validation.valid:
            raise UsernameValidationError(validation.error)
        if not password:
            raise AuthError("Password is required")

        if self.users.is_username_taken(validation.sanitized):
            raise AuthError(USERNAME_TAKEN)

        result = self.framework.sign_up_with_email_password(
            email,
            password,
            validation.sanitized,
            auto_sign_in=not self.options.require_email_verification,
        )
        session = result.session
        logger.info(f"User registered: {result.email} ({validation.sanitized})")

        if self.options.otp_send_on_sign_up:
            # Address the code to the stored email; the lookup matches it exactly
            try:
                self._send_code(result.email)
            except (UnregisteredEmailError, DeliveryError) as e:
                logger.error(f"Verification code not sent after sign-up for {result.email}: {e.message}")
                raise AuthError(CODE_NOT_SENT.format(reason=e.message)) from e

        if session is None:
            raise AuthError("Account created. Please verify your email before signing in.")
        return session

    def _send_code(self, email: str) -> SendReceipt:
        code = self.framework.generate_email_otp(email)
        return self.dispatcher.dispatch(email, code)

    def send_verification_otp(self, email: str) -> SendReceipt:
        """Standalone code request.

        With otp_disable_sign_up no code is even minted for an unknown email,
        since minting one would create the account.
        """
        if self.options.otp_disable_sign_up and not self.users.is_registered(email):
            logger.warning(f"Verification code requested for unregistered email: {email}")
            raise UnregisteredEmailError()
        return self._send_code(email)

    def verify_email_otp(self, email: str, otp: str) -> Session:
        session = self.framework.verify_email_otp(email, otp)
        logger.info(f"Email verified: {email}")
        return session

    def sign_out(self) -> bool:
        return self.framework.sign_out()
