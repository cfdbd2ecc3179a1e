import html
import logging
from datetime import datetime, timezone
from typing import Optional

from app.modules.auth.errors import DeliveryError, UnregisteredEmailError
from app.modules.auth.models import SendReceipt
from app.modules.email.provider import ResendEmailProvider
from app.modules.users.service import UserService

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Your verification code"


class VerificationCodeDispatcher:
    """Sends one-time codes, but only to emails that already have an account."""

    def __init__(
        self,
        users: UserService,
        provider: ResendEmailProvider,
        sender: Optional[str] = None,
        subject: str = VERIFICATION_SUBJECT,
        max_attempts: int = 1,
    ):
        self.users = users
        self.provider = provider
        self.sender = sender
        self.subject = subject
        self.max_attempts = max(1, max_attempts)

    @staticmethod
    def render_body(code: str) -> str:
        return f"<p>Your verification code is: <strong>{html.escape(code)}</strong></p>"

    def dispatch(self, email: str, code: str) -> SendReceipt:
        logger.info(f"Sending verification code to: {email}")
        logger.debug(f"Verification code for {email}: {code}")

        # CredentialStoreError propagates: a failed lookup never sends
        if not self.users.is_registered(email):
            logger.warning(f"Email not registered: {email}")
            raise UnregisteredEmailError()

        body = self.render_body(code)
        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                response = self.provider.send(self.sender, email, self.subject, body)
            except Exception as e:
                last_error = e
                logger.error(f"Failed to send verification email to {email} (attempt {attempt}/{self.max_attempts}): {e}")
                continue
            receipt = SendReceipt(
                id=str(response.get("id", "")),
                email=email,
                sent_at=datetime.now(timezone.utc),
            )
            logger.info(f"Verification email sent successfully to {email}, id={receipt.id}")
            return receipt

        raise DeliveryError(detail=str(last_error)) from last_error
