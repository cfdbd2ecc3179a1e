"""
Resend email delivery.

Thin wrapper so the rest of the app depends on a send() method rather than
on the resend module's global api_key.
"""
import logging
from typing import Any, Dict, Optional

import resend

logger = logging.getLogger(__name__)


class ResendEmailProvider:
    def __init__(self, api_key: Optional[str], default_sender: str = "onboarding@resend.dev"):
        self.api_key = api_key
        self.default_sender = default_sender
        if not api_key:
            logger.warning("RESEND_API_KEY not configured - email sending will fail")

    def send(self, from_: Optional[str], to: str, subject: str, html: str) -> Dict[str, Any]:
        """Submit one message and return the provider response (contains 'id')."""
        if not self.api_key:
            raise RuntimeError("RESEND_API_KEY is not configured")
        resend.api_key = self.api_key
        params = {
            "from": from_ or self.default_sender,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        response = resend.Emails.send(params)
        logger.debug(f"Resend response: {response}")
        return dict(response)
