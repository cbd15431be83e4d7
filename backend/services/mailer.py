"""
Password Reset Delivery
Hands reset links to whatever actually delivers mail.

Delivery itself is outside this project; the default mailer only logs the
link so a developer can follow it locally.
"""

import logging
from typing import List, Optional, Protocol
from urllib.parse import urlencode

logger = logging.getLogger(__name__)


class ResetMailer(Protocol):
    def send_reset_link(self, email: str, link: str) -> None:
        ...


class LoggingMailer:
    """Logs reset links instead of sending them"""

    def __init__(self):
        self.sent: List[tuple] = []

    def send_reset_link(self, email: str, link: str) -> None:
        self.sent.append((email, link))
        logger.info("password reset link for %s: %s", email, link)


def build_reset_link(frontend_url: str, token: str, email: str) -> str:
    query = urlencode({"token": token, "email": email})
    return f"{frontend_url.rstrip('/')}/?{query}"


_mailer: Optional[ResetMailer] = None


def get_mailer() -> ResetMailer:
    """Get or create the mailer singleton"""
    global _mailer
    if _mailer is None:
        _mailer = LoggingMailer()
    return _mailer
