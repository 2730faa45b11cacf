"""
Folio Backend — Abstract Mail Service Interface
=================================================

What:  Contract for outbound email used by contact form notifications.
Why:   The contact flow should not care whether mail is printed to the log
       in development or relayed over SMTP in production.
How:   Concrete implementations inherit from MailService and implement send().
Who:   Called by ContactService after a submission has been stored.
"""

from abc import ABC, abstractmethod
from typing import Optional


class MailService(ABC):
    """
    Contract:
        - send() returns once the message has been handed off
        - delivery problems raise; the caller decides how to report them
        - one attempt per call, no retries
    """

    @abstractmethod
    async def send(
        self,
        to: str,
        subject: str,
        body: str,
        reply_to: Optional[str] = None,
    ) -> None:
        """
        Send a plain-text email.

        Args:
            to:       Recipient address
            subject:  Subject line
            body:     Plain-text body
            reply_to: Optional Reply-To address (admin notices reply to the lead)
        """
        ...
