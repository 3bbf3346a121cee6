"""
Data models for the contact-form domain.

These type-safe data structures define clear contracts between the
validator, the composer and the delivery client. None of them outlive a
single request.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SubmissionRecord:
    """
    Canonical contact-form submission.

    Every field is a string; absent form fields are stored as "" so the
    composer can treat absence uniformly.

    Attributes:
        name: Submitter name (required, non-blank)
        email: Submitter email as submitted (required, validated)
        phone: Optional phone number
        company: Optional company name
        existing_website: Optional "has website" answer
        interest: Free-text interest
        service: Free-text service from the form select
        budget: Optional budget bracket
        message: Free-text message (line breaks preserved)
        consent: Consent checkbox value
        selected_package: Package hint from the pricing page (routing only)
        selected_service: Service code hint (routing only)
        honeypot: Hidden anti-spam field
    """
    name: str = ''
    email: str = ''
    phone: str = ''
    company: str = ''
    existing_website: str = ''
    interest: str = ''
    service: str = ''
    budget: str = ''
    message: str = ''
    consent: str = ''
    selected_package: str = ''
    selected_service: str = ''
    honeypot: str = ''

    @property
    def reply_to(self) -> str:
        """Address operator replies should go to."""
        return self.email.strip()


@dataclass(frozen=True)
class ComposedMessage:
    """
    Notification email rendered from one SubmissionRecord.

    Attributes:
        subject: Subject line
        html_body: Markup representation
        text_body: Plain-text representation
    """
    subject: str
    html_body: str
    text_body: str


@dataclass
class DeliveryResult:
    """
    Outcome of a single call to the email provider.

    Attributes:
        ok: Whether the provider accepted the message
        provider_status: HTTP status returned by the provider (0 on timeout)
        message_id: Provider message id (on success)
        provider_error: Provider error detail (on failure, for logs only)
    """
    ok: bool
    provider_status: int
    message_id: Optional[str] = None
    provider_error: Optional[str] = None

    def __repr__(self) -> str:
        """Human-readable representation for logging."""
        if self.ok:
            return f"DeliveryResult(ok=True, status={self.provider_status}, id={self.message_id})"
        else:
            return f"DeliveryResult(ok=False, status={self.provider_status}, error={self.provider_error})"
