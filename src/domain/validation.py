"""
Form extraction and validation.

Turns the raw field mapping produced by services.form into a
SubmissionRecord. Checks run fail-fast: the first failing rule wins.
"""

import logging
import re
from typing import Mapping

from .models import SubmissionRecord

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$', re.IGNORECASE)


class SpamDetected(Exception):
    """Raised when the honeypot field is populated."""
    pass


class ValidationError(ValueError):
    """Client-correctable input error. The message is safe to return."""
    status_code = 400


class MissingNameError(ValidationError):
    """Raised when the name is empty or whitespace-only."""

    def __init__(self):
        super().__init__("Name is required")


class InvalidEmailError(ValidationError):
    """Raised when the email is empty or does not look like local@domain.tld."""

    def __init__(self):
        super().__init__("Valid email is required")


def is_valid_email(value: str) -> bool:
    """Check an address against the basic local@domain.tld shape (trimmed)."""
    return bool(value) and EMAIL_PATTERN.match(value.strip()) is not None


def is_spam(form: Mapping[str, str]) -> bool:
    """Return True if the hidden honeypot field carries any value."""
    return bool(form.get('honeypot', ''))


def extract_record(form: Mapping[str, str]) -> SubmissionRecord:
    """
    Build a SubmissionRecord from a field mapping.

    Args:
        form: Mapping keyed by SubmissionRecord field names

    Returns:
        SubmissionRecord with missing fields defaulted to ""
    """
    return SubmissionRecord(
        name=form.get('name', ''),
        email=form.get('email', ''),
        phone=form.get('phone', ''),
        company=form.get('company', ''),
        existing_website=form.get('existing_website', ''),
        interest=form.get('interest', ''),
        service=form.get('service', ''),
        budget=form.get('budget', ''),
        message=form.get('message', ''),
        consent=form.get('consent', ''),
        selected_package=form.get('selected_package', ''),
        selected_service=form.get('selected_service', ''),
        honeypot=form.get('honeypot', ''),
    )


def parse_and_validate(form: Mapping[str, str]) -> SubmissionRecord:
    """
    Apply the spam gate and required-field checks.

    Args:
        form: Mapping keyed by SubmissionRecord field names

    Returns:
        SubmissionRecord: The validated record

    Raises:
        SpamDetected: Honeypot populated (checked before anything else)
        MissingNameError: Name empty after trimming
        InvalidEmailError: Email empty or malformed
    """
    if is_spam(form):
        raise SpamDetected()

    record = extract_record(form)

    if not record.name.strip():
        logger.info("Validation failed: missing name")
        raise MissingNameError()

    if not is_valid_email(record.email):
        logger.info("Validation failed: invalid email")
        raise InvalidEmailError()

    return record
