"""
Process configuration for the contact-form handler.

All environment access happens here. The resulting ContactConfig is
injected into the processor so that tests can substitute credentials and
endpoints without touching os.environ.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from services import secrets as secrets_service

logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'https://api.resend.com/emails'
# Resend's shared test sender until the site domain is verified
DEFAULT_SENDER = 'DoroLabs <onboarding@resend.dev>'
DEFAULT_RECIPIENTS = ('dorolabs.ac@gmail.com',)
DEFAULT_ALLOWED_ORIGIN = 'https://www.dorolabs.eu'
DEFAULT_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class ContactConfig:
    """
    Read-only configuration shared by every request in a container.

    Attributes:
        api_key: Resend API key ("" when not configured)
        api_url: Resend send-email endpoint
        sender: From identity
        recipients: Operator inbox(es)
        allowed_origin: The single origin allowed by CORS
        timeout_seconds: Bound on the provider call
        environment: Deployment stage name
    """
    api_key: str = ''
    api_url: str = DEFAULT_API_URL
    sender: str = DEFAULT_SENDER
    recipients: Tuple[str, ...] = DEFAULT_RECIPIENTS
    allowed_origin: str = DEFAULT_ALLOWED_ORIGIN
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    environment: str = 'dev'

    @property
    def is_delivery_configured(self) -> bool:
        """Check if a delivery credential is present."""
        return bool(self.api_key)

    def __repr__(self) -> str:
        # Never print the credential
        return (
            f"ContactConfig(environment={self.environment}, api_url={self.api_url}, "
            f"recipients={list(self.recipients)}, allowed_origin={self.allowed_origin}, "
            f"timeout_seconds={self.timeout_seconds}, "
            f"delivery_configured={self.is_delivery_configured})"
        )


def _get(environ: Mapping[str, str], name: str, default: str = '') -> str:
    value = (environ.get(name) or '').strip()
    return value or default


def _parse_timeout(raw: str) -> float:
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError:
        timeout = 0
    if timeout <= 0:
        logger.warning(
            f"Invalid RESEND_TIMEOUT_SECONDS={raw!r}, using default {DEFAULT_TIMEOUT_SECONDS}s"
        )
        return DEFAULT_TIMEOUT_SECONDS
    return timeout


def _parse_recipients(raw: str) -> Tuple[str, ...]:
    recipients = tuple(r.strip() for r in raw.split(',') if r.strip())
    return recipients or DEFAULT_RECIPIENTS


def _resolve_api_key(environ: Mapping[str, str]) -> str:
    """
    Resolve the delivery credential.

    Priority: RESEND_API_KEY -> Secrets Manager (RESEND_API_KEY_SECRET_ID).
    A failed lookup yields "" so the request gate fails closed.
    """
    api_key = _get(environ, 'RESEND_API_KEY')
    if api_key:
        return api_key

    secret_id = _get(environ, 'RESEND_API_KEY_SECRET_ID')
    if not secret_id:
        logger.error("RESEND_API_KEY environment variable is not set")
        return ''

    try:
        return secrets_service.fetch_secret_value(secret_id)
    except ValueError as e:
        logger.error(f"Could not load delivery credential: {e}")
        return ''


def load_config(environ: Optional[Mapping[str, str]] = None) -> ContactConfig:
    """
    Build a ContactConfig from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        ContactConfig: Blank values fall back to defaults
    """
    if environ is None:
        environ = os.environ

    config = ContactConfig(
        api_key=_resolve_api_key(environ),
        api_url=_get(environ, 'RESEND_API_URL', DEFAULT_API_URL),
        sender=_get(environ, 'CONTACT_FROM', DEFAULT_SENDER),
        recipients=_parse_recipients(_get(environ, 'CONTACT_TO')),
        allowed_origin=_get(environ, 'CONTACT_ALLOWED_ORIGIN', DEFAULT_ALLOWED_ORIGIN),
        timeout_seconds=_parse_timeout(_get(environ, 'RESEND_TIMEOUT_SECONDS')),
        environment=_get(environ, 'ENVIRONMENT', 'dev'),
    )

    logger.info(f"Loaded configuration: {config!r}")
    return config
