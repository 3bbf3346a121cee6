"""
Resend transactional email client.

This module sends a ComposedMessage through the Resend HTTPS API and
reports the outcome as a DeliveryResult.

Policy: exactly one attempt per call, bounded by a timeout. A timeout or
non-2xx response is a delivery failure; anything else unexpected (network
fault, malformed success body) is raised to the caller.

Usage:
    from integrations.resend_client import ResendClient

    client = ResendClient.from_config(config)
    result = client.deliver(message, reply_to="lead@example.com")
    print(result.ok, result.message_id)
"""

import logging
import time
from typing import Iterable, Optional

import requests

from domain.models import ComposedMessage, DeliveryResult

logger = logging.getLogger(__name__)

# Provider error bodies are logged, truncated to this length
MAX_LOGGED_ERROR_CHARS = 500


# ============================================================================
# Custom Exception Classes
# ============================================================================

class ConfigurationError(Exception):
    """Raised when the client is created without a usable configuration."""
    pass


class ProviderResponseError(Exception):
    """Raised when the provider accepts a request but returns an unreadable body."""
    pass


# ============================================================================
# Client
# ============================================================================

class ResendClient:
    """
    Single-attempt client for the Resend send-email endpoint.

    Attributes:
        api_url: Send-email endpoint
        sender: From identity
        recipients: Operator inbox(es)
        timeout_seconds: Connect and read timeout for the call
    """

    def __init__(
        self,
        api_key: str,
        api_url: str,
        sender: str,
        recipients: Iterable[str],
        timeout_seconds: float = 5.0
    ):
        if not api_key:
            raise ConfigurationError("Resend API key is required but not set")

        self._api_key = api_key
        self.api_url = api_url
        self.sender = sender
        self.recipients = list(recipients)
        self.timeout_seconds = timeout_seconds

        logger.info(
            f"Resend client initialized: url={api_url}, "
            f"recipients={len(self.recipients)}, timeout={timeout_seconds}s, no retries"
        )

    @classmethod
    def from_config(cls, config) -> 'ResendClient':
        """Build a client from a ContactConfig."""
        return cls(
            api_key=config.api_key,
            api_url=config.api_url,
            sender=config.sender,
            recipients=config.recipients,
            timeout_seconds=config.timeout_seconds,
        )

    def build_payload(self, message: ComposedMessage, reply_to: Optional[str]) -> dict:
        """Build the JSON payload for the send-email call."""
        payload = {
            'from': self.sender,
            'to': list(self.recipients),
            'subject': message.subject,
            'html': message.html_body,
            'text': message.text_body,
        }
        if reply_to:
            payload['reply_to'] = reply_to
        return payload

    def deliver(self, message: ComposedMessage, reply_to: Optional[str]) -> DeliveryResult:
        """
        Send one message to the operator inbox.

        Args:
            message: Composed notification email
            reply_to: Submitter address so operator replies reach the lead

        Returns:
            DeliveryResult: ok=True with the provider message id, or ok=False
            for a non-2xx status or a timeout

        Raises:
            requests.RequestException: Network fault other than a timeout
            ProviderResponseError: Success status with a non-JSON body
        """
        start_time = time.time()

        try:
            response = requests.post(
                self.api_url,
                headers={
                    'Authorization': f'Bearer {self._api_key}',
                    'Content-Type': 'application/json',
                },
                json=self.build_payload(message, reply_to),
                timeout=self.timeout_seconds,
            )
        except requests.Timeout:
            logger.error(f"Resend request timed out after {self.timeout_seconds}s")
            return DeliveryResult(ok=False, provider_status=0, provider_error='timeout')

        elapsed = time.time() - start_time
        logger.info(f"Resend response status: {response.status_code} ({elapsed:.2f}s)")

        if not response.ok:
            error_detail = response.text[:MAX_LOGGED_ERROR_CHARS]
            logger.error(f"Resend API error: status={response.status_code}, body={error_detail}")
            return DeliveryResult(
                ok=False,
                provider_status=response.status_code,
                provider_error=error_detail
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderResponseError(f"Resend returned a non-JSON body: {e}")

        if not isinstance(data, dict):
            raise ProviderResponseError(
                f"Resend returned {type(data).__name__}, expected an object"
            )

        message_id = data.get('id')
        if not message_id:
            logger.warning("Resend accepted the message but returned no id")

        return DeliveryResult(
            ok=True,
            provider_status=response.status_code,
            message_id=message_id
        )
