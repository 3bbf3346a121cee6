"""
Contact-form processing pipeline - core business logic.

This module handles one inbound HTTP request end to end:
1. Request gate (CORS preflight, method check, credential check)
2. Parse the form body and apply the honeypot gate
3. Validate required fields
4. Compose the notification email
5. Deliver it through the email provider
6. Map the outcome to a JSON response

Every failure collapses to one of a fixed set of client-facing messages.
No exception propagates out of handle().
"""

import json
import logging
from typing import Any, Dict, Optional

from .composer import compose
from .validation import SpamDetected, ValidationError, parse_and_validate
from services import form as form_service
from services.config import ContactConfig
from integrations.resend_client import ResendClient

logger = logging.getLogger(__name__)

ERROR_CONFIGURATION = 'Server configuration error'
ERROR_DELIVERY = 'Failed to send message'
ERROR_UNEXPECTED = 'An unexpected error occurred'
ERROR_METHOD = 'Method not allowed'

ALLOWED_METHODS = 'POST, OPTIONS'
PREFLIGHT_MAX_AGE = '86400'


class ContactProcessor:
    """
    Handles the contact-form request pipeline.

    Configuration and the delivery client are injected at construction so
    the pipeline never reads ambient global state.
    """

    def __init__(self, config: ContactConfig, delivery_client: Optional[ResendClient] = None):
        """
        Initialize contact processor.

        Args:
            config: Process configuration
            delivery_client: Client used to send email. Built from config
                when omitted and a credential is configured.
        """
        self.config = config
        if delivery_client is None and config.is_delivery_configured:
            delivery_client = ResendClient.from_config(config)
        self.delivery_client = delivery_client

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------

    def cors_headers(self) -> Dict[str, str]:
        """Headers carried by every response on the POST path."""
        return {
            'Access-Control-Allow-Origin': self.config.allowed_origin,
            'Access-Control-Allow-Methods': ALLOWED_METHODS,
            'Access-Control-Allow-Headers': 'Content-Type',
            'Content-Type': 'application/json',
        }

    def preflight_response(self) -> Dict[str, Any]:
        return {
            'statusCode': 204,
            'headers': {
                'Access-Control-Allow-Origin': self.config.allowed_origin,
                'Access-Control-Allow-Methods': ALLOWED_METHODS,
                'Access-Control-Allow-Headers': 'Content-Type',
                'Access-Control-Max-Age': PREFLIGHT_MAX_AGE,
            },
            'body': '',
        }

    def json_response(self, status_code: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'statusCode': status_code,
            'headers': self.cors_headers(),
            'body': json.dumps(payload),
        }

    def error_response(self, status_code: int, error: str) -> Dict[str, Any]:
        return self.json_response(status_code, {'success': False, 'error': error})

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """
        Process a single proxy event.

        Args:
            event: API Gateway (v1/v2) or function URL event

        Returns:
            Proxy response dict with statusCode, headers and JSON body
        """
        method = form_service.get_method(event)
        logger.info(f"Processing {method or 'UNKNOWN'} request")

        if method == 'OPTIONS':
            return self.preflight_response()

        if method != 'POST':
            response = self.error_response(405, ERROR_METHOD)
            response['headers']['Allow'] = ALLOWED_METHODS
            return response

        if not self.config.is_delivery_configured or self.delivery_client is None:
            logger.error("Delivery credential is not configured, rejecting request")
            return self.error_response(500, ERROR_CONFIGURATION)

        try:
            return self._process_submission(event)
        except Exception as e:
            logger.error(f"Contact form error: {e}", exc_info=True)
            return self.error_response(500, ERROR_UNEXPECTED)

    def _process_submission(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run validation, composition and delivery.

        Raises:
            Anything not mapped here (caught by handle())
        """
        form = form_service.parse_form(event)

        try:
            record = parse_and_validate(form)
        except SpamDetected:
            # Fake success for bots
            logger.info("Honeypot field populated, discarding submission")
            return self.json_response(200, {'success': True})
        except ValidationError as ve:
            return self.error_response(ve.status_code, str(ve))

        message = compose(record)
        logger.info(f"Composed message: subject={message.subject}")

        result = self.delivery_client.deliver(message, record.reply_to)
        logger.info(f"Delivery outcome: {result!r}")

        if not result.ok:
            return self.error_response(500, ERROR_DELIVERY)

        payload: Dict[str, Any] = {'success': True}
        if result.message_id:
            payload['id'] = result.message_id
        return self.json_response(200, payload)
