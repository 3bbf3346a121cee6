"""
AWS Lambda handler for the website contact form.

Thin orchestration layer that delegates to ContactProcessor.
Policy: one delivery attempt per request, no retries. Errors logged to CloudWatch.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from domain.contact_processor import ContactProcessor
from services.config import load_config

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO').upper())

# Add console handler for local testing (AWS Lambda provides handlers automatically)
if not logger.handlers:
    console_handler = logging.StreamHandler()
    formatter = logging.Formatter('%(levelname)s - %(name)s - %(message)s')
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

# Built on first invocation and reused across warm invocations
_processor: Optional[ContactProcessor] = None


def get_processor() -> ContactProcessor:
    """Return the container-wide processor, creating it on first use."""
    global _processor
    if _processor is None:
        _processor = ContactProcessor(load_config())
    return _processor


def reset_processor() -> None:
    """Drop the cached processor so the next call re-reads configuration."""
    global _processor
    _processor = None


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Handle a contact-form request from API Gateway or a function URL.

    Args:
        event: Proxy event (OPTIONS preflight or multipart POST)
        context: Lambda context

    Returns:
        Dict with statusCode, headers and JSON body
    """
    request_id = getattr(context, 'aws_request_id', None) or getattr(context, 'request_id', 'UNKNOWN')
    logger.info(f"Contact form request {request_id}")

    response = get_processor().handle(event)

    logger.info(f"Request {request_id} completed with status {response['statusCode']}")
    return response


def health_check(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Simple health check endpoint for monitoring.
    """
    config = get_processor().config
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps({
            'status': 'healthy',
            'environment': config.environment,
            'deliveryConfigured': config.is_delivery_configured
        })
    }
