"""
AWS Secrets Manager lookup for the delivery credential.

Used when the API key is not given directly in the environment but via
RESEND_API_KEY_SECRET_ID.
"""

import json
import logging
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

# Configure Secrets Manager client with timeouts to prevent infinite hangs
secrets_config = Config(
    retries={
        'max_attempts': 1,  # 1 attempt total (no retries)
        'mode': 'standard'
    },
    connect_timeout=5,
    read_timeout=10
)

# Created on first use; most deployments pass the key directly
_secrets_client = None


def _get_client():
    global _secrets_client
    if _secrets_client is None:
        _secrets_client = boto3.client('secretsmanager', config=secrets_config)
        logger.info("Secrets Manager client initialized with timeouts: connect=5s, read=10s, max_attempts=1")
    return _secrets_client


def fetch_secret_value(secret_id: str, key: Optional[str] = 'RESEND_API_KEY') -> str:
    """
    Fetch a secret string from Secrets Manager.

    Args:
        secret_id: Secret name or ARN
        key: Key to read when the secret holds a JSON object

    Returns:
        str: The secret value, stripped

    Raises:
        ValueError: If the secret cannot be read or holds no usable value

    Example:
        >>> fetch_secret_value("prod/contact-form/resend")
        're_123...'
    """
    if not secret_id:
        raise ValueError("Secret id cannot be empty")

    try:
        response = _get_client().get_secret_value(SecretId=secret_id)
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        logger.error(f"Failed to read secret {secret_id}: error_code={error_code}")
        raise ValueError(f"Secret not readable: {secret_id} ({error_code})")

    secret_string = response.get('SecretString') or ''

    try:
        parsed = json.loads(secret_string)
    except json.JSONDecodeError:
        parsed = None

    if isinstance(parsed, dict):
        value = str(parsed.get(key, '') or '')
    else:
        value = secret_string

    value = value.strip()
    if not value:
        raise ValueError(f"Secret {secret_id} has no value for {key}")

    logger.info(f"Loaded credential from Secrets Manager: {secret_id}")
    return value
