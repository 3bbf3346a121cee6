"""
Form body parsing for API Gateway / function URL proxy events.

This module decodes the browser-submitted body (multipart/form-data or
application/x-www-form-urlencoded) and returns the recognized fields
keyed by SubmissionRecord attribute names.
"""

import base64
import binascii
import logging
from email import policy
from email.parser import BytesParser
from email.utils import collapse_rfc2231_value
from typing import Any, Dict, Optional
from urllib.parse import parse_qs

logger = logging.getLogger(__name__)

# Wire field name -> SubmissionRecord attribute
FIELD_NAMES = {
    'name': 'name',
    'email': 'email',
    'phone': 'phone',
    'company': 'company',
    'existing_website': 'existing_website',
    'interest': 'interest',
    'service': 'service',
    'budget': 'budget',
    'message': 'message',
    'consent': 'consent',
    'selected_package': 'selected_package',
    'selected_service': 'selected_service',
    '_gotcha': 'honeypot',
}


class FormParseError(ValueError):
    """Raised when the request body cannot be read as a form."""
    pass


def get_header(event: Dict[str, Any], name: str) -> str:
    """
    Case-insensitive header lookup.

    Args:
        event: Proxy event (REST v1, HTTP API v2 or function URL)
        name: Header name

    Returns:
        str: Header value or "" if absent
    """
    headers = event.get('headers') or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value or ''
    return ''


def _decode_body(event: Dict[str, Any]) -> bytes:
    body = event.get('body')
    if body is None:
        raise FormParseError("Request has no body")

    if event.get('isBase64Encoded'):
        try:
            return base64.b64decode(body)
        except (binascii.Error, ValueError) as e:
            raise FormParseError(f"Body is not valid base64: {e}")

    return body.encode('utf-8') if isinstance(body, str) else body


def _parse_multipart(content_type: str, body: bytes) -> Dict[str, str]:
    """
    Parse multipart/form-data with the MIME parser.

    File parts are skipped. The first value of a repeated field wins.
    """
    header = f"MIME-Version: 1.0\r\nContent-Type: {content_type}\r\n\r\n".encode('utf-8')
    msg = BytesParser(policy=policy.default).parsebytes(header + body)

    if not msg.is_multipart():
        raise FormParseError("Multipart body could not be parsed")

    fields: Dict[str, str] = {}
    for part in msg.iter_parts():
        field_name = part.get_param('name', header='content-disposition')
        if not field_name:
            continue
        field_name = collapse_rfc2231_value(field_name)

        # Uploaded files are not part of the contact form
        if part.get_filename():
            continue

        payload = part.get_payload(decode=True) or b''
        charset = part.get_content_charset() or 'utf-8'
        try:
            value = payload.decode(charset, errors='replace')
        except LookupError:
            logger.warning(f"Unknown charset {charset!r} for field {field_name}, using utf-8")
            value = payload.decode('utf-8', errors='replace')

        fields.setdefault(field_name, value)

    return fields


def _parse_urlencoded(body: bytes) -> Dict[str, str]:
    parsed = parse_qs(body.decode('utf-8', errors='replace'), keep_blank_values=True)
    return {key: values[0] for key, values in parsed.items() if values}


def parse_form(event: Dict[str, Any]) -> Dict[str, str]:
    """
    Extract recognized form fields from a proxy event.

    Args:
        event: Proxy event with headers, body and isBase64Encoded

    Returns:
        Dict keyed by SubmissionRecord attribute names. Fields absent from
        the submission are absent from the dict.

    Raises:
        FormParseError: If the body is missing or has an unsupported type

    Example:
        >>> event = {
        ...     "headers": {"content-type": "application/x-www-form-urlencoded"},
        ...     "body": "name=Ada&email=ada%40example.com&_gotcha=",
        ... }
        >>> parse_form(event)
        {'name': 'Ada', 'email': 'ada@example.com', 'honeypot': ''}
    """
    content_type = get_header(event, 'content-type')
    media_type = content_type.split(';', 1)[0].strip().lower()
    body = _decode_body(event)

    if media_type == 'multipart/form-data':
        raw_fields = _parse_multipart(content_type, body)
    elif media_type == 'application/x-www-form-urlencoded':
        raw_fields = _parse_urlencoded(body)
    else:
        raise FormParseError(f"Unsupported content type: {media_type or 'none'}")

    fields = {
        FIELD_NAMES[key]: value
        for key, value in raw_fields.items()
        if key in FIELD_NAMES
    }

    logger.info(f"Parsed form ({media_type}): fields={sorted(fields)}")
    return fields


def get_method(event: Optional[Dict[str, Any]]) -> str:
    """Return the upper-cased HTTP method from a v1 or v2 proxy event."""
    if not event:
        return ''
    http = (event.get('requestContext') or {}).get('http') or {}
    method = http.get('method') or event.get('httpMethod') or ''
    return method.upper()
