"""
Pytest configuration and fixtures for all tests.
"""

import base64
import os
import sys
from unittest.mock import Mock

import pytest

# Add src and hooks to Python path before any imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../hooks'))

# Set up test environment variables before importing any modules
os.environ.setdefault('AWS_DEFAULT_REGION', 'eu-central-1')
os.environ.setdefault('ENVIRONMENT', 'test')
os.environ.setdefault('LOG_LEVEL', 'INFO')

BOUNDARY = '----WebKitFormBoundaryTestBoundary'


def build_multipart_body(fields):
    """Encode a dict of fields the way a browser encodes multipart/form-data."""
    lines = []
    for name, value in fields.items():
        lines.append(f'--{BOUNDARY}')
        lines.append(f'Content-Disposition: form-data; name="{name}"')
        lines.append('')
        lines.append(value)
    lines.append(f'--{BOUNDARY}--')
    lines.append('')
    return '\r\n'.join(lines).encode('utf-8')


def build_form_event(fields, method='POST', base64_encoded=True):
    """Build an HTTP API (v2) proxy event carrying a multipart form."""
    body = build_multipart_body(fields)
    return {
        'version': '2.0',
        'requestContext': {'http': {'method': method}},
        'headers': {'content-type': f'multipart/form-data; boundary={BOUNDARY}'},
        'body': base64.b64encode(body).decode('ascii') if base64_encoded else body.decode('utf-8'),
        'isBase64Encoded': base64_encoded,
    }


@pytest.fixture
def valid_fields():
    """A complete, valid contact-form submission."""
    return {
        'name': 'Ada Lovelace',
        'email': 'ada@example.com',
        'phone': '+49 170 1234567',
        'company': 'Analytical Engines GmbH',
        'existing_website': 'yes',
        'interest': 'automation',
        'service': 'ai',
        'budget': '1000-2500',
        'message': 'Hello,\nwe need help.',
        'consent': 'on',
        'selected_package': '',
        'selected_service': '',
        '_gotcha': '',
    }


@pytest.fixture
def lambda_context():
    """Mock Lambda context."""
    context = Mock()
    context.aws_request_id = "test-request-id"
    context.invoked_function_arn = "arn:aws:lambda:eu-central-1:123456789012:function:contact-form-test"
    return context
