"""
Utility functions for Lambda handler operations.

This package contains reusable service functions for configuration,
form body parsing and Secrets Manager access.
"""

__all__ = ['config', 'form', 'secrets']
