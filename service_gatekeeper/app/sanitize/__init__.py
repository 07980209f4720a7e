"""
Input sanitization package for the Gatekeeper.

Provides the allowlist sanitizer and the read-only request view handlers use
to read parameters and headers after sanitization.
"""

from .policy import DEFAULT_POLICY, SanitizationPolicy, Sanitizer
from .request_view import RequestView, sanitize_request_view

__all__ = [
    "DEFAULT_POLICY",
    "RequestView",
    "SanitizationPolicy",
    "Sanitizer",
    "sanitize_request_view",
]
