"""
Rate limiting package for the Gatekeeper.

Holds the fixed-window token bucket, the per-client bucket registry and the
limiter that ties client identity to a bucket.
"""

from .client_identity import ClientIdentifier
from .limiter import RateLimitDecision, RateLimiter
from .token_bucket import BucketRegistry, BucketState, TokenBucket

__all__ = [
    "BucketRegistry",
    "BucketState",
    "ClientIdentifier",
    "RateLimitDecision",
    "RateLimiter",
    "TokenBucket",
]
