"""
Per-client admission control for the gating pipeline.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from shared.logging import get_logger
from .client_identity import ClientIdentifier
from .token_bucket import BucketRegistry


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of one admission check."""

    allowed: bool
    client_key: str
    remaining: int
    limit: int


class RateLimiter:
    """Admit or reject a request against its client's token bucket."""

    def __init__(self, registry: BucketRegistry, identifier: Optional[ClientIdentifier] = None):
        self.registry = registry
        self.identifier = identifier or ClientIdentifier()
        self.logger = get_logger("gatekeeper.rate_limiter")

    def check(self, headers: Mapping[str, str], peer_address: Optional[str], cost: int = 1) -> RateLimitDecision:
        """Consume ``cost`` tokens for the caller described by ``headers``/``peer_address``."""
        client_key = self.identifier.identify(headers, peer_address)
        bucket = self.registry.get_or_create(client_key)
        allowed = bucket.try_consume(cost)
        remaining = bucket.remaining

        if not allowed:
            self.logger.warning(
                "Rate limit exceeded",
                client_key=client_key,
                limit=bucket.capacity,
                interval_seconds=bucket.interval_seconds
            )

        return RateLimitDecision(
            allowed=allowed,
            client_key=client_key,
            remaining=remaining,
            limit=bucket.capacity,
        )
