"""
Client identity resolution for per-client rate limiting.
"""

from typing import Mapping, Optional

DEFAULT_FORWARDED_FOR_HEADER = "X-Forwarded-For"
UNKNOWN_CLIENT = "unknown"


class ClientIdentifier:
    """Derive the bucket key for a caller.

    The first entry of the forwarded-address header wins over the transport
    peer. The entry is used verbatim, so a client that controls the header
    controls its bucket.
    """

    def __init__(self, forwarded_for_header: str = DEFAULT_FORWARDED_FOR_HEADER):
        self.forwarded_for_header = forwarded_for_header

    def identify(self, headers: Mapping[str, str], peer_address: Optional[str]) -> str:
        """Return a non-empty client key."""
        forwarded_for = headers.get(self.forwarded_for_header)
        if forwarded_for is not None:
            first = forwarded_for.split(",")[0].strip()
            if first:
                return first

        if peer_address:
            return peer_address
        return UNKNOWN_CLIENT
