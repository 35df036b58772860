"""
API Retry - HTTP Clients.

httpx integration that drives the retry policy.
"""

from .transport import RetryTransport, retrying_client

__all__ = [
    "RetryTransport",
    "retrying_client",
]
