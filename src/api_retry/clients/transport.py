"""
httpx transport that re-sends requests according to a RetryPolicy.
"""

import logging

import httpx

from ..exceptions import BodyNotReplayableError
from ..retry import RateLimitSnapshot, RetryConfig, RetryPolicy

logger = logging.getLogger(__name__)

# AsyncClient ignores these once a transport is given, or (proxy) routes
# around it, so they configure the inner transport instead
TRANSPORT_OPTIONS = ("verify", "cert", "http1", "http2", "limits", "proxy")


class RetryTransport(httpx.AsyncBaseTransport):
    """
    Async transport wrapper that owns the retry loop.

    Features:
    - One fresh RetryPolicy per request, never shared
    - Immediate retry on transport errors and 5xx responses
    - Waits out the rate-limit window on throttled 429/403 responses
    - Warns when the remaining quota runs low
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        config: RetryConfig | None = None,
    ):
        """
        Initialize the transport.

        Args:
            transport: Transport that actually sends requests
                (default: httpx.AsyncHTTPTransport())
            config: Retry configuration (default: RetryConfig())
        """
        self._transport = transport or httpx.AsyncHTTPTransport()
        self.config = config or RetryConfig()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        policy = RetryPolicy.from_config(self.config)
        if not policy.is_exhausted:
            self._ensure_replayable(request)

        attempt = 0
        while True:
            attempt += 1
            # Clone before sending; the inner transport consumes the request
            pending = None if policy.is_exhausted else policy.clone_request(request)

            result: httpx.Response | httpx.TransportError
            try:
                result = await self._transport.handle_async_request(request)
            except httpx.TransportError as e:
                result = e
            else:
                self._warn_if_near_limit(request, result)

            exhausted = policy.is_exhausted
            wait = policy.decide(result)

            if wait is None or pending is None:
                if exhausted and policy.would_retry(result):
                    self._log_exhausted(request, result)
                if isinstance(result, httpx.TransportError):
                    raise result
                return result

            if isinstance(result, httpx.Response):
                await result.aclose()
            logger.warning(
                f"Retry {attempt}/{self.config.max_retries} for "
                f"{request.method} {request.url}: {self._describe(result)}, "
                f"waiting {wait.delay:.1f}s"
            )
            await wait
            request = pending

    async def aclose(self) -> None:
        await self._transport.aclose()

    def _ensure_replayable(self, request: httpx.Request) -> None:
        """Reject streaming bodies, which cannot be sent twice."""
        try:
            request.content
        except httpx.RequestNotRead as e:
            raise BodyNotReplayableError(
                f"Cannot retry {request.method} {request.url}: "
                "request body is a stream, pass buffered content instead"
            ) from e

    def _warn_if_near_limit(self, request: httpx.Request, response: httpx.Response) -> None:
        threshold = self.config.near_limit_threshold
        if threshold is None:
            return
        snapshot = RateLimitSnapshot.from_response(response)
        if snapshot is not None and snapshot.is_near_limit(threshold):
            logger.warning(
                f"Approaching rate limit for {request.url.host}: "
                f"{snapshot.remaining}/{snapshot.limit} requests left, "
                f"resets at {snapshot.reset_time.isoformat()}"
            )

    def _log_exhausted(
        self, request: httpx.Request, result: httpx.Response | httpx.TransportError
    ) -> None:
        if not self.config.retries_enabled or self.config.max_retries == 0:
            return
        logger.error(
            f"All {self.config.max_retries} retries exhausted for "
            f"{request.method} {request.url}: {self._describe(result)}"
        )

    @staticmethod
    def _describe(result: httpx.Response | httpx.TransportError) -> str:
        if isinstance(result, httpx.Response):
            return f"status {result.status_code}"
        return f"{type(result).__name__}: {result}"


def retrying_client(
    config: RetryConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    **kwargs,
) -> httpx.AsyncClient:
    """
    Create an httpx.AsyncClient whose requests are retried per `config`.

    Connection options (verify, cert, http1, http2, limits, proxy) build the
    default inner httpx.AsyncHTTPTransport; everything else goes to the client.

    Args:
        config: Retry configuration (default: RetryConfig())
        transport: Inner transport (default: httpx.AsyncHTTPTransport())
        **kwargs: Connection options, then httpx.AsyncClient arguments

    Returns:
        A client using RetryTransport for every request

    Raises:
        TypeError: If connection options are combined with `transport`,
            or `mounts` is given
    """
    if "mounts" in kwargs:
        raise TypeError(
            "retrying_client() does not accept mounts; "
            "wrap each mounted transport in RetryTransport instead"
        )
    options = {name: kwargs.pop(name) for name in TRANSPORT_OPTIONS if name in kwargs}
    if transport is None:
        transport = httpx.AsyncHTTPTransport(
            trust_env=kwargs.get("trust_env", True), **options
        )
    elif options:
        raise TypeError(
            f"retrying_client() got {', '.join(options)} with an explicit transport; "
            "configure the transport itself instead"
        )
    return httpx.AsyncClient(transport=RetryTransport(transport, config), **kwargs)
