"""
Request gating middleware for the Gatekeeper.

Every HTTP request under the API prefix goes through the rate limiter and
then the sanitizer before the wrapped application sees it. Anything else
passes straight through.
"""

from typing import Callable, List, Optional, Tuple

from fastapi import Request
from starlette.requests import HTTPConnection
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

from shared.errors import GatingConfigurationError, GatingNotAppliedError
from shared.logging import get_logger, set_client_key
from shared.metrics import MetricsCollector
from ..ratelimit import RateLimiter
from ..sanitize import RequestView, Sanitizer, sanitize_request_view

TOO_MANY_REQUESTS_BODY = '{"message": "Too many requests. Please try again later."}'
REQUEST_VIEW_STATE_KEY = "request_view"
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

Stage = Callable[[Scope], Optional[Response]]


class GatingPipeline:
    """ASGI middleware running admission control, then sanitization."""

    def __init__(
        self,
        app: ASGIApp,
        rate_limiter: RateLimiter,
        sanitizer: Sanitizer,
        path_prefix: str = "/api",
        rate_limiter_order: int = 1,
        sanitizer_order: int = 2,
        metrics: Optional[MetricsCollector] = None,
    ):
        if rate_limiter_order >= sanitizer_order:
            raise GatingConfigurationError(
                "Rate limiter must run before the sanitizer",
                details={
                    "rate_limiter_order": rate_limiter_order,
                    "sanitizer_order": sanitizer_order,
                },
            )

        self.app = app
        self.rate_limiter = rate_limiter
        self.sanitizer = sanitizer
        self.path_prefix = path_prefix.rstrip("/")
        self.metrics = metrics
        self.logger = get_logger("gatekeeper.gating_pipeline")

        ordered: List[Tuple[int, Stage]] = sorted(
            [(rate_limiter_order, self._admit), (sanitizer_order, self._sanitize)],
            key=lambda entry: entry[0],
        )
        self._stages = [stage for _, stage in ordered]

    def matches(self, path: str) -> bool:
        """Servlet-style ``/prefix/*`` match; an empty prefix matches everything."""
        if not self.path_prefix:
            return True
        return path == self.path_prefix or path.startswith(self.path_prefix + "/")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self.matches(scope.get("path", "")):
            await self.app(scope, receive, send)
            return

        for stage in self._stages:
            response = stage(scope)
            if response is not None:
                await response(scope, receive, send)
                return

        await self.app(scope, receive, send)

    def _admit(self, scope: Scope) -> Optional[Response]:
        connection = HTTPConnection(scope)
        peer_address = connection.client.host if connection.client else None
        decision = self.rate_limiter.check(connection.headers, peer_address)
        set_client_key(decision.client_key)

        if self.metrics is not None:
            self.metrics.record_gating_decision(
                "admitted" if decision.allowed else "rejected",
                endpoint=scope.get("path", ""),
                tracked_clients=len(self.rate_limiter.registry),
            )

        if decision.allowed:
            return None
        return Response(
            content=TOO_MANY_REQUESTS_BODY,
            status_code=429,
            media_type="application/json",
        )

    def _sanitize(self, scope: Scope) -> Optional[Response]:
        view = sanitize_request_view(HTTPConnection(scope), self.sanitizer)
        scope.setdefault("state", {})[REQUEST_VIEW_STATE_KEY] = view
        return None


async def get_request_view(request: Request) -> RequestView:
    """FastAPI dependency returning the sanitized view of the current request."""
    view = getattr(request.state, REQUEST_VIEW_STATE_KEY, None)
    if view is None:
        raise GatingNotAppliedError(details={"path": request.url.path})

    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        view = view.with_form(await request.form())
    return view
