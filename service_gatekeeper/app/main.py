"""
Gatekeeper service: request gating in front of the API routes.
"""

from typing import Optional

from fastapi import Depends

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from .domain.gating_pipeline import GatingPipeline, get_request_view
from .ratelimit import BucketRegistry, ClientIdentifier, RateLimiter, TokenBucket
from .sanitize import RequestView, Sanitizer

SERVICE_NAME = "gatekeeper"
DEFAULT_PORT = 8000


class GatekeeperService(BaseService):
    """Service wiring the gating pipeline from configuration."""

    def __init__(self, config: Optional[ServiceConfig] = None, registry: Optional[BucketRegistry] = None):
        config = config or get_config(SERVICE_NAME, DEFAULT_PORT)

        self.bucket_registry = registry or BucketRegistry(
            lambda: TokenBucket(
                capacity=config.rate_limit_capacity,
                interval_seconds=config.rate_limit_interval_seconds,
            )
        )
        self.rate_limiter = RateLimiter(
            self.bucket_registry,
            ClientIdentifier(config.forwarded_for_header),
        )
        self.sanitizer = Sanitizer()

        super().__init__(SERVICE_NAME, config.port, config=config)

        self._setup_gateway_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.gatekeeper_service = self

    def _setup_middleware(self):
        """Install gating inside the timing middleware so rejections are logged too."""
        self.app.add_middleware(
            GatingPipeline,
            rate_limiter=self.rate_limiter,
            sanitizer=self.sanitizer,
            path_prefix=self.config.api_path_prefix,
            rate_limiter_order=self.config.rate_limiter_order,
            sanitizer_order=self.config.sanitizer_order,
            metrics=self.metrics,
        )
        super()._setup_middleware()

    def _setup_gateway_routes(self):
        """Set up gatekeeper routes."""
        prefix = self.config.api_path_prefix.rstrip("/")

        @self.app.get("/")
        async def root():
            return {
                "service": self.service_name,
                "message": "Request Gatekeeper",
                "api_prefix": prefix or "/",
            }

        @self.app.api_route(f"{prefix}/v1/echo", methods=["GET", "POST"])
        async def echo(view: RequestView = Depends(get_request_view)):
            """Return what a downstream handler would read after gating."""
            return {
                "parameters": view.get_parameter_map(),
                "user_agent": view.get_header("User-Agent"),
            }

    async def _check_dependencies(self):
        return {"bucket_registry": "ok", "tracked_clients": str(len(self.bucket_registry))}


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = GatekeeperService(config=config)
    return service.app


if __name__ == "__main__":
    service = GatekeeperService()
    service.run()
