"""
Shared utilities for the Request Gatekeeper.

This package aggregates common building blocks consumed by services:

- config: Service and gating configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI service shell (health, metrics, error handlers)

Do not import from service packages into shared/.
"""
