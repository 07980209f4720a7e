"""
Gatekeeper service package.

The gatekeeper fronts API requests, enforcing:
- Per-client admission control: fixed-window token buckets keyed by caller
- Input sanitization: parameters and headers are read through a
  sanitizing view

Structure:
- app.main: FastAPI app, routes, and middleware wiring.
- app.ratelimit: Client identity, token buckets and the limiter.
- app.sanitize: Allowlist sanitizer and the sanitized request view.
- app.domain: The gating middleware and its FastAPI dependency.
"""
