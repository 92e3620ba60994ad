"""
Shared utilities for the Recipe Access Layer.

This package aggregates common building blocks consumed by both services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with trace correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- signing: The shared HMAC signing secret
- claims: Claim set value object and token wire constants

Any cross-service logic should live here to avoid import cycles across
service packages. Do not import from service_* packages into shared/.
"""
