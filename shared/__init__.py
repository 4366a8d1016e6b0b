"""
Shared utilities for the session service layer.

This package aggregates common building blocks consumed by all services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- error_codes: Numeric error codes and their messages
- errors: Coded exceptions and the error envelope
- error_handler: FastAPI handlers rendering errors as envelopes
- base_service: FastAPI service skeleton wiring the above together

Any cross-service logic should live here to avoid import cycles across
service packages. Do not import from service_* packages into shared/.
"""
