"""Common exceptions for the webhook resources."""
from __future__ import annotations

from typing import Any


class WebhookProviderError(Exception):
    """Base error for the provider."""


class UnknownDomainError(WebhookProviderError):
    """Raised when a domain is not present in the registry."""


class ConfigValidationError(WebhookProviderError):
    """Raised before apply when the proposed configuration is invalid."""


class SchemaValidationError(ConfigValidationError):
    """Raised when configuration values do not fit the resource schema."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("; ".join(problems))


class UnsupportedEventTypeError(ConfigValidationError):
    """Raised when an event type is outside the domain's allowed set."""

    def __init__(self, event_type: str, domain: str):
        self.event_type = event_type
        self.domain = domain
        super().__init__(f"event_type {event_type} not supported for domain {domain}")


class CriteriaValidationError(ConfigValidationError):
    """Raised when a criteria block is not valid for its domain."""


class RemoteError(WebhookProviderError):
    """Raised when the event service answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str, errors: list[Any] | None = None):
        self.status_code = status_code
        self.errors = errors or []
        super().__init__(message)
