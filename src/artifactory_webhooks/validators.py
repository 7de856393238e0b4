"""Pre-apply checks run on a proposed configuration."""
from __future__ import annotations

from typing import Any, Iterable, Mapping

import structlog

from artifactory_webhooks.core.exceptions import SchemaValidationError, UnsupportedEventTypeError
from artifactory_webhooks.domain.enums import WebhookDomain
from artifactory_webhooks.domain.schema import check_config
from artifactory_webhooks.marshal import first_criteria_block
from artifactory_webhooks.registry import get_domain

logger = structlog.get_logger(__name__)


def validate_schema(domain: WebhookDomain | str, proposed: Mapping[str, Any]) -> None:
    problems = check_config(get_domain(domain).schema(), proposed)
    if problems:
        raise SchemaValidationError(problems)


def validate_event_types(domain: WebhookDomain | str, event_types: Iterable[str] | None) -> None:
    spec = get_domain(domain)
    for event_type in sorted(event_types or []):
        if event_type not in spec.event_types:
            raise UnsupportedEventTypeError(event_type, spec.domain.value)


def validate_criteria(domain: WebhookDomain | str, proposed: Mapping[str, Any]) -> None:
    block = first_criteria_block(proposed)
    if block is None:
        return
    get_domain(domain).validate(block)


def customize_diff(domain: WebhookDomain | str, proposed: Mapping[str, Any]) -> None:
    """Reject ``proposed`` before any remote call is made."""
    spec = get_domain(domain)
    logger.debug("customize_diff", domain=spec.domain.value, key=proposed.get("key"))
    validate_schema(spec.domain, proposed)
    validate_event_types(spec.domain, proposed.get("event_types"))
    validate_criteria(spec.domain, proposed)
