"""Configuration <-> WebhookSubscription marshalling."""
from __future__ import annotations

from collections.abc import Mapping as MappingABC
from typing import Any, Mapping

from artifactory_webhooks.codecs.criteria import string_list
from artifactory_webhooks.codecs.handlers import pack_handlers, unpack_handlers
from artifactory_webhooks.domain.enums import WebhookDomain
from artifactory_webhooks.domain.models import (
    CriteriaModel,
    EventFilter,
    PatternCriteria,
    WebhookSubscription,
)
from artifactory_webhooks.registry import get_domain


def first_criteria_block(config: Mapping[str, Any]) -> Mapping[str, Any] | None:
    """The single ``criteria`` block of a configuration, if any.

    The block set holds at most one element; anything past the first is
    ignored.
    """
    blocks = config.get("criteria")
    if not blocks:
        return None
    if isinstance(blocks, MappingABC):
        return blocks
    return next(iter(blocks), None)


def unpack_criteria(
    config: Mapping[str, Any], domain: WebhookDomain | str
) -> CriteriaModel | None:
    spec = get_domain(domain)
    block = first_criteria_block(config)
    if block is None:
        return None

    base = PatternCriteria(
        include_patterns=string_list(block.get("include_patterns")),
        exclude_patterns=string_list(block.get("exclude_patterns")),
    )
    return spec.unpack(block, base)


def pack_criteria(criteria: CriteriaModel, domain: WebhookDomain | str) -> dict[str, Any] | None:
    spec = get_domain(domain)
    if not isinstance(criteria, spec.criteria_model):
        raise TypeError(
            f"{type(criteria).__name__} cannot be packed for domain {spec.domain.value}, "
            f"expected {spec.criteria_model.__name__}"
        )
    if not spec.has_criteria:
        return None

    packed = spec.pack(criteria)
    if isinstance(criteria, PatternCriteria):
        packed["include_patterns"] = set(criteria.include_patterns)
        packed["exclude_patterns"] = set(criteria.exclude_patterns)
    return packed


def unpack_webhook(config: Mapping[str, Any], domain: WebhookDomain | str) -> WebhookSubscription:
    spec = get_domain(domain)
    return WebhookSubscription(
        key=config.get("key") or "",
        description=config.get("description") or "",
        enabled=bool(config.get("enabled", True)),
        event_filter=EventFilter(
            domain=spec.domain,
            event_types=string_list(config.get("event_types")),
            criteria=unpack_criteria(config, spec.domain),
        ),
        handlers=unpack_handlers(config.get("handler")),
    )


def pack_webhook(
    subscription: WebhookSubscription,
    domain: WebhookDomain | str,
    prior: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Configuration values for ``subscription``.

    ``prior`` is the local state known before the read; handler secrets are
    taken from it.
    """
    prior = prior or {}
    values: dict[str, Any] = {
        "key": subscription.key,
        "description": subscription.description,
        "enabled": subscription.enabled,
        "event_types": set(subscription.event_filter.event_types),
    }

    criteria = subscription.event_filter.criteria
    if criteria is not None:
        packed = pack_criteria(criteria, domain)
        if packed is not None:
            values["criteria"] = [packed]

    values["handler"] = pack_handlers(prior.get("handler"), subscription.handlers)
    return values
