"""Domain registry: what each webhook domain supports and how its criteria are coded."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from artifactory_webhooks.codecs.criteria import (
    CRITERIA_CODECS,
    PackFn,
    UnpackFn,
    ValidateFn,
)
from artifactory_webhooks.core.exceptions import UnknownDomainError
from artifactory_webhooks.domain.enums import CriteriaKind, WebhookDomain
from artifactory_webhooks.domain.models import CriteriaModel
from artifactory_webhooks.domain.schema import CURRENT_SCHEMA_VERSION, ResourceSchema, resource_schema

RELEASE_BUNDLE_DEPRECATION = (
    "This resource is being deprecated and replaced by artifactory_destination_webhook resource"
)

DOMAIN_EVENT_TYPES: dict[WebhookDomain, tuple[str, ...]] = {
    WebhookDomain.ARTIFACT: ("deployed", "deleted", "moved", "copied", "cached"),
    WebhookDomain.ARTIFACT_PROPERTY: ("added", "deleted"),
    WebhookDomain.DOCKER: ("pushed", "deleted", "promoted"),
    WebhookDomain.BUILD: ("uploaded", "deleted", "promoted"),
    WebhookDomain.RELEASE_BUNDLE: ("created", "signed", "deleted"),
    WebhookDomain.DISTRIBUTION: (
        "distribute_started",
        "distribute_completed",
        "distribute_aborted",
        "distribute_failed",
        "delete_started",
        "delete_completed",
        "delete_failed",
    ),
    WebhookDomain.ARTIFACTORY_RELEASE_BUNDLE: (
        "received",
        "delete_started",
        "delete_completed",
        "delete_failed",
    ),
    WebhookDomain.DESTINATION: ("received", "delete_started", "delete_completed", "delete_failed"),
    WebhookDomain.USER: ("locked",),
    WebhookDomain.RELEASE_BUNDLE_V2: (
        "release_bundle_v2_started",
        "release_bundle_v2_failed",
        "release_bundle_v2_completed",
    ),
    WebhookDomain.RELEASE_BUNDLE_V2_PROMOTION: (
        "release_bundle_v2_promotion_completed",
        "release_bundle_v2_promotion_failed",
        "release_bundle_v2_promotion_started",
    ),
    WebhookDomain.ARTIFACT_LIFECYCLE: ("archive", "restore"),
}

DOMAIN_CRITERIA_KINDS: dict[WebhookDomain, CriteriaKind] = {
    WebhookDomain.ARTIFACT: CriteriaKind.REPO,
    WebhookDomain.ARTIFACT_PROPERTY: CriteriaKind.REPO,
    WebhookDomain.DOCKER: CriteriaKind.REPO,
    WebhookDomain.BUILD: CriteriaKind.BUILD,
    WebhookDomain.RELEASE_BUNDLE: CriteriaKind.RELEASE_BUNDLE,
    WebhookDomain.DISTRIBUTION: CriteriaKind.RELEASE_BUNDLE,
    WebhookDomain.ARTIFACTORY_RELEASE_BUNDLE: CriteriaKind.RELEASE_BUNDLE,
    WebhookDomain.DESTINATION: CriteriaKind.RELEASE_BUNDLE,
    WebhookDomain.USER: CriteriaKind.EMPTY,
    WebhookDomain.RELEASE_BUNDLE_V2: CriteriaKind.RELEASE_BUNDLE_V2,
    WebhookDomain.RELEASE_BUNDLE_V2_PROMOTION: CriteriaKind.RELEASE_BUNDLE_V2_PROMOTION,
    WebhookDomain.ARTIFACT_LIFECYCLE: CriteriaKind.EMPTY,
}

DEPRECATED_DOMAINS: dict[WebhookDomain, str] = {
    WebhookDomain.ARTIFACTORY_RELEASE_BUNDLE: RELEASE_BUNDLE_DEPRECATION,
}


@dataclass(frozen=True, slots=True)
class DomainSpec:
    """Everything the resource needs to know about one domain."""

    domain: WebhookDomain
    event_types: frozenset[str]
    criteria_kind: CriteriaKind
    deprecation_message: str | None = None

    @property
    def criteria_model(self) -> type[CriteriaModel]:
        return CRITERIA_CODECS[self.criteria_kind].model

    @property
    def unpack(self) -> UnpackFn:
        return CRITERIA_CODECS[self.criteria_kind].unpack

    @property
    def pack(self) -> PackFn:
        return CRITERIA_CODECS[self.criteria_kind].pack

    @property
    def validate(self) -> ValidateFn:
        return CRITERIA_CODECS[self.criteria_kind].validate

    @property
    def has_criteria(self) -> bool:
        return "criteria" in self.schema()

    def schema(self, version: int = CURRENT_SCHEMA_VERSION) -> ResourceSchema:
        return resource_schema(self.criteria_kind, version)


def _build_registry() -> Mapping[WebhookDomain, DomainSpec]:
    specs: dict[WebhookDomain, DomainSpec] = {}
    for domain in WebhookDomain:
        if domain not in DOMAIN_EVENT_TYPES or domain not in DOMAIN_CRITERIA_KINDS:
            raise RuntimeError(f"Webhook domain {domain.value} is missing from the registry")
        specs[domain] = DomainSpec(
            domain=domain,
            event_types=frozenset(DOMAIN_EVENT_TYPES[domain]),
            criteria_kind=DOMAIN_CRITERIA_KINDS[domain],
            deprecation_message=DEPRECATED_DOMAINS.get(domain),
        )
    return MappingProxyType(specs)


DOMAINS: Mapping[WebhookDomain, DomainSpec] = _build_registry()


def get_domain(domain: WebhookDomain | str) -> DomainSpec:
    """Registry entry for ``domain``; unknown names raise :class:`UnknownDomainError`."""
    try:
        return DOMAINS[WebhookDomain(domain)]
    except (ValueError, KeyError) as exc:
        raise UnknownDomainError(f"Unknown webhook domain: {domain!r}") from exc
