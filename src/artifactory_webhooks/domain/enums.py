"""Domain enums for webhook subscriptions."""
from __future__ import annotations

from enum import Enum


class WebhookDomain(str, Enum):
    """Source event categories a subscription can listen to."""

    ARTIFACT = "artifact"
    ARTIFACT_PROPERTY = "artifact_property"
    DOCKER = "docker"
    BUILD = "build"
    RELEASE_BUNDLE = "release_bundle"
    DISTRIBUTION = "distribution"
    ARTIFACTORY_RELEASE_BUNDLE = "artifactory_release_bundle"
    DESTINATION = "destination"
    USER = "user"
    RELEASE_BUNDLE_V2 = "release_bundle_v2"
    RELEASE_BUNDLE_V2_PROMOTION = "release_bundle_v2_promotion"
    ARTIFACT_LIFECYCLE = "artifact_lifecycle"


class CriteriaKind(str, Enum):
    """Shape of the criteria block used by a domain."""

    REPO = "repo"
    BUILD = "build"
    RELEASE_BUNDLE = "release_bundle"
    RELEASE_BUNDLE_V2 = "release_bundle_v2"
    RELEASE_BUNDLE_V2_PROMOTION = "release_bundle_v2_promotion"
    EMPTY = "empty"


class HandlerType(str, Enum):
    """Delivery handler types accepted by the event service."""

    WEBHOOK = "webhook"
