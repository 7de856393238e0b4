"""Webhook subscription resources for the Artifactory event service."""

from artifactory_webhooks.client import ArtifactoryClient
from artifactory_webhooks.domain.enums import WebhookDomain
from artifactory_webhooks.provider import WebhookProvider, resource_name
from artifactory_webhooks.registry import DOMAINS, get_domain
from artifactory_webhooks.resource import ResourceData, WebhookResource

__version__ = "0.1.0"

__all__ = [
    "ArtifactoryClient",
    "DOMAINS",
    "ResourceData",
    "WebhookDomain",
    "WebhookProvider",
    "WebhookResource",
    "get_domain",
    "resource_name",
]
