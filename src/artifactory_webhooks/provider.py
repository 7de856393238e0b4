"""Provider entry point: one webhook resource per domain, sharing a client."""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

import structlog

from artifactory_webhooks.client import ArtifactoryClient
from artifactory_webhooks.domain.enums import WebhookDomain
from artifactory_webhooks.logging_config import configure_logging
from artifactory_webhooks.otel import setup_otel, shutdown_otel
from artifactory_webhooks.resource import WebhookResource
from artifactory_webhooks.settings import Settings, get_settings

logger = structlog.get_logger(__name__)


def resource_name(domain: WebhookDomain) -> str:
    return f"artifactory_{domain.value}_webhook"


class WebhookProvider:
    """Usage::

        async with WebhookProvider() as provider:
            resource = provider.resource("artifactory_docker_webhook")
            await resource.create(data)
    """

    def __init__(self, settings: Settings | None = None, *, client: ArtifactoryClient | None = None):
        self._settings = settings or get_settings()
        self._client = client or ArtifactoryClient.from_settings(self._settings)
        self._resources: Mapping[str, WebhookResource] = MappingProxyType(
            {resource_name(domain): WebhookResource(domain, self._client) for domain in WebhookDomain}
        )

    @property
    def resources(self) -> Mapping[str, WebhookResource]:
        return self._resources

    def resource(self, name: str) -> WebhookResource:
        try:
            return self._resources[name]
        except KeyError:
            raise KeyError(f"Unknown resource type: {name}") from None

    async def __aenter__(self) -> "WebhookProvider":
        configure_logging(self._settings.log_level)
        setup_otel(self._settings)
        try:
            await self._client.__aenter__()
        except BaseException:
            shutdown_otel()
            raise
        logger.debug("provider configured", url=str(self._settings.url), resources=len(self._resources))
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._client.__aexit__(exc_type, exc, tb)
        shutdown_otel()
