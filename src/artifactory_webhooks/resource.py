"""Webhook resource controller: create/read/update/delete against the event service."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx
import structlog
from pydantic import ValidationError

from artifactory_webhooks.client import ArtifactoryClient
from artifactory_webhooks.core.exceptions import RemoteError
from artifactory_webhooks.domain.enums import WebhookDomain
from artifactory_webhooks.domain.models import ArtifactoryErrorsResponse, WebhookSubscription
from artifactory_webhooks.domain.schema import CURRENT_SCHEMA_VERSION, ResourceSchema, apply_defaults
from artifactory_webhooks.marshal import pack_webhook, unpack_webhook
from artifactory_webhooks.otel import get_tracer
from artifactory_webhooks.registry import DomainSpec, get_domain
from artifactory_webhooks.state_upgrade import upgrade_state
from artifactory_webhooks.validators import customize_diff

logger = structlog.get_logger(__name__)
tracer = get_tracer(__name__)


@dataclass
class ResourceData:
    """Host-facing record of one resource instance.

    ``id`` is empty while the subscription does not exist remotely.
    """

    id: str = ""
    values: dict[str, Any] = field(default_factory=dict)

    @property
    def exists(self) -> bool:
        return bool(self.id)


def remote_error(response: httpx.Response) -> RemoteError:
    """Build a :class:`RemoteError` from a non-2xx response."""
    try:
        body = ArtifactoryErrorsResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        return RemoteError(response.status_code, response.text or response.reason_phrase)
    message = str(body) or response.text
    return RemoteError(response.status_code, message, errors=body.errors)


class WebhookResource:
    """One webhook resource type, bound to a single domain."""

    schema_version = CURRENT_SCHEMA_VERSION

    def __init__(self, domain: WebhookDomain | str, client: ArtifactoryClient):
        self._spec: DomainSpec = get_domain(domain)
        self._client = client

    @property
    def domain(self) -> WebhookDomain:
        return self._spec.domain

    @property
    def schema(self) -> ResourceSchema:
        return self._spec.schema(self.schema_version)

    @property
    def deprecation_message(self) -> str | None:
        return self._spec.deprecation_message

    def _warn_if_deprecated(self) -> None:
        if self._spec.deprecation_message:
            logger.warning(self._spec.deprecation_message, domain=self.domain.value)

    def _subscription(self, data: ResourceData) -> WebhookSubscription:
        return unpack_webhook(apply_defaults(self.schema, data.values), self.domain)

    async def create(self, data: ResourceData) -> None:
        with tracer.start_as_current_span("webhook.create", attributes={"webhook.domain": self.domain.value}):
            self._warn_if_deprecated()
            subscription = self._subscription(data)
            logger.debug("create webhook", domain=self.domain.value, key=subscription.key)

            response = await self._client.create_subscription(subscription.to_wire())
            if response.is_error:
                raise remote_error(response)

            data.id = subscription.key
        await self.read(data)

    async def read(self, data: ResourceData) -> None:
        with tracer.start_as_current_span("webhook.read", attributes={"webhook.domain": self.domain.value}):
            logger.debug("read webhook", domain=self.domain.value, key=data.id)

            response = await self._client.get_subscription(data.id)
            if response.status_code == httpx.codes.NOT_FOUND:
                logger.info("webhook not found, removing from state", domain=self.domain.value, key=data.id)
                data.id = ""
                return
            if response.is_error:
                raise remote_error(response)

            subscription = WebhookSubscription.from_wire(response.json(), self._spec.criteria_model)
            data.values.update(pack_webhook(subscription, self.domain, prior=data.values))

    async def update(self, data: ResourceData) -> None:
        with tracer.start_as_current_span("webhook.update", attributes={"webhook.domain": self.domain.value}):
            self._warn_if_deprecated()
            subscription = self._subscription(data)
            logger.debug("update webhook", domain=self.domain.value, key=data.id)

            response = await self._client.update_subscription(data.id, subscription.to_wire())
            if response.is_error:
                raise remote_error(response)

            data.id = subscription.key
        await self.read(data)

    async def delete(self, data: ResourceData) -> None:
        with tracer.start_as_current_span("webhook.delete", attributes={"webhook.domain": self.domain.value}):
            logger.debug("delete webhook", domain=self.domain.value, key=data.id)

            response = await self._client.delete_subscription(data.id)
            if response.status_code == httpx.codes.NOT_FOUND:
                logger.info("webhook already deleted", domain=self.domain.value, key=data.id)
            elif response.is_error:
                raise remote_error(response)
            data.id = ""

    def import_state(self, key: str) -> ResourceData:
        """Passthrough import: the key is the id, a read fills in the rest."""
        return ResourceData(id=key)

    def customize_diff(self, proposed: Mapping[str, Any]) -> None:
        customize_diff(self.domain, proposed)

    def upgrade_state(self, raw_state: dict[str, Any], version: int) -> dict[str, Any]:
        return upgrade_state(raw_state, version)
