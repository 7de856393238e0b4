from __future__ import annotations

import httpx
import pytest
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.trace import TracerProvider

from artifactory_webhooks import otel
from artifactory_webhooks.client import ArtifactoryClient
from artifactory_webhooks.domain.enums import WebhookDomain
from artifactory_webhooks.provider import WebhookProvider, resource_name
from artifactory_webhooks.resource import ResourceData
from artifactory_webhooks.settings import Settings
from tests.utils import docker_config, make_client


@pytest.fixture
def settings() -> Settings:
    return Settings(url="http://localhost:8082", access_token="token", log_level="DEBUG")


@pytest.fixture
def traced_settings():
    yield Settings(url="http://localhost:8082", otel_exporter_endpoint="http://127.0.0.1:4318")
    otel.shutdown_otel()


def test_provider_registers_a_resource_per_domain(settings):
    provider = WebhookProvider(settings)

    assert len(provider.resources) == 12
    assert "artifactory_docker_webhook" in provider.resources
    assert "artifactory_release_bundle_v2_promotion_webhook" in provider.resources
    for domain in WebhookDomain:
        assert provider.resources[resource_name(domain)].domain is domain


def test_unknown_resource_type(settings):
    provider = WebhookProvider(settings)

    with pytest.raises(KeyError, match="artifactory_npm_webhook"):
        provider.resource("artifactory_npm_webhook")


def test_client_built_from_settings(settings):
    client = ArtifactoryClient.from_settings(settings)

    assert client._base_url == "http://localhost:8082"
    assert client._token == "token"
    assert client._retry_max_attempts == settings.proxy_retry_max_attempts == 5


async def test_provider_round_trip(settings, artifactory_server, fake_artifactory):
    async with WebhookProvider(settings, client=make_client(artifactory_server)) as provider:
        resource = provider.resource("artifactory_docker_webhook")
        data = ResourceData(values=docker_config())

        await resource.create(data)
        await resource.delete(data)

    assert data.id == ""
    assert fake_artifactory.subscriptions == {}
    assert [method for method, _, _ in fake_artifactory.requests] == ["POST", "GET", "DELETE"]


async def test_tracing_follows_provider_lifecycle(traced_settings, artifactory_server):
    async with WebhookProvider(traced_settings, client=make_client(artifactory_server)):
        assert isinstance(otel._provider, TracerProvider)
        assert HTTPXClientInstrumentor().is_instrumented_by_opentelemetry

    assert otel._provider is None
    assert not HTTPXClientInstrumentor().is_instrumented_by_opentelemetry


async def test_failed_client_start_shuts_tracing_down(traced_settings, monkeypatch):
    client = ArtifactoryClient(base_url="http://localhost:8082")

    async def refuse():
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(client, "__aenter__", refuse)

    with pytest.raises(httpx.ConnectError):
        async with WebhookProvider(traced_settings, client=client):
            pass

    assert otel._provider is None
    assert not HTTPXClientInstrumentor().is_instrumented_by_opentelemetry
