"""Async HTTP client for the event service subscription API."""
from __future__ import annotations

import re
from typing import Any
from urllib.parse import quote

import httpx
import structlog
from tenacity import AsyncRetrying, RetryCallState, retry_if_result, stop_after_attempt, wait_exponential

from artifactory_webhooks.settings import Settings

logger = structlog.get_logger(__name__)

SUBSCRIPTIONS_PATH = "/event/api/v1/subscriptions"

PROXY_NOT_FOUND_RE = re.compile(r"proxy with key '.*' not found")


def subscription_path(key: str) -> str:
    return f"{SUBSCRIPTIONS_PATH}/{quote(key, safe='')}"


def is_proxy_not_found(response: httpx.Response) -> bool:
    """True when the service has not resolved a proxy referenced by a handler yet."""
    return PROXY_NOT_FOUND_RE.search(response.text) is not None


def _last_response(retry_state: RetryCallState) -> httpx.Response:
    assert retry_state.outcome is not None
    return retry_state.outcome.result()


def _log_proxy_retry(retry_state: RetryCallState) -> None:
    logger.warning(
        "proxy not found, retrying subscription request",
        attempt=retry_state.attempt_number,
    )


class ArtifactoryClient:
    """Thin wrapper returning raw responses; callers classify status codes."""

    def __init__(
        self,
        *,
        base_url: str,
        access_token: str | None = None,
        timeout_s: float = 30.0,
        proxy_retry_max_attempts: int = 5,
        proxy_retry_wait_min_s: float = 1.0,
        proxy_retry_wait_max_s: float = 20.0,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = access_token
        self._timeout_s = timeout_s
        self._retry_max_attempts = proxy_retry_max_attempts
        self._retry_wait_min_s = proxy_retry_wait_min_s
        self._retry_wait_max_s = proxy_retry_wait_max_s
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ArtifactoryClient":
        token = settings.access_token.get_secret_value() if settings.access_token else None
        return cls(
            base_url=str(settings.url),
            access_token=token,
            timeout_s=settings.request_timeout_seconds,
            proxy_retry_max_attempts=settings.proxy_retry_max_attempts,
            proxy_retry_wait_min_s=settings.proxy_retry_wait_min_seconds,
            proxy_retry_wait_max_s=settings.proxy_retry_wait_max_seconds,
        )

    async def __aenter__(self) -> "ArtifactoryClient":
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        self._client = httpx.AsyncClient(
            base_url=self._base_url, headers=headers, timeout=self._timeout_s
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("Client is not started; use 'async with ArtifactoryClient(...)'.")
        return self._client

    async def _send_with_proxy_retry(
        self, method: str, url: str, body: dict[str, Any]
    ) -> httpx.Response:
        retrying = AsyncRetrying(
            retry=retry_if_result(is_proxy_not_found),
            stop=stop_after_attempt(self._retry_max_attempts),
            wait=wait_exponential(
                multiplier=self._retry_wait_min_s,
                min=self._retry_wait_min_s,
                max=self._retry_wait_max_s,
            ),
            before_sleep=_log_proxy_retry,
            retry_error_callback=_last_response,
        )
        return await retrying(self._http().request, method, url, json=body)

    async def create_subscription(self, body: dict[str, Any]) -> httpx.Response:
        return await self._send_with_proxy_retry("POST", SUBSCRIPTIONS_PATH, body)

    async def get_subscription(self, key: str) -> httpx.Response:
        return await self._http().get(subscription_path(key))

    async def update_subscription(self, key: str, body: dict[str, Any]) -> httpx.Response:
        return await self._send_with_proxy_retry("PUT", subscription_path(key), body)

    async def delete_subscription(self, key: str) -> httpx.Response:
        return await self._http().delete(subscription_path(key))
