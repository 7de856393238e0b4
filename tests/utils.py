from __future__ import annotations

import copy
import json
from collections import defaultdict
from typing import Any

from aiohttp import web
from aiohttp.test_utils import TestServer

from artifactory_webhooks.client import SUBSCRIPTIONS_PATH, ArtifactoryClient

PROXY_NOT_FOUND_BODY = json.dumps(
    {"errors": [{"status": 400, "message": "proxy with key 'corp-proxy' not found"}]}
)


def error_body(status: int, message: str) -> str:
    return json.dumps({"errors": [{"status": status, "message": message}]})


class FakeArtifactory:
    """In-process stand-in for the event service subscription API.

    Secrets are accepted on write and never returned on read, like the real
    service. Responses queued with :meth:`fail_next` are served before the
    normal handling of the given method.
    """

    def __init__(self) -> None:
        self.subscriptions: dict[str, dict[str, Any]] = {}
        self.requests: list[tuple[str, str, Any]] = []
        self.authorization: list[str | None] = []
        self._scripted: dict[str, list[tuple[int, str]]] = defaultdict(list)

    def fail_next(self, method: str, status: int, body: str, *, times: int = 1) -> None:
        self._scripted[method.upper()].extend([(status, body)] * times)

    def requests_for(self, method: str) -> list[tuple[str, str, Any]]:
        return [request for request in self.requests if request[0] == method]

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post(SUBSCRIPTIONS_PATH, self._create)
        app.router.add_get(SUBSCRIPTIONS_PATH + "/{key}", self._get)
        app.router.add_put(SUBSCRIPTIONS_PATH + "/{key}", self._update)
        app.router.add_delete(SUBSCRIPTIONS_PATH + "/{key}", self._delete)
        return app

    async def _record(self, request: web.Request) -> Any:
        body = await request.json() if request.can_read_body else None
        self.requests.append((request.method, request.path, body))
        self.authorization.append(request.headers.get("Authorization"))
        return body

    def _scripted_response(self, method: str) -> web.Response | None:
        queue = self._scripted.get(method)
        if not queue:
            return None
        status, body = queue.pop(0)
        return web.Response(status=status, text=body, content_type="application/json")

    @staticmethod
    def _without_secrets(body: dict[str, Any]) -> dict[str, Any]:
        stored = copy.deepcopy(body)
        for handler in stored.get("handlers") or []:
            handler.pop("secret", None)
        return stored

    async def _create(self, request: web.Request) -> web.Response:
        body = await self._record(request)
        scripted = self._scripted_response("POST")
        if scripted is not None:
            return scripted
        if body["key"] in self.subscriptions:
            return web.Response(
                status=409,
                text=error_body(409, f"Subscription {body['key']} already exists"),
                content_type="application/json",
            )
        self.subscriptions[body["key"]] = self._without_secrets(body)
        return web.Response(status=201)

    async def _get(self, request: web.Request) -> web.Response:
        await self._record(request)
        scripted = self._scripted_response("GET")
        if scripted is not None:
            return scripted
        key = request.match_info["key"]
        if key not in self.subscriptions:
            return web.Response(
                status=404,
                text=error_body(404, f"Subscription {key} not found"),
                content_type="application/json",
            )
        return web.json_response(self.subscriptions[key])

    async def _update(self, request: web.Request) -> web.Response:
        body = await self._record(request)
        scripted = self._scripted_response("PUT")
        if scripted is not None:
            return scripted
        key = request.match_info["key"]
        if key not in self.subscriptions:
            return web.Response(
                status=404,
                text=error_body(404, f"Subscription {key} not found"),
                content_type="application/json",
            )
        self.subscriptions[key] = self._without_secrets(body)
        return web.Response(status=200)

    async def _delete(self, request: web.Request) -> web.Response:
        await self._record(request)
        scripted = self._scripted_response("DELETE")
        if scripted is not None:
            return scripted
        key = request.match_info["key"]
        if self.subscriptions.pop(key, None) is None:
            return web.Response(
                status=404,
                text=error_body(404, f"Subscription {key} not found"),
                content_type="application/json",
            )
        return web.Response(status=204)


def make_client(server: TestServer, *, max_attempts: int = 3) -> ArtifactoryClient:
    return ArtifactoryClient(
        base_url=str(server.make_url("/")),
        access_token="test-token",
        proxy_retry_max_attempts=max_attempts,
        proxy_retry_wait_min_s=0,
        proxy_retry_wait_max_s=0,
    )


def docker_config(**overrides: Any) -> dict[str, Any]:
    config: dict[str, Any] = {
        "key": "wh1",
        "description": "docker pushes",
        "event_types": {"pushed"},
        "criteria": [
            {
                "any_local": True,
                "any_remote": False,
                "any_federated": False,
                "repo_keys": set(),
                "include_patterns": {"images/**"},
                "exclude_patterns": set(),
            }
        ],
        "handler": [{"url": "https://hooks.example.com/docker", "secret": "s3cr3t"}],
    }
    config.update(overrides)
    return config
