"""Delivery handler codec."""
from __future__ import annotations

from typing import Any, Iterable, Mapping

from artifactory_webhooks.domain.enums import HandlerType
from artifactory_webhooks.domain.models import Handler, KeyValuePair


def unpack_custom_headers(headers: Mapping[str, Any] | None) -> list[KeyValuePair] | None:
    if not headers:
        return None
    return [KeyValuePair(name=name, value=str(value)) for name, value in headers.items()]


def pack_custom_headers(pairs: Iterable[KeyValuePair]) -> dict[str, str]:
    return {pair.name: pair.value for pair in pairs}


def unpack_handlers(raw_handlers: Iterable[Mapping[str, Any]] | None) -> list[Handler]:
    """Build wire handlers from configuration ``handler`` blocks.

    Blocks with an empty ``url`` are skipped: set-typed blocks may be
    reported with an extra blank element on update.
    """
    handlers: list[Handler] = []
    for raw in raw_handlers or []:
        url = raw.get("url") or ""
        if not url:
            continue
        handlers.append(
            Handler(
                handler_type=HandlerType.WEBHOOK,
                url=url,
                secret=raw.get("secret") or "",
                use_secret_for_signing=bool(raw.get("use_secret_for_signing") or False),
                proxy=raw.get("proxy") or "",
                custom_http_headers=unpack_custom_headers(raw.get("custom_http_headers")),
            )
        )
    return handlers


def secret_for(prior_handlers: Iterable[Mapping[str, Any]] | None, url: str) -> str:
    """Secret of the prior handler whose url equals ``url``, or ``""``."""
    secret = ""
    for prior in prior_handlers or []:
        if prior.get("url") == url:
            secret = prior.get("secret") or ""
    return secret


def pack_handlers(
    prior_handlers: Iterable[Mapping[str, Any]] | None,
    handlers: Iterable[Handler],
) -> list[dict[str, Any]]:
    """Configuration blocks for ``handlers`` read back from the service.

    The service never returns secrets, so each secret is taken from the
    prior local handler with the same url.
    """
    prior = list(prior_handlers or [])
    packed: list[dict[str, Any]] = []
    for handler in handlers:
        block: dict[str, Any] = {
            "url": handler.url,
            "secret": secret_for(prior, handler.url),
            "use_secret_for_signing": handler.use_secret_for_signing,
            "proxy": handler.proxy,
        }
        if handler.custom_http_headers is not None:
            block["custom_http_headers"] = pack_custom_headers(handler.custom_http_headers)
        packed.append(block)
    return packed
