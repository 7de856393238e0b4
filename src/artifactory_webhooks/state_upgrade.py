"""Persisted state migrations between schema versions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from artifactory_webhooks.domain.schema import CURRENT_SCHEMA_VERSION, SCHEMA_VERSION_V1

V1_HANDLER_FIELDS = ("url", "secret", "proxy", "custom_http_headers")


def upgrade_state_v1(raw_state: dict[str, Any]) -> dict[str, Any]:
    """Move the flat v1 handler fields into a single-element ``handler`` list."""
    state = dict(raw_state)
    handler = {name: state.pop(name) for name in V1_HANDLER_FIELDS if name in state}
    if handler:
        state["handler"] = [handler]
    return state


@dataclass(frozen=True, slots=True)
class StateUpgrader:
    version: int
    upgrade: Callable[[dict[str, Any]], dict[str, Any]]


STATE_UPGRADERS: tuple[StateUpgrader, ...] = (
    StateUpgrader(version=SCHEMA_VERSION_V1, upgrade=upgrade_state_v1),
)


def upgrade_state(raw_state: dict[str, Any], from_version: int) -> dict[str, Any]:
    """Apply every upgrader from ``from_version`` up to the current version."""
    if from_version > CURRENT_SCHEMA_VERSION:
        raise ValueError(
            f"State version {from_version} is newer than supported version {CURRENT_SCHEMA_VERSION}"
        )
    state = raw_state
    for upgrader in STATE_UPGRADERS:
        if upgrader.version >= from_version:
            state = upgrader.upgrade(state)
    return state
