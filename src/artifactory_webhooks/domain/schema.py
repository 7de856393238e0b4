"""Configuration shape of the webhook resources.

Two schema versions exist. Version 1 carried a single handler as flat
top-level fields (``url``, ``secret``, ``proxy``, ``custom_http_headers``);
version 2 nests handlers in a ``handler`` block set.
"""
from __future__ import annotations

from collections.abc import Mapping as MappingABC
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Callable, Mapping
from urllib.parse import urlparse

from artifactory_webhooks.domain.enums import CriteriaKind

SCHEMA_VERSION_V1 = 1
CURRENT_SCHEMA_VERSION = 2

Validator = Callable[[Any], "str | None"]


class FieldKind(str, Enum):
    STRING = "string"
    BOOL = "bool"
    STRING_SET = "string_set"
    STRING_MAP = "string_map"
    BLOCK_SET = "block_set"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Descriptor of a single configuration field."""

    kind: FieldKind
    required: bool = False
    default: Any = None
    sensitive: bool = False
    force_new: bool = False
    min_items: int | None = None
    max_items: int | None = None
    validator: Validator | None = None
    block: Mapping[str, "FieldSpec"] | None = None
    unique_field: str | None = None
    description: str = ""


ResourceSchema = Mapping[str, FieldSpec]


def _validate_key(value: Any) -> str | None:
    if not 2 <= len(value) <= 200:
        return "must be between 2 and 200 characters"
    if " " in value:
        return "must not contain spaces"
    return None


def _validate_description(value: Any) -> str | None:
    if len(value) > 1000:
        return "must be at most 1000 characters"
    return None


def _validate_http_url(value: Any) -> str | None:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return f"expected an http or https URL, got {value!r}"
    return None


def _base_fields() -> dict[str, FieldSpec]:
    return {
        "key": FieldSpec(
            FieldKind.STRING,
            required=True,
            force_new=True,
            validator=_validate_key,
            description="Webhook key. Must be between 2 and 200 characters and cannot contain spaces.",
        ),
        "description": FieldSpec(
            FieldKind.STRING,
            validator=_validate_description,
            description="Webhook description. Max length 1000 characters.",
        ),
        "enabled": FieldSpec(
            FieldKind.BOOL,
            default=True,
            description="Status of webhook.",
        ),
        "event_types": FieldSpec(
            FieldKind.STRING_SET,
            required=True,
            min_items=1,
            description="List of events in the domain that trigger the webhook.",
        ),
    }


def _handler_fields(version: int) -> dict[str, FieldSpec]:
    handler: dict[str, FieldSpec] = {
        "url": FieldSpec(
            FieldKind.STRING,
            required=True,
            validator=_validate_http_url,
            description="URL the webhook sends its payload to.",
        ),
        "secret": FieldSpec(
            FieldKind.STRING,
            sensitive=True,
            description="Secret authentication token sent to the configured URL.",
        ),
        "proxy": FieldSpec(
            FieldKind.STRING,
            description="Proxy key from the platform configuration.",
        ),
        "custom_http_headers": FieldSpec(
            FieldKind.STRING_MAP,
            description="Custom HTTP headers added to the webhook call.",
        ),
    }
    if version == SCHEMA_VERSION_V1:
        return handler

    handler["use_secret_for_signing"] = FieldSpec(
        FieldKind.BOOL,
        default=False,
        description="Use the secret to sign the payload instead of sending it as a header.",
    )
    return {
        "handler": FieldSpec(
            FieldKind.BLOCK_SET,
            required=True,
            min_items=1,
            block=MappingProxyType(handler),
            unique_field="url",
        )
    }


def _pattern_fields() -> dict[str, FieldSpec]:
    return {
        "include_patterns": FieldSpec(
            FieldKind.STRING_SET,
            description="Ant-style path expressions of the targets to include.",
        ),
        "exclude_patterns": FieldSpec(
            FieldKind.STRING_SET,
            description="Ant-style path expressions of the targets to exclude.",
        ),
    }


def _criteria_fields(kind: CriteriaKind) -> dict[str, FieldSpec] | None:
    if kind is CriteriaKind.EMPTY:
        return None

    fields = _pattern_fields()
    if kind is CriteriaKind.REPO:
        fields.update(
            any_local=FieldSpec(FieldKind.BOOL, default=False, description="Trigger on any local repository."),
            any_remote=FieldSpec(FieldKind.BOOL, default=False, description="Trigger on any remote repository."),
            any_federated=FieldSpec(
                FieldKind.BOOL, default=False, description="Trigger on any federated repository."
            ),
            repo_keys=FieldSpec(FieldKind.STRING_SET, description="Trigger on this list of repository keys."),
        )
    elif kind is CriteriaKind.BUILD:
        fields.update(
            any_build=FieldSpec(FieldKind.BOOL, default=False, description="Trigger on any build."),
            selected_builds=FieldSpec(FieldKind.STRING_SET, description="Trigger on this list of build names."),
        )
    elif kind is CriteriaKind.RELEASE_BUNDLE:
        fields.update(
            any_release_bundle=FieldSpec(
                FieldKind.BOOL, default=False, description="Trigger on any release bundle."
            ),
            registered_release_bundle_names=FieldSpec(
                FieldKind.STRING_SET, description="Trigger on this list of release bundle names."
            ),
        )
    elif kind is CriteriaKind.RELEASE_BUNDLE_V2:
        fields.update(
            any_release_bundle=FieldSpec(
                FieldKind.BOOL, default=False, description="Trigger on any release bundle."
            ),
            selected_release_bundles=FieldSpec(
                FieldKind.STRING_SET, description="Trigger on this list of release bundle names."
            ),
        )
    elif kind is CriteriaKind.RELEASE_BUNDLE_V2_PROMOTION:
        fields.update(
            selected_environments=FieldSpec(
                FieldKind.STRING_SET, description="Trigger on promotions to these environments."
            ),
        )
    return fields


@lru_cache
def resource_schema(kind: CriteriaKind, version: int = CURRENT_SCHEMA_VERSION) -> ResourceSchema:
    """Configuration shape for a criteria kind at ``version``."""
    if version not in (SCHEMA_VERSION_V1, CURRENT_SCHEMA_VERSION):
        raise ValueError(f"Unsupported schema version: {version}")

    fields = _base_fields()
    criteria = _criteria_fields(kind)
    if criteria is not None:
        fields["criteria"] = FieldSpec(
            FieldKind.BLOCK_SET,
            required=True,
            max_items=1,
            block=MappingProxyType(criteria),
            description="Specifies where the webhook will be applied.",
        )
    fields.update(_handler_fields(version))
    return MappingProxyType(fields)


def _is_unset(value: Any) -> bool:
    return value is None or value == ""


def _block_items(value: Any) -> list[Mapping[str, Any]]:
    if isinstance(value, MappingABC):
        return [value]
    return list(value)


def _is_blank_block(item: Mapping[str, Any]) -> bool:
    return not any(item.values())


def _check_unique(path: str, name: str, items: list[Mapping[str, Any]]) -> list[str]:
    problems: list[str] = []
    first_seen: dict[Any, int] = {}
    for index, item in enumerate(items):
        value = item.get(name)
        if _is_unset(value):
            continue
        if value in first_seen:
            problems.append(f"{path}.{index}.{name} duplicates {path}.{first_seen[value]}.{name}")
        else:
            first_seen[value] = index
    return problems


def _check_field(path: str, spec: FieldSpec, value: Any) -> list[str]:
    if _is_unset(value):
        return [f"{path} is required"] if spec.required else []

    problems: list[str] = []
    if spec.kind in (FieldKind.STRING_SET, FieldKind.BLOCK_SET):
        items = _block_items(value) if spec.kind is FieldKind.BLOCK_SET else list(value)
        if spec.kind is FieldKind.BLOCK_SET:
            items = [item for item in items if not _is_blank_block(item)]
        if spec.min_items is not None and len(items) < spec.min_items:
            problems.append(f"{path} needs at least {spec.min_items} item(s)")
        if spec.max_items is not None and len(items) > spec.max_items:
            problems.append(f"{path} accepts at most {spec.max_items} item(s)")
        if spec.kind is FieldKind.BLOCK_SET and spec.block is not None:
            for index, item in enumerate(items):
                for name, sub_spec in spec.block.items():
                    problems.extend(_check_field(f"{path}.{index}.{name}", sub_spec, item.get(name)))
        if spec.kind is FieldKind.BLOCK_SET and spec.unique_field is not None:
            problems.extend(_check_unique(path, spec.unique_field, items))
    elif spec.kind is FieldKind.STRING and spec.validator is not None:
        message = spec.validator(value)
        if message:
            problems.append(f"{path} {message}")
    return problems


def check_config(schema: ResourceSchema, config: Mapping[str, Any]) -> list[str]:
    """Return every schema problem found in ``config``."""
    problems: list[str] = []
    for name, spec in schema.items():
        problems.extend(_check_field(name, spec, config.get(name)))
    return problems


def apply_defaults(schema: ResourceSchema, config: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of ``config`` with schema defaults filled in, nested blocks included."""
    result = dict(config)
    for name, spec in schema.items():
        value = result.get(name)
        if value is None and spec.default is not None:
            result[name] = spec.default
        elif spec.kind is FieldKind.BLOCK_SET and spec.block is not None and value is not None:
            result[name] = [apply_defaults(spec.block, item) for item in _block_items(value)]
    return result
