from __future__ import annotations

import pytest

from artifactory_webhooks.domain.enums import CriteriaKind
from artifactory_webhooks.domain.schema import apply_defaults, check_config, resource_schema
from tests.utils import docker_config


def test_defaults_fill_enabled_and_signing_flag():
    schema = resource_schema(CriteriaKind.REPO)

    config = apply_defaults(schema, docker_config())

    assert config["enabled"] is True
    assert config["handler"][0]["use_secret_for_signing"] is False
    assert config["criteria"][0]["any_remote"] is False


def test_defaults_keep_explicit_values():
    schema = resource_schema(CriteriaKind.REPO)

    config = apply_defaults(schema, docker_config(enabled=False))

    assert config["enabled"] is False


def test_check_config_reports_every_problem():
    schema = resource_schema(CriteriaKind.EMPTY)

    problems = check_config(schema, {"key": "a b", "event_types": [], "handler": [{"url": "not a url"}]})

    assert problems == [
        "key must not contain spaces",
        "event_types needs at least 1 item(s)",
        "handler.0.url expected an http or https URL, got 'not a url'",
    ]


def test_blank_handler_blocks_are_ignored():
    schema = resource_schema(CriteriaKind.EMPTY)
    config = {"key": "wh1", "event_types": ["locked"], "handler": [{"url": "https://h/"}, {"url": ""}]}

    assert check_config(schema, config) == []


def test_schema_is_cached_and_read_only():
    schema = resource_schema(CriteriaKind.BUILD, 2)

    assert schema is resource_schema(CriteriaKind.BUILD, 2)
    with pytest.raises(TypeError):
        schema["key"] = schema["description"]  # type: ignore[index]
    assert "criteria" in resource_schema(CriteriaKind.BUILD)
    assert "criteria" not in resource_schema(CriteriaKind.EMPTY)


def test_handler_urls_must_be_unique():
    schema = resource_schema(CriteriaKind.EMPTY)
    config = {
        "key": "wh1",
        "event_types": ["locked"],
        "handler": [{"url": "https://h/a"}, {"url": "https://h/b"}, {"url": "https://h/a"}],
    }

    assert check_config(schema, config) == ["handler.2.url duplicates handler.0.url"]
