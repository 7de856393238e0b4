from __future__ import annotations

import pytest

from artifactory_webhooks.core.exceptions import UnknownDomainError
from artifactory_webhooks.domain.enums import CriteriaKind, WebhookDomain
from artifactory_webhooks.domain.models import (
    BuildCriteria,
    EmptyCriteria,
    ReleaseBundleCriteria,
    ReleaseBundleV2PromotionCriteria,
    RepoCriteria,
)
from artifactory_webhooks.domain.schema import FieldKind
from artifactory_webhooks.registry import DOMAINS, RELEASE_BUNDLE_DEPRECATION, get_domain


def test_registry_covers_every_domain():
    assert set(DOMAINS) == set(WebhookDomain)
    assert len(DOMAINS) == 12
    for spec in DOMAINS.values():
        assert spec.event_types


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        DOMAINS[WebhookDomain.DOCKER] = DOMAINS[WebhookDomain.BUILD]  # type: ignore[index]


def test_get_domain_accepts_enum_and_string():
    assert get_domain("docker") is get_domain(WebhookDomain.DOCKER)


@pytest.mark.parametrize("name", ["", "npm", "Docker", "release_bundle_v3"])
def test_get_domain_unknown_fails(name):
    with pytest.raises(UnknownDomainError):
        get_domain(name)


@pytest.mark.parametrize(
    ("domain", "kind", "model"),
    [
        (WebhookDomain.ARTIFACT, CriteriaKind.REPO, RepoCriteria),
        (WebhookDomain.DOCKER, CriteriaKind.REPO, RepoCriteria),
        (WebhookDomain.BUILD, CriteriaKind.BUILD, BuildCriteria),
        (WebhookDomain.DESTINATION, CriteriaKind.RELEASE_BUNDLE, ReleaseBundleCriteria),
        (
            WebhookDomain.RELEASE_BUNDLE_V2_PROMOTION,
            CriteriaKind.RELEASE_BUNDLE_V2_PROMOTION,
            ReleaseBundleV2PromotionCriteria,
        ),
        (WebhookDomain.USER, CriteriaKind.EMPTY, EmptyCriteria),
        (WebhookDomain.ARTIFACT_LIFECYCLE, CriteriaKind.EMPTY, EmptyCriteria),
    ],
)
def test_domain_criteria_pairing(domain, kind, model):
    spec = get_domain(domain)
    assert spec.criteria_kind is kind
    assert spec.criteria_model is model
    assert isinstance(spec.criteria_model(), model)


def test_event_types_of_docker():
    assert get_domain("docker").event_types == {"pushed", "deleted", "promoted"}


def test_domains_without_criteria_block():
    without = {domain for domain, spec in DOMAINS.items() if not spec.has_criteria}
    assert without == {WebhookDomain.USER, WebhookDomain.ARTIFACT_LIFECYCLE}


def test_only_artifactory_release_bundle_is_deprecated():
    deprecated = {domain for domain, spec in DOMAINS.items() if spec.deprecation_message}
    assert deprecated == {WebhookDomain.ARTIFACTORY_RELEASE_BUNDLE}
    assert get_domain("artifactory_release_bundle").deprecation_message == RELEASE_BUNDLE_DEPRECATION


def test_schema_versions_differ_in_handler_shape():
    spec = get_domain("artifact")

    legacy = spec.schema(1)
    assert "handler" not in legacy
    assert legacy["url"].required
    assert legacy["secret"].sensitive

    current = spec.schema()
    assert "url" not in current
    handler = current["handler"]
    assert handler.kind is FieldKind.BLOCK_SET
    assert handler.min_items == 1
    assert set(handler.block) == {"url", "secret", "use_secret_for_signing", "proxy", "custom_http_headers"}


def test_schema_rejects_unknown_version():
    with pytest.raises(ValueError):
        get_domain("artifact").schema(3)
