"""Per-variant criteria codecs.

``unpack`` turns a configuration criteria block into a typed criteria model,
``pack`` turns a model back into the variant specific configuration fields
and ``validate`` rejects blocks the event service would not accept.
Include and exclude patterns are shared by every variant and are handled by
the callers in :mod:`artifactory_webhooks.marshal`.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from artifactory_webhooks.core.exceptions import CriteriaValidationError
from artifactory_webhooks.domain.enums import CriteriaKind
from artifactory_webhooks.domain.models import (
    BuildCriteria,
    CriteriaModel,
    EmptyCriteria,
    PatternCriteria,
    ReleaseBundleCriteria,
    ReleaseBundleV2Criteria,
    ReleaseBundleV2PromotionCriteria,
    RepoCriteria,
)

UnpackFn = Callable[[Mapping[str, Any], PatternCriteria], CriteriaModel]
PackFn = Callable[[Any], dict[str, Any]]
ValidateFn = Callable[[Mapping[str, Any]], None]


def string_list(values: Iterable[Any] | None) -> list[str]:
    """Sorted list out of a configuration set; ``None`` is empty."""
    if not values:
        return []
    return sorted(str(value) for value in values)


def _flag(block: Mapping[str, Any], name: str) -> bool:
    return bool(block.get(name) or False)


# repo


def unpack_repo_criteria(block: Mapping[str, Any], base: PatternCriteria) -> RepoCriteria:
    return RepoCriteria(
        include_patterns=base.include_patterns,
        exclude_patterns=base.exclude_patterns,
        any_local=_flag(block, "any_local"),
        any_remote=_flag(block, "any_remote"),
        any_federated=_flag(block, "any_federated"),
        repo_keys=string_list(block.get("repo_keys")),
    )


def pack_repo_criteria(criteria: RepoCriteria) -> dict[str, Any]:
    return {
        "any_local": criteria.any_local,
        "any_remote": criteria.any_remote,
        "any_federated": criteria.any_federated,
        "repo_keys": set(criteria.repo_keys),
    }


def validate_repo_criteria(block: Mapping[str, Any]) -> None:
    any_repo = _flag(block, "any_local") or _flag(block, "any_remote") or _flag(block, "any_federated")
    if not any_repo and not block.get("repo_keys"):
        raise CriteriaValidationError(
            "repo_keys cannot be empty when any_local, any_remote, and any_federated are false"
        )


# build


def unpack_build_criteria(block: Mapping[str, Any], base: PatternCriteria) -> BuildCriteria:
    return BuildCriteria(
        include_patterns=base.include_patterns,
        exclude_patterns=base.exclude_patterns,
        any_build=_flag(block, "any_build"),
        selected_builds=string_list(block.get("selected_builds")),
    )


def pack_build_criteria(criteria: BuildCriteria) -> dict[str, Any]:
    return {
        "any_build": criteria.any_build,
        "selected_builds": set(criteria.selected_builds),
    }


def validate_build_criteria(block: Mapping[str, Any]) -> None:
    if (
        not _flag(block, "any_build")
        and not block.get("selected_builds")
        and not block.get("include_patterns")
    ):
        raise CriteriaValidationError(
            "selected_builds or include_patterns cannot be empty when any_build is false"
        )


# release bundle (v1 model, also used by distribution and destination)


def unpack_release_bundle_criteria(
    block: Mapping[str, Any], base: PatternCriteria
) -> ReleaseBundleCriteria:
    return ReleaseBundleCriteria(
        include_patterns=base.include_patterns,
        exclude_patterns=base.exclude_patterns,
        any_release_bundle=_flag(block, "any_release_bundle"),
        registered_release_bundles_names=string_list(block.get("registered_release_bundle_names")),
    )


def pack_release_bundle_criteria(criteria: ReleaseBundleCriteria) -> dict[str, Any]:
    return {
        "any_release_bundle": criteria.any_release_bundle,
        "registered_release_bundle_names": set(criteria.registered_release_bundles_names),
    }


def validate_release_bundle_criteria(block: Mapping[str, Any]) -> None:
    if not _flag(block, "any_release_bundle") and not block.get("registered_release_bundle_names"):
        raise CriteriaValidationError(
            "registered_release_bundle_names cannot be empty when any_release_bundle is false"
        )


# release bundle v2


def unpack_release_bundle_v2_criteria(
    block: Mapping[str, Any], base: PatternCriteria
) -> ReleaseBundleV2Criteria:
    return ReleaseBundleV2Criteria(
        include_patterns=base.include_patterns,
        exclude_patterns=base.exclude_patterns,
        any_release_bundle=_flag(block, "any_release_bundle"),
        selected_release_bundles=string_list(block.get("selected_release_bundles")),
    )


def pack_release_bundle_v2_criteria(criteria: ReleaseBundleV2Criteria) -> dict[str, Any]:
    return {
        "any_release_bundle": criteria.any_release_bundle,
        "selected_release_bundles": set(criteria.selected_release_bundles),
    }


def validate_release_bundle_v2_criteria(block: Mapping[str, Any]) -> None:
    if not _flag(block, "any_release_bundle") and not block.get("selected_release_bundles"):
        raise CriteriaValidationError(
            "selected_release_bundles cannot be empty when any_release_bundle is false"
        )


# release bundle v2 promotion


def unpack_release_bundle_v2_promotion_criteria(
    block: Mapping[str, Any], base: PatternCriteria
) -> ReleaseBundleV2PromotionCriteria:
    return ReleaseBundleV2PromotionCriteria(
        include_patterns=base.include_patterns,
        exclude_patterns=base.exclude_patterns,
        selected_environments=string_list(block.get("selected_environments")),
    )


def pack_release_bundle_v2_promotion_criteria(
    criteria: ReleaseBundleV2PromotionCriteria,
) -> dict[str, Any]:
    return {"selected_environments": set(criteria.selected_environments)}


# empty


def unpack_empty_criteria(block: Mapping[str, Any], base: PatternCriteria) -> EmptyCriteria:
    return EmptyCriteria()


def pack_empty_criteria(criteria: EmptyCriteria) -> dict[str, Any]:
    return {}


def skip_validation(block: Mapping[str, Any]) -> None:
    return None


@dataclass(frozen=True, slots=True)
class CriteriaCodec:
    """Model plus the unpack/pack/validate triplet of one criteria variant."""

    model: type[CriteriaModel]
    unpack: UnpackFn
    pack: PackFn
    validate: ValidateFn


CRITERIA_CODECS: Mapping[CriteriaKind, CriteriaCodec] = MappingProxyType(
    {
        CriteriaKind.REPO: CriteriaCodec(
            RepoCriteria, unpack_repo_criteria, pack_repo_criteria, validate_repo_criteria
        ),
        CriteriaKind.BUILD: CriteriaCodec(
            BuildCriteria, unpack_build_criteria, pack_build_criteria, validate_build_criteria
        ),
        CriteriaKind.RELEASE_BUNDLE: CriteriaCodec(
            ReleaseBundleCriteria,
            unpack_release_bundle_criteria,
            pack_release_bundle_criteria,
            validate_release_bundle_criteria,
        ),
        CriteriaKind.RELEASE_BUNDLE_V2: CriteriaCodec(
            ReleaseBundleV2Criteria,
            unpack_release_bundle_v2_criteria,
            pack_release_bundle_v2_criteria,
            validate_release_bundle_v2_criteria,
        ),
        CriteriaKind.RELEASE_BUNDLE_V2_PROMOTION: CriteriaCodec(
            ReleaseBundleV2PromotionCriteria,
            unpack_release_bundle_v2_promotion_criteria,
            pack_release_bundle_v2_promotion_criteria,
            skip_validation,
        ),
        CriteriaKind.EMPTY: CriteriaCodec(
            EmptyCriteria, unpack_empty_criteria, pack_empty_criteria, skip_validation
        ),
    }
)
