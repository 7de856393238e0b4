"""Wire models exchanged with the event service."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, model_validator
from pydantic.alias_generators import to_camel

from artifactory_webhooks.domain.enums import HandlerType, WebhookDomain


class WireModel(BaseModel):
    """Base for payloads read from the event service.

    The service sends ``null`` for collections it has no value for, so null
    fields fall back to the model defaults.
    """

    @model_validator(mode="before")
    @classmethod
    def _nulls_as_defaults(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class CriteriaModel(WireModel):
    """Base of every criteria variant. Criteria keys are camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmptyCriteria(CriteriaModel):
    """Criteria of domains that have nothing to filter on."""


class PatternCriteria(CriteriaModel):
    include_patterns: list[str] = Field(default_factory=list)
    exclude_patterns: list[str] = Field(default_factory=list)


class RepoCriteria(PatternCriteria):
    any_local: bool = False
    any_remote: bool = False
    any_federated: bool = False
    repo_keys: list[str] = Field(default_factory=list)


class BuildCriteria(PatternCriteria):
    any_build: bool = False
    selected_builds: list[str] = Field(default_factory=list)


class ReleaseBundleCriteria(PatternCriteria):
    any_release_bundle: bool = False
    registered_release_bundles_names: list[str] = Field(default_factory=list)


class ReleaseBundleV2Criteria(PatternCriteria):
    any_release_bundle: bool = False
    selected_release_bundles: list[str] = Field(default_factory=list)


class ReleaseBundleV2PromotionCriteria(PatternCriteria):
    selected_environments: list[str] = Field(default_factory=list)


class KeyValuePair(WireModel):
    name: str
    value: str


class Handler(WireModel):
    handler_type: HandlerType = HandlerType.WEBHOOK
    url: str
    secret: str = ""
    use_secret_for_signing: bool = False
    proxy: str = ""
    custom_http_headers: list[KeyValuePair] | None = None


class EventFilter(WireModel):
    domain: WebhookDomain
    event_types: list[str] = Field(default_factory=list)
    criteria: SerializeAsAny[CriteriaModel] | None = None


class WebhookSubscription(WireModel):
    key: str
    description: str = ""
    enabled: bool = True
    event_filter: EventFilter
    handlers: list[Handler] = Field(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        """Request body for create and update.

        Every field is sent, empty strings and nulls included.
        """
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_wire(
        cls, payload: dict[str, Any], criteria_model: type[CriteriaModel]
    ) -> "WebhookSubscription":
        """Decode a read response, typing ``criteria`` with ``criteria_model``.

        A subscription without criteria decodes to the zero value of the
        model.
        """
        data = dict(payload)
        event_filter = dict(data.get("event_filter") or {})
        raw_criteria = event_filter.get("criteria")
        if raw_criteria is None:
            event_filter["criteria"] = criteria_model()
        else:
            event_filter["criteria"] = criteria_model.model_validate(raw_criteria)
        data["event_filter"] = event_filter
        return cls.model_validate(data)


class ArtifactoryErrorDetail(WireModel):
    status: int = 0
    message: str = ""

    def __str__(self) -> str:
        return f"{self.status} - {self.message}"


class ArtifactoryErrorsResponse(WireModel):
    """Structured error body returned with non-2xx responses."""

    errors: list[ArtifactoryErrorDetail] = Field(default_factory=list)

    def __str__(self) -> str:
        return ", ".join(str(error) for error in self.errors)
