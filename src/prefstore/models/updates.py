"""Typed single-field updates.

Every preference field has exactly one update variant carrying a value of
that field's type.  The variants form a closed union discriminated by the
``field`` tag, and :func:`apply_update` is the single place where an update
turns into a new snapshot.
"""

from __future__ import annotations

import copy
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from prefstore.models.snapshot import (
    ActivityColumn,
    ActivityDisplayMode,
    AppIcon,
    PreferenceSnapshot,
    Theme,
    resolve_field_name,
)


class _FieldUpdate(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    field: str
    value: Any


class SetAppIcon(_FieldUpdate):
    field: Literal["app_icon"] = "app_icon"
    value: AppIcon


class SetDevMode(_FieldUpdate):
    field: Literal["dev_mode"] = "dev_mode"
    value: bool


class SetTheme(_FieldUpdate):
    field: Literal["theme"] = "theme"
    value: Theme


class SetProject(_FieldUpdate):
    field: Literal["project"] = "project"
    value: str | None


class SetOrganization(_FieldUpdate):
    field: Literal["organization"] = "organization"
    value: str | None


class SetDashboard(_FieldUpdate):
    field: Literal["dashboard"] = "dashboard"
    value: str | None


class SetActivityDisplayMode(_FieldUpdate):
    field: Literal["activity_display_mode"] = "activity_display_mode"
    value: ActivityDisplayMode


class SetActivityColumns(_FieldUpdate):
    field: Literal["activity_columns"] = "activity_columns"
    value: list[ActivityColumn]


class SetPosthogEndpoint(_FieldUpdate):
    field: Literal["posthog_endpoint"] = "posthog_endpoint"
    value: str


class SetActivityTimePeriod(_FieldUpdate):
    field: Literal["activity_time_period"] = "activity_time_period"
    value: str


class SetActivityEventDefinition(_FieldUpdate):
    field: Literal["activity_event_definition"] = "activity_event_definition"
    value: str


class SetInsightsTimePeriod(_FieldUpdate):
    field: Literal["insights_time_period"] = "insights_time_period"
    value: str


class SetFilterTestAccounts(_FieldUpdate):
    field: Literal["filter_test_accounts"] = "filter_test_accounts"
    value: bool


class SetReviewPromptTime(_FieldUpdate):
    field: Literal["review_prompt_time"] = "review_prompt_time"
    value: int | None


class SetHasSeenActivityOnboarding(_FieldUpdate):
    field: Literal["has_seen_activity_onboarding"] = "has_seen_activity_onboarding"
    value: bool


class SetHasSeenInsightsOnboarding(_FieldUpdate):
    field: Literal["has_seen_insights_onboarding"] = "has_seen_insights_onboarding"
    value: bool


class SetHasSeenExceptionsOnboarding(_FieldUpdate):
    field: Literal["has_seen_exceptions_onboarding"] = "has_seen_exceptions_onboarding"
    value: bool


class SetDisableUpdateAlerts(_FieldUpdate):
    field: Literal["disable_update_alerts"] = "disable_update_alerts"
    value: bool


FieldUpdate = Annotated[
    SetAppIcon
    | SetDevMode
    | SetTheme
    | SetProject
    | SetOrganization
    | SetDashboard
    | SetActivityDisplayMode
    | SetActivityColumns
    | SetPosthogEndpoint
    | SetActivityTimePeriod
    | SetActivityEventDefinition
    | SetInsightsTimePeriod
    | SetFilterTestAccounts
    | SetReviewPromptTime
    | SetHasSeenActivityOnboarding
    | SetHasSeenInsightsOnboarding
    | SetHasSeenExceptionsOnboarding
    | SetDisableUpdateAlerts,
    Field(discriminator="field"),
]
"""Closed union of single-field updates, one variant per preference."""

_FIELD_UPDATE_ADAPTER: TypeAdapter[Any] = TypeAdapter(FieldUpdate)


def update_variants() -> dict[str, type[_FieldUpdate]]:
    """Map each field tag to its update variant class."""
    variants: dict[str, type[_FieldUpdate]] = {}
    for cls in _FieldUpdate.__subclasses__():
        tag = cls.model_fields["field"].default
        variants[tag] = cls
    return variants


def field_update(field: str, value: Any) -> FieldUpdate:
    """Build the typed update for *field* (snake_case or camelCase).

    Raises :class:`prefstore.exceptions.UnknownFieldError` for unknown
    names and :class:`pydantic.ValidationError` when *value* does not fit
    the field's domain.
    """
    name = resolve_field_name(field)
    update: FieldUpdate = _FIELD_UPDATE_ADAPTER.validate_python({"field": name, "value": value})
    return update


def apply_update(snapshot: PreferenceSnapshot, update: FieldUpdate) -> PreferenceSnapshot:
    """Return a copy of *snapshot* with the single field named by *update* replaced."""
    return snapshot.model_copy(update={update.field: copy.deepcopy(update.value)})
