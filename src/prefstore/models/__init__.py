"""Data models for the preference snapshot and its updates."""

from prefstore.models._base import PrefBaseModel
from prefstore.models.snapshot import (
    DEFAULT_ACTIVITY_COLUMNS,
    ActivityColumn,
    ActivityDisplayMode,
    AppIcon,
    PreferenceSnapshot,
    Theme,
    default_snapshot,
    field_names,
    now_ms,
    resolve_field_name,
)
from prefstore.models.updates import (
    FieldUpdate,
    SetActivityColumns,
    SetActivityDisplayMode,
    SetActivityEventDefinition,
    SetActivityTimePeriod,
    SetAppIcon,
    SetDashboard,
    SetDevMode,
    SetDisableUpdateAlerts,
    SetFilterTestAccounts,
    SetHasSeenActivityOnboarding,
    SetHasSeenExceptionsOnboarding,
    SetHasSeenInsightsOnboarding,
    SetInsightsTimePeriod,
    SetOrganization,
    SetPosthogEndpoint,
    SetProject,
    SetReviewPromptTime,
    SetTheme,
    apply_update,
    field_update,
    update_variants,
)

__all__ = [
    "DEFAULT_ACTIVITY_COLUMNS",
    "ActivityColumn",
    "ActivityDisplayMode",
    "AppIcon",
    "FieldUpdate",
    "PrefBaseModel",
    "PreferenceSnapshot",
    "SetActivityColumns",
    "SetActivityDisplayMode",
    "SetActivityEventDefinition",
    "SetActivityTimePeriod",
    "SetAppIcon",
    "SetDashboard",
    "SetDevMode",
    "SetDisableUpdateAlerts",
    "SetFilterTestAccounts",
    "SetHasSeenActivityOnboarding",
    "SetHasSeenExceptionsOnboarding",
    "SetHasSeenInsightsOnboarding",
    "SetInsightsTimePeriod",
    "SetOrganization",
    "SetPosthogEndpoint",
    "SetProject",
    "SetReviewPromptTime",
    "SetTheme",
    "Theme",
    "apply_update",
    "default_snapshot",
    "field_names",
    "field_update",
    "now_ms",
    "resolve_field_name",
]
