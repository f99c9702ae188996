"""Tests for the preference snapshot, its defaults and field updates."""

from __future__ import annotations

import pydantic
import pytest

from prefstore._constants import REVIEW_PROMPT_DELAY_MS
from prefstore.exceptions import UnknownFieldError
from prefstore.models import (
    ActivityColumn,
    ActivityDisplayMode,
    AppIcon,
    PreferenceSnapshot,
    SetActivityColumns,
    SetTheme,
    Theme,
    apply_update,
    default_snapshot,
    field_names,
    field_update,
    now_ms,
    resolve_field_name,
    update_variants,
)

# ------------------------------------------------------------------
# Defaults
# ------------------------------------------------------------------


class TestDefaults:
    def test_every_field_has_documented_default(self) -> None:
        snapshot = default_snapshot(1_000)

        assert snapshot.app_icon == AppIcon.DEFAULT
        assert snapshot.dev_mode is False
        assert snapshot.theme == Theme.LIGHT
        assert snapshot.project is None
        assert snapshot.organization is None
        assert snapshot.dashboard is None
        assert snapshot.activity_display_mode == ActivityDisplayMode.FULL
        assert snapshot.activity_columns == ["event", "url", "timestamp"]
        assert snapshot.posthog_endpoint == "https://us.posthog.com"
        assert snapshot.activity_time_period == "-1dStart"
        assert snapshot.activity_event_definition == "all"
        assert snapshot.insights_time_period == "-7d"
        assert snapshot.filter_test_accounts is False
        assert snapshot.review_prompt_time == 1_000 + REVIEW_PROMPT_DELAY_MS
        assert snapshot.has_seen_activity_onboarding is False
        assert snapshot.has_seen_insights_onboarding is False
        assert snapshot.has_seen_exceptions_onboarding is False
        assert snapshot.disable_update_alerts is False

    def test_review_prompt_time_is_three_days_from_construction(self) -> None:
        before = now_ms()
        snapshot = PreferenceSnapshot()
        after = now_ms()

        assert snapshot.review_prompt_time is not None
        assert before + REVIEW_PROMPT_DELAY_MS <= snapshot.review_prompt_time <= after + REVIEW_PROMPT_DELAY_MS
        assert REVIEW_PROMPT_DELAY_MS == 3 * 24 * 60 * 60 * 1000

    def test_custom_review_prompt_delay(self) -> None:
        assert default_snapshot(500, review_prompt_delay_ms=0).review_prompt_time == 500

    def test_default_column_lists_are_independent(self) -> None:
        first = PreferenceSnapshot()
        second = PreferenceSnapshot()
        first.activity_columns.append(ActivityColumn.PERSON)
        assert second.activity_columns == ["event", "url", "timestamp"]

    def test_snapshot_is_frozen(self) -> None:
        snapshot = default_snapshot()
        with pytest.raises(pydantic.ValidationError):
            snapshot.theme = Theme.DARK  # type: ignore[misc]


# ------------------------------------------------------------------
# Field names and storage mapping
# ------------------------------------------------------------------


def test_storage_dict_uses_camel_case_names() -> None:
    data = default_snapshot(0).to_storage_dict()

    assert set(data) == {
        "appIcon",
        "devMode",
        "theme",
        "project",
        "organization",
        "dashboard",
        "activityDisplayMode",
        "activityColumns",
        "posthogEndpoint",
        "activityTimePeriod",
        "activityEventDefinition",
        "insightsTimePeriod",
        "filterTestAccounts",
        "reviewPromptTime",
        "hasSeenActivityOnboarding",
        "hasSeenInsightsOnboarding",
        "hasSeenExceptionsOnboarding",
        "disableUpdateAlerts",
    }
    assert data["appIcon"] == "default"
    assert data["activityColumns"] == ["event", "url", "timestamp"]
    assert data["reviewPromptTime"] == REVIEW_PROMPT_DELAY_MS


def test_snapshot_ignores_unknown_keys() -> None:
    snapshot = PreferenceSnapshot.model_validate({"theme": "dark", "legacyFlag": True})
    assert snapshot.theme == Theme.DARK
    assert "legacyFlag" not in snapshot.to_storage_dict()


def test_resolve_field_name_accepts_both_spellings() -> None:
    assert resolve_field_name("activity_columns") == "activity_columns"
    assert resolve_field_name("activityColumns") == "activity_columns"
    assert resolve_field_name("hasSeenExceptionsOnboarding") == "has_seen_exceptions_onboarding"


def test_resolve_field_name_rejects_unknown() -> None:
    with pytest.raises(UnknownFieldError) as excinfo:
        resolve_field_name("fontSize")
    assert excinfo.value.field == "fontSize"
    assert isinstance(excinfo.value, KeyError)
    assert "fontSize" in str(excinfo.value)


# ------------------------------------------------------------------
# Field updates
# ------------------------------------------------------------------


class TestFieldUpdates:
    def test_one_variant_per_field(self) -> None:
        assert set(update_variants()) == set(field_names())

    def test_field_update_builds_typed_variant(self) -> None:
        update = field_update("theme", "dark")
        assert isinstance(update, SetTheme)
        assert update.value is Theme.DARK

    def test_field_update_accepts_camel_case(self) -> None:
        update = field_update("activityColumns", ["event", "person"])
        assert isinstance(update, SetActivityColumns)
        assert update.value == [ActivityColumn.EVENT, ActivityColumn.PERSON]

    def test_field_update_rejects_out_of_domain_value(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            field_update("theme", "purple")
        with pytest.raises(pydantic.ValidationError):
            field_update("activityColumns", ["event", "referrer"])

    def test_field_update_rejects_unknown_field(self) -> None:
        with pytest.raises(UnknownFieldError):
            field_update("fontSize", 12)

    def test_nullable_fields_accept_none(self) -> None:
        assert field_update("project", None).value is None
        assert field_update("reviewPromptTime", None).value is None

    def test_posthog_endpoint_is_free_form(self) -> None:
        update = field_update("posthogEndpoint", "https://posthog.example.com")
        assert update.value == "https://posthog.example.com"

    def test_apply_update_replaces_only_one_field(self) -> None:
        before = default_snapshot(0)
        after = apply_update(before, field_update("theme", "dark"))

        assert after.theme == Theme.DARK
        assert before.theme == Theme.LIGHT
        assert after.model_dump(exclude={"theme"}) == before.model_dump(exclude={"theme"})

    def test_apply_update_does_not_share_list_values(self) -> None:
        update = field_update("activityColumns", ["event", "person"])
        after = apply_update(default_snapshot(0), update)
        after.activity_columns.append(ActivityColumn.URL)
        assert update.value == ["event", "person"]
