"""The preference snapshot and its default-value policy."""

from __future__ import annotations

import time
from enum import StrEnum

from pydantic import Field

from prefstore._constants import ALL_EVENTS, REVIEW_PROMPT_DELAY_MS, US_ENDPOINT
from prefstore.exceptions import UnknownFieldError
from prefstore.models._base import PrefBaseModel


def now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


def _default_review_prompt_time() -> int:
    return now_ms() + REVIEW_PROMPT_DELAY_MS


class AppIcon(StrEnum):
    DEFAULT = "default"
    ANGRY = "angry"
    NERD = "nerd"
    HAPPY_BLUE = "happy-blue"
    HAPPY_ORANGE = "happy-orange"
    SPACE = "space"
    COWBOY = "cowboy"
    CONSTRUCTION = "construction"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"


class ActivityDisplayMode(StrEnum):
    COMPACT = "compact"
    FULL = "full"


class ActivityColumn(StrEnum):
    EVENT = "event"
    URL = "url"
    PERSON = "person"
    TIMESTAMP = "timestamp"


DEFAULT_ACTIVITY_COLUMNS: tuple[ActivityColumn, ...] = (
    ActivityColumn.EVENT,
    ActivityColumn.URL,
    ActivityColumn.TIMESTAMP,
)


class PreferenceSnapshot(PrefBaseModel):
    """Complete set of client preferences at one instant."""

    app_icon: AppIcon = AppIcon.DEFAULT
    """The selected app icon."""
    dev_mode: bool = False
    theme: Theme = Theme.LIGHT
    project: str | None = None
    """Project id currently being viewed."""
    organization: str | None = None
    """Organization id currently being viewed."""
    dashboard: str | None = None
    """Dashboard currently being viewed."""
    activity_display_mode: ActivityDisplayMode = ActivityDisplayMode.FULL
    activity_columns: list[ActivityColumn] = Field(default_factory=lambda: list(DEFAULT_ACTIVITY_COLUMNS))
    """Columns shown in the activity table, in display order."""
    posthog_endpoint: str = US_ENDPOINT
    """Preferred API host. Not restricted to the US/EU cloud hosts."""
    activity_time_period: str = "-1dStart"
    activity_event_definition: str = ALL_EVENTS
    """Event definition the activity view filters by, or ``"all"``."""
    insights_time_period: str = "-7d"
    filter_test_accounts: bool = False
    review_prompt_time: int | None = Field(default_factory=_default_review_prompt_time)
    """Epoch milliseconds after which the user is asked for a review."""
    has_seen_activity_onboarding: bool = False
    has_seen_insights_onboarding: bool = False
    has_seen_exceptions_onboarding: bool = False
    disable_update_alerts: bool = False


def default_snapshot(
    now: int | None = None,
    *,
    review_prompt_delay_ms: int = REVIEW_PROMPT_DELAY_MS,
) -> PreferenceSnapshot:
    """Build a fresh default snapshot.

    ``reviewPromptTime`` is computed from *now* (epoch ms, defaults to the
    wall clock), so every fresh install gets its own offset.
    """
    if now is None:
        now = now_ms()
    return PreferenceSnapshot(review_prompt_time=now + review_prompt_delay_ms)


def field_names() -> tuple[str, ...]:
    """Attribute names of every preference field, in declaration order."""
    return tuple(PreferenceSnapshot.model_fields)


_ALIAS_TO_NAME: dict[str, str] = {
    info.alias or name: name for name, info in PreferenceSnapshot.model_fields.items()
}


def resolve_field_name(name: str) -> str:
    """Map a snake_case attribute or camelCase persisted name to the attribute.

    Raises :class:`UnknownFieldError` for names outside the fixed field set.
    """
    if name in PreferenceSnapshot.model_fields:
        return name
    resolved = _ALIAS_TO_NAME.get(name)
    if resolved is None:
        raise UnknownFieldError(name)
    return resolved
