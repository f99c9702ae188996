"""Internal constants shared across the library."""

STORAGE_KEY = "client-storage"
STORAGE_FORMAT_VERSION = 0

US_ENDPOINT = "https://us.posthog.com"
EU_ENDPOINT = "https://eu.posthog.com"

#: Sentinel for "no event definition filter" in the activity view.
ALL_EVENTS = "all"

# ------------------------------------------------------------------
# Review prompt
# ------------------------------------------------------------------

_MS_PER_DAY = 24 * 60 * 60 * 1000

#: Delay after first use before asking the user for a store review.
REVIEW_PROMPT_DELAY_MS: int = 3 * _MS_PER_DAY
