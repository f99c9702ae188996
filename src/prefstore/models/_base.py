"""Base model for persisted preference records.

Every preference model inherits from :class:`PrefBaseModel` which
provides:

* ``alias_generator=to_camel`` so the camelCase keys used by the
  persisted record map to snake_case attributes.
* ``extra="ignore"`` so keys written by other versions of the
  application are dropped instead of rejected.
* ``frozen=True`` so a snapshot can only change by replacement.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PrefBaseModel(BaseModel):
    """Base for preference models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_storage_dict(self) -> dict[str, Any]:
        """JSON-compatible mapping keyed by the persisted (camelCase) names."""
        return self.model_dump(mode="json", by_alias=True)
