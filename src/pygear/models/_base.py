"""Base model and timestamp coercion shared by all pygear models.

Every persisted model inherits from :class:`GearBaseModel` which provides:

* ``alias_generator=to_camel`` so the stored camelCase keys
  (``purchaseDate``, ``reportedById`` ...) map to snake_case fields.
* ``populate_by_name=True`` so callers can construct models with
  either spelling.

Timestamps go through :data:`GearTimestamp`, which accepts datetimes,
ISO-8601 strings (including date-only strings and a trailing ``Z``) and
epoch numbers, and always yields a timezone-aware UTC datetime.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(value: Any) -> datetime | None:
    """Coerce a stored timestamp into a UTC datetime.

    Returns ``None`` when the value is ``None`` or an empty string.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        ts = float(value)
        if ts >= _MS_THRESHOLD:
            ts /= 1000.0
        return datetime.fromtimestamp(ts, tz=UTC)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _require_timestamp(value: Any) -> datetime:
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValueError("timestamp must not be empty")
    return parsed


GearTimestamp = Annotated[datetime, BeforeValidator(_require_timestamp)]
"""Annotated type for required timestamps (always UTC-aware)."""

OptionalGearTimestamp = Annotated[datetime | None, BeforeValidator(parse_timestamp)]
"""Annotated type for optional timestamps (``None`` when unset)."""


class GearBaseModel(BaseModel):
    """Base for persisted pygear records."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_storage(self) -> dict[str, Any]:
        """Return the JSON-ready dict written to the key-value store."""
        return self.model_dump(mode="json", by_alias=True)
