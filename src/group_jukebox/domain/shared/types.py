"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across bounded contexts is defined here once,
so models can simply annotate their fields::

    from group_jukebox.domain.shared.types import CatalogUri, NonEmptyStr

    class MyModel(BaseModel):
        uri: CatalogUri
        name: NonEmptyStr
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BeforeValidator, Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

Popularity = Annotated[int, Field(ge=0, le=100)]
"""Catalog popularity score: 0 … 100."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

CatalogUri = Annotated[str, Field(min_length=1, max_length=512)]
"""Opaque catalog/device URI, e.g. ``spotify:track:<id>``."""

HttpUrlStr = Annotated[str, Field(pattern=r"^https?://")]
"""String that starts with http:// or https://."""


# ── Domain-specific numeric constraints ─────────────────────────────

QueuePositionInt = Annotated[int, Field(ge=0)]
"""Zero-based queue position."""

SearchLimit = Annotated[int, Field(ge=1, le=50)]
"""Catalog search page size: 1 … 50."""

PollAttempts = Annotated[int, Field(ge=1, le=20)]
"""Bounded poll attempt count."""

DelaySeconds = Annotated[float, Field(ge=0.0, le=10.0)]
"""Short fixed delay between device steps."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise to UTC."""
    if v.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    return v.astimezone(UTC)


UtcDatetimeField = Annotated[datetime, BeforeValidator(_ensure_utc)]
"""Timezone-aware datetime, normalised to UTC on input."""


def utcnow() -> datetime:
    return datetime.now(UTC)
