"""Unit tests for domain/shared/types.py - Pydantic Annotated type constraints."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import BaseModel, ValidationError

from group_jukebox.domain.shared.types import (
    CatalogUri,
    DelaySeconds,
    HttpUrlStr,
    NonEmptyStr,
    PollAttempts,
    Popularity,
    QueuePositionInt,
    SearchLimit,
    UtcDatetimeField,
)


# ── Helper: build a one-field model for each type ────────────────────


def _model_for(annotation, field_name: str = "v"):
    """Dynamically create a Pydantic model with a single field of the given type."""
    return type("M", (BaseModel,), {"__annotations__": {field_name: annotation}})


@pytest.mark.parametrize(
    "annotation,valid,invalid",
    [
        (Popularity, [0, 55, 100], [-1, 101]),
        (QueuePositionInt, [0, 3], [-1]),
        (SearchLimit, [1, 50], [0, 51]),
        (PollAttempts, [1, 20], [0, 21]),
        (DelaySeconds, [0.0, 0.3, 10.0], [-0.1, 10.5]),
        (NonEmptyStr, ["x"], [""]),
        (CatalogUri, ["spotify:track:abc"], ["", "x" * 513]),
        (HttpUrlStr, ["https://i.scdn.co/image/a", "http://x"], ["ftp://x", "i.scdn.co"]),
    ],
)
def test_constraints(annotation, valid, invalid):
    model = _model_for(annotation)

    for value in valid:
        assert model(v=value).v == value
    for value in invalid:
        with pytest.raises(ValidationError):
            model(v=value)


class TestUtcDatetimeField:
    def test_naive_datetime_rejected(self):
        model = _model_for(UtcDatetimeField)

        with pytest.raises(ValidationError):
            model(v=datetime(2024, 1, 1, 12, 0))

    def test_aware_datetime_normalised_to_utc(self):
        model = _model_for(UtcDatetimeField)
        cet = timezone(timedelta(hours=1))

        value = model(v=datetime(2024, 1, 1, 13, 0, tzinfo=cet)).v

        assert value == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        assert value.tzinfo == UTC
