"""Immutable value objects for the catalog bounded context."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from group_jukebox.domain.shared.exceptions import InvalidReferenceError

_URI_SCHEME: Final[str] = "spotify"

_LINK_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"https?://open\.spotify\.com/(?:intl-[a-z]{2}/)?(track|album|playlist)/([A-Za-z0-9]+)(?:\?.*)?$"
)
_URI_PATTERN: Final[re.Pattern[str]] = re.compile(r"^spotify:(track|album|playlist):([A-Za-z0-9]+)$")


class CatalogItemKind(StrEnum):
    """Kind of object returned by the catalog service."""

    TRACK = "track"
    ALBUM = "album"
    PLAYLIST = "playlist"

    @property
    def is_collection(self) -> bool:
        return self is not CatalogItemKind.TRACK


@dataclass(frozen=True)
class CatalogReference:
    """A direct pointer to one catalog object, parsed from a URI or share link."""

    kind: CatalogItemKind
    item_id: str

    def __str__(self) -> str:
        return self.uri

    @property
    def uri(self) -> str:
        return f"{_URI_SCHEME}:{self.kind.value}:{self.item_id}"

    @staticmethod
    def looks_like_reference(text: str | None) -> bool:
        """True when *text* is meant as a link/URI rather than a search phrase."""
        if not text:
            return False
        stripped = text.strip()
        return stripped.startswith(f"{_URI_SCHEME}:") or "open.spotify.com/" in stripped

    @classmethod
    def parse(cls, text: str, expected: CatalogItemKind | None = None) -> CatalogReference:
        """Parse a ``spotify:<kind>:<id>`` URI or an ``open.spotify.com`` link.

        Raises:
            InvalidReferenceError: if *text* is not a well-formed reference, or
                refers to a different kind than *expected*.
        """
        stripped = (text or "").strip()
        match = _URI_PATTERN.match(stripped) or _LINK_PATTERN.match(stripped)
        if match is None:
            raise InvalidReferenceError(stripped)

        reference = cls(kind=CatalogItemKind(match.group(1)), item_id=match.group(2))
        if expected is not None and reference.kind is not expected:
            raise InvalidReferenceError(
                stripped,
                f"Expected a {expected.value} link but got a {reference.kind.value} link",
            )
        return reference

    @staticmethod
    def is_valid_uri(uri: str | None, kind: CatalogItemKind | None = None) -> bool:
        if not uri:
            return False
        match = _URI_PATTERN.match(uri)
        if match is None:
            return False
        return kind is None or match.group(1) == kind.value
