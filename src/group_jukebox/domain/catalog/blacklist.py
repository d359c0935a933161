"""Blacklist predicate and the pure partition used before enqueueing."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from group_jukebox.domain.catalog.entities import CatalogItem
from group_jukebox.domain.shared.messages import UserMessages

BlacklistPredicate = Callable[[str, str], bool]
"""``(name, artist) -> bool``; True means the item must not be queued."""

DEFAULT_SKIPPED_DISPLAY_LIMIT = 5


def allow_everything(name: str, artist: str) -> bool:
    return False


@dataclass(frozen=True)
class BlacklistPartition:
    allowed: list[CatalogItem] = field(default_factory=list)
    blocked: list[CatalogItem] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.allowed) + len(self.blocked)

    @property
    def all_blocked(self) -> bool:
        """Every input item was blocked, so nothing may be enqueued."""
        return bool(self.blocked) and not self.allowed

    @property
    def has_blocked(self) -> bool:
        return bool(self.blocked)

    def skipped_summary(self, limit: int = DEFAULT_SKIPPED_DISPLAY_LIMIT) -> str:
        """Warning line listing at most *limit* blocked names plus a remainder count."""
        if not self.blocked:
            return ""
        names = ", ".join(f"*{item.name}*" for item in self.blocked[:limit])
        if len(self.blocked) > limit:
            names += UserMessages.SKIPPED_MORE.format(count=len(self.blocked) - limit)
        return UserMessages.SKIPPED_BLACKLISTED.format(count=len(self.blocked), names=names)


def partition(
    items: Sequence[CatalogItem] | None, is_blacklisted: BlacklistPredicate
) -> BlacklistPartition:
    """Split *items* into allowed and blocked, keeping input order in each."""
    allowed: list[CatalogItem] = []
    blocked: list[CatalogItem] = []
    for item in items or ():
        if is_blacklisted(item.name, item.artist):
            blocked.append(item)
        else:
            allowed.append(item)
    return BlacklistPartition(allowed=allowed, blocked=blocked)


class TermBlacklist:
    """Case-insensitive blacklist over configured terms.

    A term matches when it appears in the track name or the artist name.
    Instances are callable so they can be passed wherever a
    :data:`BlacklistPredicate` is expected.
    """

    def __init__(self, terms: Iterable[str] = ()) -> None:
        self._terms: tuple[str, ...] = tuple(
            dict.fromkeys(term.strip().lower() for term in terms if term and term.strip())
        )

    @property
    def terms(self) -> tuple[str, ...]:
        return self._terms

    def __len__(self) -> int:
        return len(self._terms)

    def __call__(self, name: str, artist: str) -> bool:
        return self.is_blacklisted(name, artist)

    def is_blacklisted(self, name: str, artist: str) -> bool:
        if not self._terms:
            return False
        haystacks = ((name or "").lower(), (artist or "").lower())
        return any(term in hay for term in self._terms for hay in haystacks)
