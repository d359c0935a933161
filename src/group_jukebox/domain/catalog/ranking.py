"""Relevance ranking of catalog search results against the user's query text.

The catalog's own ordering is tuned for "popular", not for "what the user
typed". These functions re-order a small candidate set so that a query like
``"Foo Fighters - Best of You"`` puts the exact artist/title match first.

Query parsing:

- ``"artist - title"`` (the ``" - "`` separator is checked first)
- ``"title by artist"``
- anything else: every token is a title term

All functions are pure: they return a new list and never mutate the input.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Final

from group_jukebox.domain.catalog.entities import CatalogItem
from group_jukebox.domain.catalog.value_objects import CatalogItemKind, CatalogReference
from group_jukebox.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class RankingWeights:
    """Empirically tuned scores and token cutoffs."""

    FULL_MATCH: Final[int] = 10_000
    TITLE_MATCH: Final[int] = 5_000
    ARTIST_MATCH: Final[int] = 2_000
    TERM_IN_TITLE: Final[int] = 1_000
    TERM_IN_ARTIST: Final[int] = 500
    PHRASE_IN_NAME: Final[int] = 10_000

    # Tokens must be strictly longer than these to count.
    MIN_ARTIST_TERM: Final[int] = 2
    MIN_TITLE_TERM: Final[int] = 1
    MIN_ARTIST_FALLBACK_TERM: Final[int] = 3
    MIN_PLAYLIST_TERM: Final[int] = 2


ARTIST_TITLE_SEPARATOR: Final[str] = " - "
TITLE_ARTIST_SEPARATOR: Final[str] = " by "


@dataclass(frozen=True)
class ParsedQuery:
    """Lower-cased query split into artist and title term lists."""

    text: str
    artist_terms: tuple[str, ...]
    title_terms: tuple[str, ...]

    @property
    def is_structured(self) -> bool:
        return bool(self.artist_terms) and bool(self.title_terms)


def _terms(text: str, longer_than: int) -> tuple[str, ...]:
    return tuple(word for word in text.split() if len(word) > longer_than)


def parse_query(query: str) -> ParsedQuery:
    """Split *query* into artist and title terms."""
    text = query.lower()

    if ARTIST_TITLE_SEPARATOR in text:
        index = text.index(ARTIST_TITLE_SEPARATOR)
        if index > 0:
            artist_part = text[:index].strip()
            title_part = text[index + len(ARTIST_TITLE_SEPARATOR) :].strip()
            return ParsedQuery(
                text=text,
                artist_terms=_terms(artist_part, RankingWeights.MIN_ARTIST_TERM),
                title_terms=_terms(title_part, RankingWeights.MIN_TITLE_TERM),
            )
    elif TITLE_ARTIST_SEPARATOR in text:
        index = text.index(TITLE_ARTIST_SEPARATOR)
        if index > 0:
            title_part = text[:index].strip()
            artist_part = text[index + len(TITLE_ARTIST_SEPARATOR) :].strip()
            return ParsedQuery(
                text=text,
                artist_terms=_terms(artist_part, RankingWeights.MIN_ARTIST_TERM),
                title_terms=_terms(title_part, RankingWeights.MIN_TITLE_TERM),
            )

    return ParsedQuery(
        text=text,
        artist_terms=(),
        title_terms=_terms(text, RankingWeights.MIN_TITLE_TERM),
    )


def score_item(item: CatalogItem, parsed: ParsedQuery) -> int:
    """Score a track or album; higher is more relevant."""
    name = item.name.lower()
    artist = item.artist.lower()

    if parsed.is_structured:
        artist_match = all(term in artist for term in parsed.artist_terms)
        title_match = all(term in name for term in parsed.title_terms)

        score = 0
        if artist_match and title_match:
            score += RankingWeights.FULL_MATCH
        if title_match:
            score += RankingWeights.TITLE_MATCH
        if artist_match:
            score += RankingWeights.ARTIST_MATCH
        return score

    title_hits = sum(1 for term in parsed.title_terms if term in name)
    artist_hits = sum(
        1
        for term in parsed.title_terms
        if len(term) > RankingWeights.MIN_ARTIST_FALLBACK_TERM and term in artist
    )
    return title_hits * RankingWeights.TERM_IN_TITLE + artist_hits * RankingWeights.TERM_IN_ARTIST


def score_playlist(item: CatalogItem, query: str) -> int:
    """Single-field variant: playlists only have a meaningful name."""
    text = query.lower()
    name = item.name.lower()

    score = RankingWeights.PHRASE_IN_NAME if text in name else 0
    terms = _terms(text, RankingWeights.MIN_PLAYLIST_TERM)
    score += sum(1 for term in terms if term in name) * RankingWeights.TERM_IN_TITLE
    return score


def _sorted_by(
    candidates: Sequence[CatalogItem],
    score: Callable[[CatalogItem], int],
    tie_break: Callable[[CatalogItem], int],
) -> list[CatalogItem]:
    # sorted() is stable, so equal (score, tie_break) keeps input order.
    return sorted(candidates, key=lambda item: (-score(item), -tie_break(item)))


def _popularity(item: CatalogItem) -> int:
    return item.popularity or 0


def _followers(item: CatalogItem) -> int:
    return item.followers or 0


def _usable_query(query: str | None) -> str | None:
    if not query or not isinstance(query, str) or not query.strip():
        return None
    return query


def rank_tracks(candidates: Sequence[CatalogItem] | None, query: str | None) -> list[CatalogItem]:
    """Order tracks by artist/title relevance, popularity breaking ties."""
    if not candidates:
        return []
    text = _usable_query(query)
    if text is None:
        return list(candidates)

    parsed = parse_query(text)
    ranked = _sorted_by(candidates, lambda item: score_item(item, parsed), _popularity)
    logger.debug(LogTemplates.RANKING_DONE, len(ranked), "track", text, ranked[0].name)
    return ranked


def rank_albums(candidates: Sequence[CatalogItem] | None, query: str | None) -> list[CatalogItem]:
    """Same algorithm as tracks; the album name plays the title's role."""
    if not candidates:
        return []
    text = _usable_query(query)
    if text is None:
        return list(candidates)

    parsed = parse_query(text)
    ranked = _sorted_by(candidates, lambda item: score_item(item, parsed), _popularity)
    logger.debug(LogTemplates.RANKING_DONE, len(ranked), "album", text, ranked[0].name)
    return ranked


def rank_playlists(
    candidates: Sequence[CatalogItem] | None, query: str | None
) -> list[CatalogItem]:
    """Order playlists by name relevance, follower count breaking ties."""
    if not candidates:
        return []
    text = _usable_query(query)
    if text is None:
        return list(candidates)

    ranked = _sorted_by(candidates, lambda item: score_playlist(item, text), _followers)
    logger.debug(LogTemplates.RANKING_DONE, len(ranked), "playlist", text, ranked[0].name)
    return ranked


_RANKERS: Final[dict[CatalogItemKind, Callable[..., list[CatalogItem]]]] = {
    CatalogItemKind.TRACK: rank_tracks,
    CatalogItemKind.ALBUM: rank_albums,
    CatalogItemKind.PLAYLIST: rank_playlists,
}


def rank(candidates: Sequence[CatalogItem] | None, query: str | None) -> list[CatalogItem]:
    """Rank with the algorithm matching the candidates' kind."""
    if not candidates:
        return []
    return _RANKERS[candidates[0].kind](candidates, query)


def drop_invalid(
    candidates: Sequence[CatalogItem] | None, kind: CatalogItemKind | None = None
) -> list[CatalogItem]:
    """Keep only candidates whose URI is a well-formed reference of *kind*."""
    valid: list[CatalogItem] = []
    for item in candidates or ():
        if CatalogReference.is_valid_uri(item.uri, kind):
            valid.append(item)
        else:
            logger.warning(LogTemplates.CANDIDATE_INVALID_URI, item.name, item.uri)
    return valid
