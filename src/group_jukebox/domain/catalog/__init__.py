"""
Catalog Bounded Context

Catalog items, references, relevance ranking and blacklist filtering.
"""

from group_jukebox.domain.catalog.blacklist import (
    BlacklistPartition,
    BlacklistPredicate,
    TermBlacklist,
    partition,
)
from group_jukebox.domain.catalog.entities import CatalogItem
from group_jukebox.domain.catalog.ranking import (
    RankingWeights,
    drop_invalid,
    rank,
    rank_albums,
    rank_playlists,
    rank_tracks,
)
from group_jukebox.domain.catalog.value_objects import CatalogItemKind, CatalogReference

__all__ = [
    # Entities
    "CatalogItem",
    # Value Objects
    "CatalogItemKind",
    "CatalogReference",
    # Ranking
    "RankingWeights",
    "rank",
    "drop_invalid",
    "rank_tracks",
    "rank_albums",
    "rank_playlists",
    # Blacklist
    "BlacklistPartition",
    "BlacklistPredicate",
    "TermBlacklist",
    "partition",
]
