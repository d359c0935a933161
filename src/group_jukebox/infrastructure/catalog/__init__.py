"""Spotify Web API adapter for the catalog service port."""

from group_jukebox.infrastructure.catalog.spotify_client import SpotifyCatalogClient

__all__ = ["SpotifyCatalogClient"]
