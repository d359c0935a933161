"""Group jukebox: let a chat channel drive a networked speaker's play queue."""

__version__ = "0.1.0"
