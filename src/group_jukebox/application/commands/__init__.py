"""
Application Commands (CQRS Write Side)

Command objects and their handlers for the operations that change the
device queue: add, append, addalbum and addplaylist.
"""

from group_jukebox.application.commands.add_album import AddAlbumCommand, AddAlbumHandler
from group_jukebox.application.commands.add_playlist import AddPlaylistCommand, AddPlaylistHandler
from group_jukebox.application.commands.add_result import AddResult, AddStatus
from group_jukebox.application.commands.add_track import AddTrackCommand, AddTrackHandler
from group_jukebox.application.commands.append_track import AppendTrackCommand, AppendTrackHandler

__all__ = [
    # Results
    "AddResult",
    "AddStatus",
    # Add
    "AddTrackCommand",
    "AddTrackHandler",
    # Append
    "AppendTrackCommand",
    "AppendTrackHandler",
    # Album
    "AddAlbumCommand",
    "AddAlbumHandler",
    # Playlist
    "AddPlaylistCommand",
    "AddPlaylistHandler",
]
