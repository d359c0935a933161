"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and the external collaborators: the catalog service, the
playback device and the admin channel.
"""

from group_jukebox.application.interfaces.admin_notifier import AdminNotifier
from group_jukebox.application.interfaces.catalog_service import CatalogService
from group_jukebox.application.interfaces.playback_device import PlaybackDevice

__all__ = [
    "CatalogService",
    "PlaybackDevice",
    "AdminNotifier",
]
