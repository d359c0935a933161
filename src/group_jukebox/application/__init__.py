"""
Application Layer

Use cases that turn chat commands into catalog lookups and device queue
mutations.

Structure:
- commands/: CQRS write operations (AddTrackCommand, AddAlbumCommand, etc.)
- queries/: CQRS read operations (SearchCatalogQuery)
- services/: queue orchestration, the per-device operation queue, subscribers
- interfaces/: Port interfaces for the catalog, the device and the admin channel
"""
