"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Exceptions, message templates, constrained types and events
- catalog/: Catalog items, references, ranking and blacklist filtering
- device/: Device state, queue snapshots and duplicate detection
"""

from group_jukebox.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
