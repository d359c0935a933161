"""
Shared Domain Kernel

Exceptions, message templates, constrained types and domain events shared
across the catalog and device bounded contexts.
"""

from group_jukebox.domain.shared.exceptions import (
    CatalogError,
    CatalogNotFoundError,
    DeviceBusyError,
    DeviceError,
    DomainError,
    InvalidReferenceError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "InvalidReferenceError",
    "CatalogError",
    "CatalogNotFoundError",
    "DeviceError",
    "DeviceBusyError",
]
