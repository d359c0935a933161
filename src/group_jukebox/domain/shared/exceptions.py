"""Base exception classes for domain-level errors."""

from __future__ import annotations

import re

_UPNP_ERROR_CODE = re.compile(r"errorCode>\s*(\d+)\s*<")

REGION_UNAVAILABLE_CODE = "800"


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class InvalidReferenceError(ValidationError):
    """Raised when a catalog link or URI cannot be parsed."""

    def __init__(self, reference: str, message: str | None = None) -> None:
        super().__init__(message or f"Not a valid catalog reference: '{reference}'", field="reference")
        self.reference = reference


# === Catalog errors ===


class CatalogError(DomainError):
    """Base class for failures reported by the music catalog service."""


class CatalogNotFoundError(CatalogError):
    """The catalog has no item for the requested id or query."""

    def __init__(self, what: str, message: str | None = None) -> None:
        super().__init__(message or f"{what} not found", code="CATALOG_NOT_FOUND")
        self.what = what


class CatalogRateLimitedError(CatalogError):
    def __init__(self, retry_after: float | None = None) -> None:
        super().__init__("Catalog rate limit exceeded", code="CATALOG_RATE_LIMITED")
        self.retry_after = retry_after


class CatalogAuthError(CatalogError):
    def __init__(self, message: str = "Catalog credentials were rejected") -> None:
        super().__init__(message, code="CATALOG_AUTH")


class CatalogUnavailableError(CatalogError):
    """Network failure, timeout or unexpected server error."""

    def __init__(self, message: str = "Catalog service is unavailable") -> None:
        super().__init__(message, code="CATALOG_UNAVAILABLE")


# === Device errors ===


class DeviceError(DomainError):
    """A remote call to the playback device failed or timed out.

    ``device_code`` carries the device's own error code when one could be
    extracted (UPnP devices embed it as ``<errorCode>NNN</errorCode>``).
    """

    def __init__(
        self, operation: str, message: str | None = None, device_code: str | None = None
    ) -> None:
        msg = message or f"Device operation '{operation}' failed"
        super().__init__(msg, code="DEVICE_ERROR")
        self.operation = operation
        self.device_code = device_code if device_code is not None else extract_device_code(msg)

    @property
    def is_region_unavailable(self) -> bool:
        return self.device_code == REGION_UNAVAILABLE_CODE


class DeviceBusyError(DomainError):
    """Raised when too many operations are already waiting for a device."""

    def __init__(self, device_name: str, pending: int) -> None:
        super().__init__(
            f"Device '{device_name}' already has {pending} pending operations",
            code="DEVICE_BUSY",
        )
        self.device_name = device_name
        self.pending = pending


def extract_device_code(text: str) -> str | None:
    """Pull a UPnP ``errorCode`` out of a raw fault message, if present."""
    match = _UPNP_ERROR_CODE.search(text or "")
    return match.group(1) if match else None
