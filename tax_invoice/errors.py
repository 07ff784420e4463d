"""Exception types raised while validating and rendering invoices."""

from __future__ import annotations

from typing import List, Sequence


class InvoiceError(Exception):
    """Base exception for the invoice service."""


class ValidationError(InvoiceError):
    """Raised when submitted invoice data fails one or more checks.

    Carries every violation found, not only the first one.
    """

    def __init__(self, errors: Sequence[object]) -> None:
        self.errors = list(errors)
        # Keep the errors in args so the exception survives pickling between processes.
        super().__init__(self.errors)

    def __str__(self) -> str:
        return "; ".join(self.messages)

    @property
    def messages(self) -> List[str]:
        return [str(error) for error in self.errors]


class RequestError(InvoiceError):
    """Raised when the request body is not a well-formed invoice submission."""


class AssetError(InvoiceError):
    """Raised for a missing, oversized or undecodable logo upload."""


class LogoTooLargeError(AssetError):
    """Raised when the uploaded logo exceeds the configured size limit."""


class RenderError(InvoiceError):
    """Raised when layout or the drawing surface fails unexpectedly."""


class ResourceError(InvoiceError):
    """Raised when a temporary file cannot be removed."""


class DependencyError(RuntimeError):
    """Raised when a required runtime dependency is missing."""
