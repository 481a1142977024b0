"""Custom exceptions for LoanQuill."""

from typing import Optional


class LoanQuillError(Exception):
    """Base exception for LoanQuill errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class TemplateError(LoanQuillError):
    """Exception raised when a template or form mapping cannot be normalized."""

    pass


class RenderingError(LoanQuillError):
    """Exception raised during page rasterization."""

    pass


class MediaError(LoanQuillError):
    """Exception raised during media processing."""

    pass


class AssetLoadError(MediaError):
    """An image reference could not be fetched or decoded."""

    def __init__(self, reference: str, reason: str):
        super().__init__(f"Failed to load image {_shorten(reference)}", reason)
        self.reference = reference
        self.reason = reason


class CompilationError(LoanQuillError):
    """Exception raised during PDF assembly."""

    pass


class EncodingError(CompilationError):
    """The rasterized page could not be re-encoded as JPEG."""

    pass


def _shorten(reference: str, limit: int = 64) -> str:
    # data URLs can be megabytes long
    if len(reference) <= limit:
        return reference
    return reference[:limit] + "..."
