"""Exceptions raised by DepHint."""


class DepHintError(Exception):
    """Base exception for DepHint errors."""


class PayloadError(DepHintError):
    """Raised when a replace command payload cannot be decoded."""


class DocumentError(DepHintError):
    """Raised when a document rejects an edit."""


class ManifestError(DepHintError):
    """Raised when a manifest cannot be scanned."""
