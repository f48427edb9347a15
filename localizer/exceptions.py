"""
Localizer Exceptions

This module contains the exception classes shared by the sync engine,
the normalizer and the configuration layer. Expected outcomes such as a
rejected candidate string or a key map miss are plain return values and
never raise.
"""


class LocalizerError(Exception):
    """Base error with optional machine-readable code and details."""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigError(LocalizerError):
    """Project configuration could not be read or is inconsistent."""


class MalformedLocaleDocument(LocalizerError):
    """A locale JSON document exists but does not parse to an object."""

    def __init__(self, path, reason: str):
        super().__init__(
            f"Malformed locale document {path}: {reason}",
            code="malformed_document",
            details={"path": str(path), "reason": reason},
        )
        self.path = path


class StructuralParseError(LocalizerError):
    """Source could not be parsed into a clean syntax tree."""

    def __init__(self, path, reason: str = "syntax errors in source"):
        super().__init__(
            f"Cannot parse {path or '<source>'}: {reason}",
            code="structural_parse_failure",
            details={"path": str(path) if path else None, "reason": reason},
        )
        self.path = path
        self.reason = reason


class SyncIOError(LocalizerError):
    """Writing one locale document failed."""

    def __init__(self, path, error: OSError):
        super().__init__(
            f"Failed to write {path}: {error}",
            code="sync_io_failure",
            details={"path": str(path), "errno": getattr(error, "errno", None)},
        )
        self.path = path


class SyncCancelled(LocalizerError):
    """Raised between document writes when a sync run is cancelled or times out."""

    def __init__(self, reason: str = "cancelled"):
        super().__init__(f"Sync stopped: {reason}", code=reason)
        self.reason = reason
