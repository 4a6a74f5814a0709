"""Error types raised by the short link registry."""

from typing import Any, Dict, Optional


class ShortLinkError(ValueError):
    """Base class for errors returned to the caller of a registry operation.

    The message is human readable and meant to be shown verbatim.
    """

    kind = "ShortLinkError"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"kind": self.kind, "error": self.message, **self.context}


class InvalidURLError(ShortLinkError):
    kind = "InvalidURL"


class InvalidValidityError(ShortLinkError):
    kind = "InvalidValidity"


class InvalidShortcodeFormatError(ShortLinkError):
    kind = "InvalidShortcodeFormat"


class ShortcodeConflictError(ShortLinkError):
    kind = "ShortcodeConflict"


class NotFoundError(ShortLinkError):
    kind = "NotFound"


class ExpiredError(ShortLinkError):
    kind = "Expired"


class GenerationExhaustedError(ShortLinkError):
    """Raised when no free short code was found within the attempt limit."""

    kind = "GenerationExhausted"


class PersistenceError(Exception):
    """Storage read/write failure.

    Raised by blob stores and absorbed by the persistence adapter; it never
    reaches callers of registry operations.
    """

    kind = "PersistenceFailure"
