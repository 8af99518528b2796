"""
errors.py

Errors raised by the assessment engine.
All of them are recoverable by the caller; none leaves the session half-changed.
"""

from typing import Any, List, Optional


class SessionError(Exception):
    """Base class for engine errors."""


class InvalidConfiguration(SessionError):
    """Empty question set, non-positive duration and similar setup mistakes."""


class InvalidState(SessionError):
    """Operation on a session that is not initialized or already finalized."""


class IndexOutOfRange(SessionError):
    """Navigation target outside [0, N)."""


class UnknownQuestion(SessionError):
    """Question id that is not part of the loaded question set."""


class SchemaViolation(ValueError):
    """
    Raised by the boundary parse step when a question payload does not match
    the expected schema.

    Attributes:
        errors: pydantic-style error list (``ValidationError.errors()``) or
                hand-built entries with the same ``loc`` / ``msg`` keys.
    """

    def __init__(self, message: str, errors: Optional[List[dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []
