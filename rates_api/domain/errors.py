"""Error taxonomy raised by every rate store implementation."""
from __future__ import annotations


class RateError(Exception):
    """Base exception for rate workflows."""


class DuplicateError(RateError):
    """Raised when creating a rate whose id is already taken."""


class NotFoundError(RateError):
    """Raised when a rate (or a bootstrap file) does not exist."""


class ValidationError(RateError):
    """Raised when input does not satisfy the rate rules."""


class InternalError(RateError):
    """Raised on unexpected I/O, (de)serialization or database failures."""
