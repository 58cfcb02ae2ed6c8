# utils/errors.py
"""
Error taxonomy for the verse engine.

- ParseError: a reference string is malformed. Raised per item; bulk import
  logs it and moves on.
- ValidationError: a caller passed an unusable argument (empty query, bad
  limit, unknown filter). Raised before any store access.
- StoreError: MongoDB failed (timeout, connectivity, write error). Caught at
  the search service boundary and turned into an empty, failed result.
"""


class BibleServiceError(Exception):
    """Base class for every error raised by this package."""


class ParseError(BibleServiceError):
    def __init__(self, reference, reason='invalid_format'):
        self.reference = reference
        self.reason = reason
        super().__init__(f"Cannot parse reference {reference!r}: {reason}")


class ValidationError(BibleServiceError):
    def __init__(self, field, detail=None):
        self.field = field
        self.detail = detail or f"Invalid value for {field}"
        super().__init__(self.detail)


class StoreError(BibleServiceError):
    def __init__(self, operation, cause=None):
        self.operation = operation
        self.cause = cause
        message = f"Store operation '{operation}' failed"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
