"""
Error types for the course dashboard.

Only UpstreamUnavailable, ValidationError and NotFound ever reach a caller.
ItemConversionDropped stays inside the pipeline: it marks one record as
excluded and is counted, never propagated.
"""


class CourseDashError(Exception):
    """Base class for all dashboard errors."""
    pass


class ValidationError(CourseDashError):
    """Raised when a required request parameter is missing or malformed."""

    def __init__(self, field: str, message: str = ""):
        self.field = field
        super().__init__(message or f"{field} parameter is required")


class NotFound(CourseDashError):
    """Raised when a user or meeting cannot be resolved."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}")


class UpstreamUnavailable(CourseDashError):
    """Raised when a required fetch from the course service fails."""

    def __init__(self, operation: str, reason: str = ""):
        self.operation = operation
        self.reason = reason
        message = f"Upstream unavailable during {operation}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ItemConversionDropped(CourseDashError):
    """Raised when a single record cannot be filtered or normalized."""

    def __init__(self, item_type: str, reason: str, record_id: str = None):
        self.item_type = item_type
        self.reason = reason
        self.record_id = record_id
        super().__init__(f"Dropped {item_type} {record_id or '<no id>'}: {reason}")
