from typing import Dict, Optional


class PortalError(Exception):
    """Base class for every failure the registries surface to callers."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PortalError):
    kind = "not_found"


class ConflictError(PortalError):
    kind = "conflict"


class ValidationError(PortalError):
    kind = "validation"

    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        # field name -> human readable problem, mirrors the intake form errors
        self.fields: Dict[str, str] = dict(fields or {})
