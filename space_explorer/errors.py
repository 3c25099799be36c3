from typing import Optional

from pydantic import ValidationError


class SpaceExplorerError(Exception):
    pass


class InvalidPayloadError(SpaceExplorerError, ValueError):
    """Raised when a payload is structurally unusable (wrong types, missing name, ...)."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_validation(cls, what: str, exc: ValidationError) -> "InvalidPayloadError":
        first = exc.errors()[0] if exc.errors() else {}
        loc = ".".join(str(p) for p in first.get("loc", ()))
        detail = first.get("msg", "invalid value")
        message = f"Invalid {what} payload"
        if loc:
            message += f" at '{loc}'"
        return cls(f"{message}: {detail}", errors=exc.errors())


class UpstreamError(SpaceExplorerError):
    def __init__(self, service: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.status_code = status_code


class SearchAborted(SpaceExplorerError):
    """The caller set the abort event while an image search was in flight."""
