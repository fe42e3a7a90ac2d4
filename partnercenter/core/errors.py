"""
Error types for the Partner Center SDK.

Every failure surfaces as one of these, so callers can tell apart
"your input was invalid", "the server rejected the request" and
"the server was unreachable".
"""

from typing import Any


class PartnerCenterError(Exception):
    """Base error class for SDK errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class InvalidArgument(PartnerCenterError, ValueError):
    """A required identifier or payload is missing or blank."""

    def __init__(self, message: str, name: str | None = None, position: int | None = None):
        details: dict[str, Any] = {}
        if name is not None:
            details["name"] = name
        if position is not None:
            details["position"] = position
        super().__init__(message, details)
        self.name = name
        self.position = position


class UnknownOperation(PartnerCenterError, LookupError):
    """The operation name is not in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Unknown operation: {name}", {"operation": name})
        self.operation = name


class TemplateArityMismatch(PartnerCenterError, AssertionError):
    """A path template was expanded with the wrong number of values."""

    def __init__(self, operation: str, expected: int, given: int):
        super().__init__(
            f"Operation {operation} expects {expected} context value(s), got {given}",
            {"operation": operation, "expected": expected, "given": given},
        )
        self.operation = operation
        self.expected = expected
        self.given = given


class RemoteError(PartnerCenterError):
    """Non-success response from the service."""

    def __init__(
        self,
        message: str,
        status: int,
        code: str | None = None,
        operation: str | None = None,
        path: str | None = None,
        response_body: Any | None = None,
    ):
        details: dict[str, Any] = {}
        if operation:
            details["operation"] = operation
        if path:
            details["path"] = path
        super().__init__(message, details)
        self.status = status
        self.code = code
        self.operation = operation
        self.path = path
        self.response_body = response_body

    def __str__(self) -> str:
        if self.code:
            return f"API error {self.status}: {self.code}: {self.message}"
        return f"API error {self.status}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        result["status"] = self.status
        if self.code:
            result["code"] = self.code
        return result


class TransportError(PartnerCenterError):
    """The service could not be reached (timeout, refused connection, DNS)."""

    retryable = True

    def __init__(self, message: str, operation: str | None = None, path: str | None = None):
        details: dict[str, Any] = {}
        if operation:
            details["operation"] = operation
        if path:
            details["path"] = path
        super().__init__(message, details)
        self.operation = operation
        self.path = path
