"""
Typed errors raised by control plane services
"""

from typing import Any, Dict, Optional


class ApiError(Exception):
    """Error carrying an HTTP-style status, a short code and optional details"""

    def __init__(self, status: int, code: str, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.status = status
        self.code = code
        self.message = message
        self.details = details
        self.request_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"code": self.code, "message": self.message}
        if self.details is not None:
            data["details"] = self.details
        if self.request_id is not None:
            data["requestId"] = self.request_id
        return data

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, code={self.code!r}, message={self.message!r})"


class NotFoundError(ApiError):
    """Identifier has no corresponding record"""

    def __init__(self, message: str = "Not found", details: Optional[Any] = None):
        super().__init__(404, "NOT_FOUND", message, details)


class ForbiddenError(ApiError):
    def __init__(self, message: str = "Forbidden", details: Optional[Any] = None):
        super().__init__(403, "FORBIDDEN", message, details)


class ValidationError(ApiError):
    """Malformed request, detected by the caller before submitting"""

    def __init__(self, message: str = "Invalid request", details: Optional[Any] = None):
        super().__init__(400, "VALIDATION_ERROR", message, details)
