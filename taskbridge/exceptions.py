# taskbridge/exceptions.py

from enum import Enum
from typing import Optional, Union


class ErrorCode(str, Enum):
    AUTHENTICATION = "authentication_failed"
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    PLATFORM_API = "platform_api_error"
    SYNC_CONFLICT = "sync_conflict"
    PLATFORM_NOT_SUPPORTED = "platform_not_supported"
    INVALID_CONFIG = "invalid_config"
    RATE_LIMITED = "rate_limited"
    PERMISSION_DENIED = "permission_denied"
    NETWORK_ERROR = "network_error"

    def __str__(self):
        return self.value


ERROR_MESSAGES = {
    ErrorCode.AUTHENTICATION: "Authentication failed",
    ErrorCode.NOT_FOUND: "Resource not found",
    ErrorCode.INVALID_INPUT: "Invalid input provided",
    ErrorCode.PLATFORM_API: "Platform API error",
    ErrorCode.SYNC_CONFLICT: "Synchronization conflict",
    ErrorCode.PLATFORM_NOT_SUPPORTED: "Platform not supported",
    ErrorCode.INVALID_CONFIG: "Invalid configuration",
    ErrorCode.RATE_LIMITED: "Rate limit exceeded",
    ErrorCode.PERMISSION_DENIED: "Permission denied",
    ErrorCode.NETWORK_ERROR: "Network error",
}


class PlatformError(Exception):
    """
    Exception raised by every platform client operation.

    Two errors are the same kind of failure when their codes match,
    regardless of platform, task id or cause.
    """

    def __init__(
        self,
        code: Union[ErrorCode, str],
        platform: str = "",
        task_id: str = "",
        cause: Optional[BaseException] = None,
        message: Optional[str] = None,
    ):
        self.code = ErrorCode(code)
        self.message = message or ERROR_MESSAGES[self.code]
        self.platform = str(platform) if platform else ""
        self.task_id = task_id or ""
        self.cause = cause
        super().__init__(self.render())

    def render(self) -> str:
        msg = f"[{self.code}] {self.message}"
        if self.platform:
            msg += f" (platform: {self.platform})"
        if self.task_id:
            msg += f" (task: {self.task_id})"
        if self.cause is not None:
            msg += f": {self.cause}"
        return msg

    def __str__(self):
        return self.render()

    def matches(self, other) -> bool:
        """Compare by error code only."""
        if isinstance(other, PlatformError):
            return self.code == other.code
        try:
            return self.code == ErrorCode(other)
        except ValueError:
            return False

    def to_dict(self):
        return {
            "code": self.code.value,
            "message": self.message,
            "platform": self.platform,
            "task_id": self.task_id,
        }


def find_platform_error(exc: Optional[BaseException]) -> Optional[PlatformError]:
    """Return the first PlatformError in the exception's cause chain."""
    seen = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, PlatformError):
            return exc
        seen.add(id(exc))
        exc = exc.__cause__ or exc.__context__
    return None


def is_error_code(exc: Optional[BaseException], code: Union[ErrorCode, str]) -> bool:
    error = find_platform_error(exc)
    return error is not None and error.matches(code)


def is_authentication_error(exc):
    return is_error_code(exc, ErrorCode.AUTHENTICATION)


def is_not_found_error(exc):
    return is_error_code(exc, ErrorCode.NOT_FOUND)


def is_rate_limit_error(exc):
    return is_error_code(exc, ErrorCode.RATE_LIMITED)


def is_invalid_config_error(exc):
    return is_error_code(exc, ErrorCode.INVALID_CONFIG)


def is_network_error(exc):
    return is_error_code(exc, ErrorCode.NETWORK_ERROR)


HTTP_STATUS_CODES = {
    401: ErrorCode.AUTHENTICATION,
    403: ErrorCode.PERMISSION_DENIED,
    404: ErrorCode.NOT_FOUND,
    429: ErrorCode.RATE_LIMITED,
}


def error_for_status(
    status: Optional[int],
    platform: str,
    task_id: str = "",
    cause: Optional[BaseException] = None,
) -> PlatformError:
    """Classify a failed HTTP response into the error taxonomy."""
    code = HTTP_STATUS_CODES.get(status, ErrorCode.PLATFORM_API)
    return PlatformError(code, platform, task_id, cause)
