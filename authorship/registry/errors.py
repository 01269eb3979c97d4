"""Error taxonomy for registry operations.

Registry operations raise a RegistryError subclass on failure. Each error
carries a machine-readable code and category so the method surface can turn
it into the standardized error response dict.

Usage:
    from authorship.registry.errors import NotRegistered, ErrorCode

    try:
        registry.approve_content(caller, "QmFake")
    except NotRegistered as exc:
        exc.code  # ErrorCode.NOT_FOUND
        exc.to_response()  # {"success": False, "error": ..., ...}
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error classification.

    Helps callers understand the nature of an error:
    - VALIDATION: Caller provided bad input
    - PERMISSION: Caller not authorized
    - RESOURCE: Not found, already exists, limit reached
    - EXECUTION: A collaborator failed mid-operation
    """

    VALIDATION = "validation"  # Invalid input, bad arguments
    PERMISSION = "permission"  # Missing role, wrong author
    RESOURCE = "resource"  # Not found, already exists
    EXECUTION = "execution"  # Reward transfer failed


class ErrorCode(str, Enum):
    """Specific error codes for programmatic handling."""

    # Validation errors
    MISSING_ARGUMENT = "missing_argument"
    INVALID_ARGUMENT = "invalid_argument"
    UNKNOWN_METHOD = "unknown_method"

    # Permission errors
    NOT_OWNER = "not_owner"
    NOT_AUTHORIZED = "not_authorized"
    MISSING_ROLE = "missing_role"
    NOT_AUTHOR = "not_author"

    # Resource errors
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    QUOTA_EXCEEDED = "quota_exceeded"

    # Execution errors
    TRANSFER_FAILED = "transfer_failed"


@dataclass
class ErrorResponse:
    """Standardized error response.

    All error responses include:
    - success: Always False
    - error: Human-readable message
    - code: Machine-readable error code
    - category: Error category (validation, permission, etc.)
    - retriable: Whether resubmitting the same call could succeed
    - details: Optional additional context
    """

    success: bool = False  # Always False for errors
    error: str = ""  # Human-readable message
    code: str = ""  # Machine-readable error code
    category: str = ""  # Error category (validation, permission, etc.)
    retriable: bool = False  # Whether the operation should be retried
    details: dict[str, object] | None = None  # Optional additional context

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        result: dict[str, object] = {
            "success": self.success,
            "error": self.error,
            "code": self.code,
            "category": self.category,
            "retriable": self.retriable,
        }
        if self.details:
            result["details"] = self.details
        return result


class RegistryError(Exception):
    """Base class for every failed registry operation.

    Subclasses fix the category and default code; callers may override
    the code (e.g. NOT_OWNER vs NOT_AUTHORIZED) and attach details.
    """

    category: ErrorCategory = ErrorCategory.EXECUTION
    default_code: ErrorCode = ErrorCode.TRANSFER_FAILED
    retriable: bool = False

    def __init__(
        self,
        message: str,
        code: ErrorCode | None = None,
        **details: object,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = dict(details)

    def to_response(self) -> dict[str, object]:
        """Convert to the standardized error response dict."""
        return ErrorResponse(
            error=self.message,
            code=self.code.value,
            category=self.category.value,
            retriable=self.retriable,
            details=self.details or None,
        ).to_dict()


class Unauthorized(RegistryError):
    """Caller lacks the Owner or Admin capability the operation needs."""

    category = ErrorCategory.PERMISSION
    default_code = ErrorCode.NOT_AUTHORIZED


class NotAuthorized(RegistryError):
    """Caller lacks the Creator role needed to register or update content."""

    category = ErrorCategory.PERMISSION
    default_code = ErrorCode.MISSING_ROLE


class NotAuthor(RegistryError):
    """Update attempted by someone other than the record's author."""

    category = ErrorCategory.PERMISSION
    default_code = ErrorCode.NOT_AUTHOR


class AlreadyRegistered(RegistryError):
    """Target content hash already resolves to a live record."""

    category = ErrorCategory.RESOURCE
    default_code = ErrorCode.ALREADY_EXISTS


class NotRegistered(RegistryError):
    """Referenced content hash has no live record."""

    category = ErrorCategory.RESOURCE
    default_code = ErrorCode.NOT_FOUND


class LimitExceeded(RegistryError):
    """Creator already holds max_content_limit live records."""

    category = ErrorCategory.RESOURCE
    default_code = ErrorCode.QUOTA_EXCEEDED


class RewardTransferFailed(RegistryError):
    """Token ledger could not pay the registration reward.

    Retriable: the same call can succeed once the reward pool is funded.
    """

    category = ErrorCategory.EXECUTION
    default_code = ErrorCode.TRANSFER_FAILED
    retriable = True


class InvalidArgument(RegistryError):
    """Argument has the wrong type or an out-of-range value."""

    category = ErrorCategory.VALIDATION
    default_code = ErrorCode.INVALID_ARGUMENT


def validation_error(
    message: str,
    code: ErrorCode = ErrorCode.INVALID_ARGUMENT,
    **details: object,
) -> dict[str, object]:
    """Create a validation error response.

    Used by the method surface for malformed invocations that never
    reach a registry operation (missing args, unknown method).

    Args:
        message: Human-readable error message
        code: Specific error code (default: INVALID_ARGUMENT)
        **details: Additional context (e.g., required=["content_hash"])

    Returns:
        Error response dict with success=False
    """
    return ErrorResponse(
        error=message,
        code=code.value,
        category=ErrorCategory.VALIDATION.value,
        retriable=False,
        details=dict(details) if details else None,
    ).to_dict()
