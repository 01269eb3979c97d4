# Content registry package
from .access import AccessControl, Role
from .content import ContentRegistry, ContentRecord, ContentStatus, EMPTY_RECORD
from .errors import (
    ErrorCategory, ErrorCode, ErrorResponse, RegistryError,
    Unauthorized, NotAuthorized, NotAuthor, AlreadyRegistered, NotRegistered,
    LimitExceeded, RewardTransferFailed, InvalidArgument,
)
from .factory import Deployment, deploy
from .ledger import RewardToken, TokenLedger
from .logger import EventLogger, STANDARD_EVENT_TYPES
from .service import RegistryService, RegistryMethod

__all__ = [
    "AccessControl", "Role",
    "ContentRegistry", "ContentRecord", "ContentStatus", "EMPTY_RECORD",
    "ErrorCategory", "ErrorCode", "ErrorResponse", "RegistryError",
    "Unauthorized", "NotAuthorized", "NotAuthor", "AlreadyRegistered", "NotRegistered",
    "LimitExceeded", "RewardTransferFailed", "InvalidArgument",
    "Deployment", "deploy",
    "RewardToken", "TokenLedger",
    "EventLogger", "STANDARD_EVENT_TYPES",
    "RegistryService", "RegistryMethod",
]
