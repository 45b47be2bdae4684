"""Error Hierarchy — typed, categorized exceptions for every gateway failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
      and a JSON-RPC error code (rpc_code)
    - Unknown methods/tools map to -32601; everything raised by a tool maps to -32603
    - to_rpc_error() produces the JSON-RPC error object; message is never rewritten
    - Collaborator failures carry the collaborator's own message verbatim

Design Decisions:
    - Single hierarchy with GatewayError base: the RPC dispatcher catches it once
      (ADR: one catch point at the dispatch boundary)
    - Validation and internal failures share -32603: callers distinguish by message,
      the protocol has no reserved range for tool-level validation
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any
from datetime import datetime, timezone


class RpcErrorCode(IntEnum):
    """JSON-RPC 2.0 reserved error codes used by the gateway."""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INTERNAL_ERROR = -32603


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    PROTOCOL = "protocol"
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    RECORD_STORE = "record_store"
    MESSAGING = "messaging"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    rpc_method: str | None = None
    tool_name: str | None = None
    debug_info: dict[str, Any] | None = None


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        rpc_code: int = RpcErrorCode.INTERNAL_ERROR,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.rpc_code = int(rpc_code)

    def to_rpc_error(self) -> dict:
        """Convert to a JSON-RPC error object."""
        return {"code": self.rpc_code, "message": self.message}


# ─── Protocol Errors ────────────────────────────────────────────

class ProtocolError(GatewayError):
    """Request named something the gateway does not serve."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.PROTOCOL,
            ErrorSeverity.WARNING, context, RpcErrorCode.METHOD_NOT_FOUND,
        )


class UnknownMethodError(ProtocolError):
    def __init__(self, method: str, context: ErrorContext | None = None):
        super().__init__(f"Unknown method: {method}", "UNKNOWN_METHOD", context)
        self.method = method


class UnknownToolError(ProtocolError):
    def __init__(self, tool_name: str, context: ErrorContext | None = None):
        super().__init__(f"Unknown tool: {tool_name}", "UNKNOWN_TOOL", context)
        self.tool_name = tool_name


class ParseError(GatewayError):
    """Request body is not valid JSON."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Parse error: {message}", "PARSE_ERROR", ErrorCategory.PROTOCOL,
            ErrorSeverity.WARNING, context, RpcErrorCode.PARSE_ERROR,
        )


class InvalidRequestError(GatewayError):
    """Request body is JSON but not a JSON-RPC request."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid Request: {message}", "INVALID_REQUEST", ErrorCategory.PROTOCOL,
            ErrorSeverity.WARNING, context, RpcErrorCode.INVALID_REQUEST,
        )


# ─── Domain Errors ──────────────────────────────────────────────

class ToolValidationError(GatewayError):
    """Tool input validation failed."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.field = field


class NotFoundError(GatewayError):
    """Referenced record does not exist."""
    def __init__(self, entity: str, context: ErrorContext | None = None):
        super().__init__(
            f"{entity} not found", "RESOURCE_NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.ERROR, context,
        )
        self.entity = entity


# ─── Collaborator Errors ────────────────────────────────────────

class CollaboratorError(GatewayError):
    """An external collaborator call failed; message is the collaborator's own."""


class RecordStoreError(CollaboratorError):
    def __init__(
        self, message: str, operation: str,
        status_code: int | None = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "RECORD_STORE_ERROR", ErrorCategory.RECORD_STORE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation
        self.status_code = status_code


class MessagingError(CollaboratorError):
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "MESSAGING_ERROR", ErrorCategory.MESSAGING,
            ErrorSeverity.CRITICAL, context,
        )


# ─── Startup ────────────────────────────────────────────────────

class ConfigurationError(GatewayError):
    """Process configuration is unusable; raised at startup only."""
    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL,
        )
        self.missing = missing or []
