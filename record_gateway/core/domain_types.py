"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - RecordId wraps record-store ids — 15 or 18 alphanumeric characters
    - CanonicalPhone is digits only
    - Every routable RPC method and tool name is an Enum member — no raw string matching
    - SUPPORTED_PROTOCOL_VERSIONS is the whitelist for initialize negotiation

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
    - Unknown strings are resolved with parse_* helpers returning None, so the
      dispatcher has an explicit unknown arm instead of a ValueError
"""

from enum import Enum
from typing import NewType


# ─── Identity & Value Types ──────────────────────────────────────

RecordId = NewType("RecordId", str)
CanonicalPhone = NewType("CanonicalPhone", str)     # digits only


# ─── Protocol ────────────────────────────────────────────────────

JSONRPC_VERSION = "2.0"
SUPPORTED_PROTOCOL_VERSIONS: tuple[str, ...] = ("2024-11-05", "2025-03-26", "2025-06-18")
DEFAULT_PROTOCOL_VERSION = "2024-11-05"


class RpcMethod(str, Enum):
    """The reserved JSON-RPC methods the gateway answers."""
    INITIALIZE = "initialize"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"


class ToolName(str, Enum):
    """Every tool any gateway profile can expose."""
    # client-requests
    GET_CLIENT_REQUESTS = "get_client_requests"
    GET_CLIENT_REQUEST_DETAILS = "get_client_request_details"
    RESPOND_TO_CLIENT_REQUEST = "respond_to_client_request"
    SEARCH_CLIENTS = "search_clients"
    # tax-prep
    GET_PENDING_SIGNATURE_CASES = "get_pending_signature_cases"
    SEND_RETURNS_TO_CLIENT = "send_returns_to_client"
    CREATE_MAIL_REQUEST = "create_mail_request"
    DESCRIBE_OBJECT_FIELDS = "describe_object_fields"
    CREATE_TAX_RETURN_DOCUMENTS = "create_tax_return_documents"
    LIST_CASE_CUSTOM_OBJECTS = "list_case_custom_objects"
    # diagnostic
    SAY_HELLO = "say_hello"


class GatewayProfileName(str, Enum):
    """Which tool set a gateway process serves."""
    CLIENT_REQUESTS = "client-requests"
    TAX_PREP = "tax-prep"
    DIAGNOSTIC = "diagnostic"


class ResponseType(str, Enum):
    """How respond_to_client_request stores the response text."""
    INFORMATION = "information"
    STRUCTURED = "structured"


class DocumentAgency(str, Enum):
    IRS = "IRS"
    STATE = "State"


PENDING_SIGNATURES = "Pending Signatures"


def parse_rpc_method(value: object) -> RpcMethod | None:
    """Resolve a method string to RpcMethod, or None when unknown."""
    try:
        return RpcMethod(value)
    except ValueError:
        return None


def parse_tool_name(value: object) -> ToolName | None:
    """Resolve a tool name string to ToolName, or None when unknown."""
    try:
        return ToolName(value)
    except ValueError:
        return None
