"""Tools Registry — per-profile tool sets and argument validation for tools/call.

Invariants:
    - The registry is built once at import and never mutated (read-only process state)
    - list_tools(profile) returns exactly the profile's ToolDefinitions, independent
      of record-store state
    - validate() rejects tools outside the profile with UnknownToolError (-32601)
    - Every tool name in a profile is a ToolName member

Design Decisions:
    - One parameterized gateway instead of one server per record schema: a profile is
      just its identity + tool set (ADR: deployments differ only in these)
    - Explicit imports from each define_*_tools.py: no auto-discovery
    - Returned lists are deep copies: callers may serialize or mutate them freely
"""

import copy
from dataclasses import dataclass
from types import MappingProxyType

from record_gateway.core.domain_types import GatewayProfileName, ToolName, parse_tool_name
from record_gateway.core.errors import UnknownToolError
from record_gateway.core.validate_arguments import validate_arguments
from record_gateway.services.define_client_request_tools import TOOLS_CLIENT_REQUESTS
from record_gateway.services.define_diagnostic_tools import TOOLS_DIAGNOSTIC
from record_gateway.services.define_tax_prep_tools import TOOLS_TAX_PREP


@dataclass(frozen=True)
class GatewayProfile:
    """Server identity plus the tools it exposes."""
    name: GatewayProfileName
    server_name: str
    server_version: str
    description: str
    tools: tuple[dict, ...]


_PROFILES = MappingProxyType({
    GatewayProfileName.CLIENT_REQUESTS: GatewayProfile(
        name=GatewayProfileName.CLIENT_REQUESTS,
        server_name="client-request-mcp-server",
        server_version="1.0.0",
        description="MCP Server for managing client requests in Salesforce",
        tools=tuple(TOOLS_CLIENT_REQUESTS),
    ),
    GatewayProfileName.TAX_PREP: GatewayProfile(
        name=GatewayProfileName.TAX_PREP,
        server_name="tax-prep-mcp-server",
        server_version="1.0.0",
        description="MCP Server for tax return signature follow-up in Salesforce",
        tools=tuple(TOOLS_TAX_PREP),
    ),
    GatewayProfileName.DIAGNOSTIC: GatewayProfile(
        name=GatewayProfileName.DIAGNOSTIC,
        server_name="simple-mcp-test",
        server_version="1.0.0",
        description="Diagnostic MCP server with a single greeting tool",
        tools=tuple(TOOLS_DIAGNOSTIC),
    ),
})


def get_profile(name: GatewayProfileName | str) -> GatewayProfile:
    """Look up a profile; raises ValueError for an unknown name."""
    return _PROFILES[GatewayProfileName(name)]


def list_tools(profile: GatewayProfile) -> list[dict]:
    """tools/list payload for a profile."""
    return copy.deepcopy(list(profile.tools))


def find_tool(profile: GatewayProfile, tool_name: object) -> tuple[ToolName, dict]:
    """Resolve a tool name within a profile, or raise UnknownToolError."""
    name = parse_tool_name(tool_name)
    for tool in profile.tools:
        if name is not None and tool["name"] == name.value:
            return name, tool
    raise UnknownToolError(str(tool_name))


def validate(profile: GatewayProfile, tool_name: object, arguments: object) -> tuple[ToolName, dict]:
    """Resolve the tool and validate its arguments; returns (ToolName, arguments)."""
    name, tool = find_tool(profile, tool_name)
    return name, validate_arguments(tool, arguments)
