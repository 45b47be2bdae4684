"""Define Client Request Tools — tool schemas for reading and answering client requests.

Invariants:
    - All schemas follow the MCP tools/list format (name, description, inputSchema)
    - Required fields and enums enforced by core/validate_arguments.py, not handler code
    - Declared defaults are applied before the handler runs

Design Decisions:
    - Tool schemas in dedicated files: explicit, no auto-discovery
    - Descriptions list the accepted request types verbatim: callers are voice agents
      that pick values from the description text
"""

from record_gateway.core.domain_types import ResponseType, ToolName

DEFAULT_REQUESTS_LIMIT = 20
DEFAULT_CLIENT_SEARCH_LIMIT = 10

TOOLS_CLIENT_REQUESTS = [
    {
        "name": ToolName.GET_CLIENT_REQUESTS.value,
        "description": (
            "Retrieve client requests from Salesforce. Can filter by client name, "
            "phone, request status, or request type. Newest requests first."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "clientName": {
                    "type": "string",
                    "description": "Client name to filter by (searches Account names)",
                },
                "clientPhone": {
                    "type": "string",
                    "description": (
                        "Client phone number to filter by, in any format. "
                        "Matches both phone and mobile phone."
                    ),
                },
                "exactMatch": {
                    "type": "boolean",
                    "description": (
                        "If true, clientPhone must match a full 10-digit number "
                        "exactly instead of as a substring (default: false)"
                    ),
                    "default": False,
                },
                "requestType": {
                    "type": "string",
                    "description": (
                        "Type of request: Information Request, Field Update Request, "
                        "Garnishment Removal Request, Levy Release Request, Pay Stubs Request"
                    ),
                },
                "onlyUnresponded": {
                    "type": "boolean",
                    "description": (
                        "If true, only show requests that haven't been responded to yet "
                        "(default: false)"
                    ),
                    "default": False,
                },
                "limit": {
                    "type": "number",
                    "description": (
                        f"Maximum number of requests to return (default: {DEFAULT_REQUESTS_LIMIT})"
                    ),
                    "default": DEFAULT_REQUESTS_LIMIT,
                },
            },
            "required": [],
        },
    },
    {
        "name": ToolName.GET_CLIENT_REQUEST_DETAILS.value,
        "description": "Get full details of a specific client request by ID",
        "inputSchema": {
            "type": "object",
            "properties": {
                "requestId": {
                    "type": "string",
                    "description": "The Salesforce ID of the Client_Request__c record",
                },
            },
            "required": ["requestId"],
        },
    },
    {
        "name": ToolName.RESPOND_TO_CLIENT_REQUEST.value,
        "description": (
            "Respond to a client request by providing an answer/response. "
            "Marks the request as responded."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "requestId": {
                    "type": "string",
                    "description": "The Salesforce ID of the Client_Request__c record",
                },
                "response": {
                    "type": "string",
                    "description": "The response/answer to provide to the client",
                },
                "responseType": {
                    "type": "string",
                    "description": (
                        'Type of response: "information" for text responses, '
                        '"structured" for JSON responses (default: information)'
                    ),
                    "enum": [t.value for t in ResponseType],
                    "default": ResponseType.INFORMATION.value,
                },
            },
            "required": ["requestId", "response"],
        },
    },
    {
        "name": ToolName.SEARCH_CLIENTS.value,
        "description": (
            "Search for client accounts by name or phone number. "
            "Phone numbers match in any format."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "searchTerm": {
                    "type": "string",
                    "description": "Name or phone number to search for",
                },
                "limit": {
                    "type": "number",
                    "description": (
                        f"Maximum number of results to return (default: {DEFAULT_CLIENT_SEARCH_LIMIT})"
                    ),
                    "default": DEFAULT_CLIENT_SEARCH_LIMIT,
                },
            },
            "required": ["searchTerm"],
        },
    },
]
