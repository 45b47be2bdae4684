"""Define Tax Prep Tools — tool schemas for signature follow-up on tax-preparation cases.

Invariants:
    - All schemas follow the MCP tools/list format (name, description, inputSchema)
    - caseId is required wherever a single case is acted upon

Design Decisions:
    - describe_object_fields exposed to callers: lets an operator discover field API
      names without store admin access
"""

from record_gateway.core.domain_types import ToolName

DEFAULT_CASE_LIST_LIMIT = 10

_CASE_ID = {
    "type": "string",
    "description": "Case ID (Case__c custom object ID)",
}

TOOLS_TAX_PREP = [
    {
        "name": ToolName.GET_PENDING_SIGNATURE_CASES.value,
        "description": "Get tax return cases that are pending client signatures",
        "inputSchema": {
            "type": "object",
            "properties": {
                "clientName": {
                    "type": "string",
                    "description": "Client name for filtering (optional)",
                },
                "phoneNumber": {
                    "type": "string",
                    "description": "Client phone number for filtering, any format (optional)",
                },
                "caseId": {
                    "type": "string",
                    "description": "Specific case ID to look up (optional)",
                },
            },
            "required": [],
        },
    },
    {
        "name": ToolName.SEND_RETURNS_TO_CLIENT.value,
        "description": "Email tax return documents to client",
        "inputSchema": {
            "type": "object",
            "properties": {"caseId": _CASE_ID},
            "required": ["caseId"],
        },
    },
    {
        "name": ToolName.CREATE_MAIL_REQUEST.value,
        "description": "Create a mail request to physically mail tax documents to client",
        "inputSchema": {
            "type": "object",
            "properties": {"caseId": _CASE_ID},
            "required": ["caseId"],
        },
    },
    {
        "name": ToolName.DESCRIBE_OBJECT_FIELDS.value,
        "description": (
            "Get field information for Salesforce objects to find correct API names"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "objectName": {
                    "type": "string",
                    "description": (
                        "Salesforce object API name (e.g., Document__c, TaxPrepInformation__c)"
                    ),
                },
            },
            "required": ["objectName"],
        },
    },
    {
        "name": ToolName.CREATE_TAX_RETURN_DOCUMENTS.value,
        "description": (
            "Create Document__c records for tax returns (Federal and State) "
            "for specified years"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "caseId": _CASE_ID,
                "years": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": 'Tax years to create (e.g., ["2020", "2021", "2022"])',
                },
                "includeState": {
                    "type": "boolean",
                    "description": "Whether to create state returns (default: true)",
                    "default": True,
                },
            },
            "required": ["caseId", "years"],
        },
    },
    {
        "name": ToolName.LIST_CASE_CUSTOM_OBJECTS.value,
        "description": "List Case__c custom object records (not standard Case objects)",
        "inputSchema": {
            "type": "object",
            "properties": {
                "limit": {
                    "type": "number",
                    "description": (
                        f"Maximum number of cases to return (default: {DEFAULT_CASE_LIST_LIMIT})"
                    ),
                    "default": DEFAULT_CASE_LIST_LIMIT,
                },
            },
            "required": [],
        },
    },
]
