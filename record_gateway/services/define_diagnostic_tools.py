"""Define Diagnostic Tools — a no-dependency tool for checking caller integration.

Invariants:
    - Never touches the record store or messenger
"""

from record_gateway.core.domain_types import ToolName

TOOLS_DIAGNOSTIC = [
    {
        "name": ToolName.SAY_HELLO.value,
        "description": "A simple test tool that says hello with a name",
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "The name to greet"},
            },
            "required": ["name"],
        },
    },
]
