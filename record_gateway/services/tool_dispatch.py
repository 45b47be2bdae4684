"""Tool Dispatch — explicit routing from ToolName to handler function.

Invariants:
    - Every ToolName -> handler mapping is visible in one dict — no getattr magic
    - Only tools in the active profile are callable; others raise UnknownToolError
    - Arguments are validated (required, enums, defaults) BEFORE the handler runs
    - Handler failures propagate unchanged — the RPC dispatcher is the single catch point
    - Every call logged with tool name and outcome

Design Decisions:
    - Explicit dict over getattr: adding a tool requires editing this dict and a
      define_*_tools.py schema; test_tool_dispatch checks the two stay in sync
    - Handler classes instantiated once per dispatch object with shared collaborators
"""

import logging
import time
from collections.abc import Awaitable, Callable

from record_gateway.core.domain_types import ToolName
from record_gateway.core.repository_protocols import Messenger, RecordStore
from record_gateway.services import tools_registry
from record_gateway.services.handle_client_requests import ClientRequestHandlers
from record_gateway.services.handle_diagnostic import DiagnosticHandlers
from record_gateway.services.handle_tax_prep import TaxPrepHandlers
from record_gateway.services.tools_registry import GatewayProfile

logger = logging.getLogger(__name__)

Handler = Callable[[dict], Awaitable[dict]]


class ToolDispatch:
    """Routes ToolName -> handler. Explicit registration, no auto-discovery."""

    def __init__(
        self,
        profile: GatewayProfile,
        store: RecordStore,
        messenger: Messenger | None = None,
        mail_from: str = "",
        mail_recipient_override: str | None = None,
    ):
        self.profile = profile
        client_requests = ClientRequestHandlers(store)
        tax_prep = TaxPrepHandlers(store, messenger, mail_from, mail_recipient_override)
        diagnostic = DiagnosticHandlers()

        # ADR: every mapping explicit; adding a tool requires editing this dict
        self._handlers: dict[ToolName, Handler] = {
            # client-requests (4 tools)
            ToolName.GET_CLIENT_REQUESTS: client_requests.get_client_requests,
            ToolName.GET_CLIENT_REQUEST_DETAILS: client_requests.get_client_request_details,
            ToolName.RESPOND_TO_CLIENT_REQUEST: client_requests.respond_to_client_request,
            ToolName.SEARCH_CLIENTS: client_requests.search_clients,

            # tax-prep (6 tools)
            ToolName.GET_PENDING_SIGNATURE_CASES: tax_prep.get_pending_signature_cases,
            ToolName.SEND_RETURNS_TO_CLIENT: tax_prep.send_returns_to_client,
            ToolName.CREATE_MAIL_REQUEST: tax_prep.create_mail_request,
            ToolName.DESCRIBE_OBJECT_FIELDS: tax_prep.describe_object_fields,
            ToolName.CREATE_TAX_RETURN_DOCUMENTS: tax_prep.create_tax_return_documents,
            ToolName.LIST_CASE_CUSTOM_OBJECTS: tax_prep.list_case_custom_objects,

            # diagnostic (1 tool)
            ToolName.SAY_HELLO: diagnostic.say_hello,
        }

    async def execute(self, tool_name: object, arguments: object) -> dict:
        """Validate, route and run one tool call. Returns the tool result."""
        name, validated = tools_registry.validate(self.profile, tool_name, arguments)
        handler = self._handlers[name]
        started = time.perf_counter()
        try:
            return await handler(validated)
        finally:
            logger.info(
                f"Tool {name.value} finished",
                extra={
                    "tool_name": name.value,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 1),
                },
            )
