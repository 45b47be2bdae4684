"""Client Request Handlers — read, search and answer Client_Request__c records (4 methods).

Invariants:
    - Queries are built with core/query_builder.py; no handler formats query text
    - Client name/phone filters become one OR group inside an Account subquery
    - Requests are always newest first (CreatedDate DESC); client search is by Name
    - respond_to_client_request validates structured JSON BEFORE any update
    - A missing record raises NotFoundError("Client request")

Design Decisions:
    - Existence check before update: the store's update on a bad id returns an
      opaque error, a NotFoundError is clearer to the caller
"""

import json
import logging

from record_gateway.core.domain_types import ResponseType
from record_gateway.core.errors import NotFoundError, ToolValidationError
from record_gateway.core.phone import require_phone
from record_gateway.core.project_records import (
    project_client, project_client_request, project_client_request_details,
    text_content, text_result,
)
from record_gateway.core.query_builder import (
    OrderBy, Select, all_of, any_of, eq, newest_first, render,
)
from record_gateway.core.record_filters import client_in, name_or_phone, search_term_match
from record_gateway.core.repository_protocols import RecordStore
from record_gateway.core.validate_arguments import require_record_id

logger = logging.getLogger(__name__)

CLIENT_REQUEST = "Client_Request__c"

_REQUEST_FIELDS = (
    "Id", "Name", "Request_Type__c", "Information_Request__c", "Information_Response__c",
    "Response__c", "Responded__c", "CreatedDate", "LastModifiedDate",
    "Client__c", "Client__r.Name", "Client__r.Phone", "Client__r.PersonEmail",
    "Reason_For_Request__c", "Object_Api_Name__c",
)
_DETAIL_FIELDS = _REQUEST_FIELDS + (
    "Related_Object_Id__c", "Selected_Fields__c", "Updated_Fields__c",
    "Old_Field_Values__c", "Failed_Fields_Update__c",
)
_CLIENT_FIELDS = (
    "Id", "Name", "Phone", "PersonMobilePhone", "PersonEmail", "PersonMailingAddress",
)


def build_client_requests_query(input_data: dict) -> Select:
    """Query for get_client_requests from validated arguments."""
    client_phone = input_data.get("clientPhone")
    if client_phone is not None:
        require_phone(client_phone, "clientPhone")
    request_type = input_data.get("requestType")
    unresponded = (
        any_of(eq("Responded__c", False), eq("Responded__c", None))
        if input_data["onlyUnresponded"] else None
    )
    client_filter = name_or_phone(
        input_data.get("clientName"), client_phone, input_data["exactMatch"],
    )
    return Select(
        fields=_REQUEST_FIELDS,
        sobject=CLIENT_REQUEST,
        where=all_of(
            unresponded,
            eq("Request_Type__c", request_type) if request_type else None,
            client_in("Client__c", client_filter),
        ),
        order_by=newest_first(),
        limit=input_data["limit"],
    )


def build_client_search_query(input_data: dict) -> Select:
    """Query for search_clients from validated arguments."""
    term = input_data["searchTerm"]
    if not isinstance(term, str) or not term.strip():
        raise ToolValidationError("searchTerm cannot be empty", "searchTerm")
    return Select(
        fields=_CLIENT_FIELDS,
        sobject="Account",
        where=all_of(search_term_match(term.strip()), eq("IsPersonAccount", True)),
        order_by=(OrderBy("Name", descending=False),),
        limit=input_data["limit"],
    )


class ClientRequestHandlers:
    """client-requests profile — list, detail, respond, search."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def _fetch_request(self, request_id: str, fields: tuple[str, ...]) -> dict:
        query = Select(fields=fields, sobject=CLIENT_REQUEST, where=eq("Id", request_id))
        rows = await self.store.execute(render(query))
        if not rows:
            raise NotFoundError("Client request")
        return rows[0]

    async def get_client_requests(self, input_data: dict) -> dict:
        """Filtered client requests, newest first."""
        logger.info("Getting client requests", extra={"tool_name": "get_client_requests"})
        query = render(build_client_requests_query(input_data))
        logger.debug(f"Query: {query}")
        rows = await self.store.execute(query)
        logger.info(f"Found {len(rows)} client requests")
        return text_result(
            f"Found {len(rows)} client requests:",
            [project_client_request(r) for r in rows],
        )

    async def get_client_request_details(self, input_data: dict) -> dict:
        """Every tracked field of one request."""
        request_id = require_record_id(input_data["requestId"], "requestId")
        row = await self._fetch_request(request_id, _DETAIL_FIELDS)
        return text_result("Client Request Details:", project_client_request_details(row))

    async def respond_to_client_request(self, input_data: dict) -> dict:
        """Store the response and mark the request responded."""
        request_id = require_record_id(input_data["requestId"], "requestId")
        response_text = input_data["response"]
        response_type = ResponseType(input_data["responseType"])
        logger.info(
            f"Responding to request {request_id} with response type {response_type.value}",
            extra={"tool_name": "respond_to_client_request"},
        )

        await self._fetch_request(request_id, ("Id", "Request_Type__c", "Responded__c"))

        update = {"Id": request_id, "Responded__c": True}
        if response_type is ResponseType.STRUCTURED:
            try:
                json.loads(response_text)
            except (TypeError, ValueError) as e:
                raise ToolValidationError(
                    f"Invalid JSON for structured response: {e}", "response",
                ) from e
            update["Response__c"] = response_text
        else:
            update["Information_Response__c"] = response_text

        await self.store.update(CLIENT_REQUEST, update)
        logger.info(f"Updated client request {request_id}")
        return text_content(
            f"Successfully responded to client request {request_id}.\n\n"
            f"Response: {response_text}\n\n"
            "The request has been marked as responded and the client will be notified."
        )

    async def search_clients(self, input_data: dict) -> dict:
        """Person accounts matching a name or phone, by name."""
        query = render(build_client_search_query(input_data))
        logger.debug(f"Query: {query}")
        rows = await self.store.execute(query)
        return text_result(
            f"Found {len(rows)} matching clients:",
            [project_client(r) for r in rows],
        )
