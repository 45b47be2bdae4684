"""Salesforce Record Store — REST client implementing the RecordStore protocol over httpx.

Invariants:
    - One shared AsyncClient per process, created at startup, closed at shutdown
    - No retries, no reconnects: a failed call raises immediately
    - Every non-2xx response, non-JSON body and transport failure maps to RecordStoreError,
      carrying the store's own error message verbatim
    - execute() follows nextRecordsUrl until the result set is done; its errors
      carry the query text in context.debug_info
    - Returned rows never include the store's "attributes" metadata

Design Decisions:
    - Thin wrapper over raw httpx instead of an SDK: four endpoints, explicit error mapping
    - Composite create with allOrNone=false: per-record success flags, partial
      failure stays data for the caller
    - Singleton record_store initialized on startup (FastAPI lifespan manages lifecycle)
"""

import logging
from typing import Any

import httpx

from record_gateway.core.errors import RecordStoreError
from record_gateway.core.repository_protocols import CreateResult

logger = logging.getLogger(__name__)

_COMPOSITE_BATCH = 200


def _strip_attributes(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _strip_attributes(v) for k, v in value.items() if k != "attributes"}
    if isinstance(value, list):
        return [_strip_attributes(v) for v in value]
    return value


def _error_message(response: httpx.Response) -> str:
    """First error message from a store error body, else the HTTP reason."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, list) and body and isinstance(body[0], dict):
        message = body[0].get("message")
        if message:
            return message
    if isinstance(body, dict):
        message = body.get("message") or body.get("error_description") or body.get("error")
        if message:
            return message
    return f"HTTP {response.status_code} {response.reason_phrase}".strip()


class SalesforceRecordStore:
    """RecordStore over the Salesforce REST API."""

    def __init__(
        self,
        instance_url: str,
        access_token: str,
        api_version: str = "v59.0",
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = f"{instance_url.rstrip('/')}/services/data/{api_version}"
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    async def _request(self, method: str, url: str, operation: str, **kwargs) -> httpx.Response:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Record store {operation} transport error: {e}")
            raise RecordStoreError(str(e) or e.__class__.__name__, operation) from e
        if response.is_error:
            message = _error_message(response)
            logger.error(
                f"Record store {operation} failed: {message}",
                extra={"error_code": "RECORD_STORE_ERROR"},
            )
            raise RecordStoreError(message, operation, response.status_code)
        return response

    async def _request_json(self, method: str, url: str, operation: str, **kwargs) -> Any:
        response = await self._request(method, url, operation, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            content_type = response.headers.get("content-type", "unknown content type")
            logger.error(
                f"Record store {operation} returned a non-JSON body ({content_type})",
                extra={"error_code": "RECORD_STORE_ERROR"},
            )
            raise RecordStoreError(
                f"Invalid JSON response from record store ({content_type})",
                operation, response.status_code,
            ) from e

    async def execute(self, query: str) -> list[dict]:
        """Run a query and return every row."""
        try:
            body = await self._request_json("GET", "/query", "query", params={"q": query})
            records = list(body.get("records", []))
            while not body.get("done", True) and body.get("nextRecordsUrl"):
                # nextRecordsUrl is absolute from the instance root
                next_url = self.base_url.split("/services/data/")[0] + body["nextRecordsUrl"]
                body = await self._request_json("GET", next_url, "query")
                records.extend(body.get("records", []))
        except RecordStoreError as e:
            e.context.debug_info = {"query": query}
            raise
        return _strip_attributes(records)

    async def update(self, object_type: str, fields: dict) -> None:
        """PATCH one record; fields must include Id."""
        record_id = fields.get("Id")
        if not record_id:
            raise RecordStoreError("update requires an Id field", "update")
        payload = {k: v for k, v in fields.items() if k != "Id"}
        await self._request("PATCH", f"/sobjects/{object_type}/{record_id}", "update", json=payload)

    async def create(self, object_type: str, records: list[dict]) -> list[CreateResult]:
        """Create records; one result per record, in input order."""
        results: list[CreateResult] = []
        for start in range(0, len(records), _COMPOSITE_BATCH):
            batch = records[start:start + _COMPOSITE_BATCH]
            created = await self._request_json(
                "POST", "/composite/sobjects", "create",
                json={
                    "allOrNone": False,
                    "records": [
                        {"attributes": {"type": object_type}, **record} for record in batch
                    ],
                },
            )
            for item in created:
                results.append({
                    "id": item.get("id"),
                    "success": bool(item.get("success")),
                    "errors": item.get("errors") or [],
                })
        return results

    async def describe_schema(self, object_type: str) -> dict:
        return await self._request_json("GET", f"/sobjects/{object_type}/describe", "describe")

    async def verify_connection(self, check_object: str = "Account") -> None:
        """Startup check: a one-row query that must succeed."""
        await self.execute(f"SELECT Id FROM {check_object} LIMIT 1")

    async def close(self) -> None:
        await self.client.aclose()


# Singleton (initialized on startup)
record_store: SalesforceRecordStore | None = None


def init_record_store(instance_url: str, access_token: str, **kwargs) -> SalesforceRecordStore:
    global record_store
    record_store = SalesforceRecordStore(instance_url, access_token, **kwargs)
    return record_store


async def close_record_store() -> None:
    global record_store
    if record_store is not None:
        await record_store.close()
        record_store = None
