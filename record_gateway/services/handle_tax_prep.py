"""Tax Prep Handlers — pending-signature follow-up on Case__c / Document__c (6 methods).

Invariants:
    - Pending documents are Document__c rows with Prep_Status__c = 'Pending Signatures'
    - get_pending_signature_cases looks up each distinct parent case once; lookups
      target disjoint ids and run concurrently with no ordering between them
    - Every case-scoped tool raises NotFoundError("Case") for an unknown caseId
    - create_tax_return_documents reports partial failure as data, never raises for it
    - send_returns_to_client raises before sending when no recipient is known

Design Decisions:
    - Group-then-lookup instead of a relationship query: case fields needed here are
      not all reachable through Document__c's relationship in one query
    - mail_recipient_override: outbound mail can be pinned to a test inbox while
      client emails are still being cleaned up in the store
    - create_mail_request is a recorded intent only (MR-<epoch ms>); fulfilment
      happens outside the gateway
"""

import asyncio
import logging
import re
import time
from collections import defaultdict
from html import escape

from record_gateway.core.domain_types import PENDING_SIGNATURES, DocumentAgency
from record_gateway.core.errors import (
    MessagingError, NotFoundError, RecordStoreError, ToolValidationError,
)
from record_gateway.core.project_records import (
    project_case_summary, project_pending_case, related, relevant_fields,
    text_content, text_result, to_json,
)
from record_gateway.core.query_builder import Select, all_of, eq, newest_first, render
from record_gateway.core.record_filters import client_in, name_or_phone
from record_gateway.core.repository_protocols import Messenger, OutboundMessage, RecordStore
from record_gateway.core.validate_arguments import require_record_id

logger = logging.getLogger(__name__)

CASE = "Case__c"
DOCUMENT = "Document__c"
PENDING_DOCUMENTS_LIMIT = 50

_OBJECT_NAME = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
_CASE_FIELDS = ("Id", "Name", "CaseType__c", "OwnerId", "Client__r.Name", "Client__r.PersonEmail")
_DOCUMENT_FIELDS = ("Id", "Name", "Year__c", "Agency__c", "Prep_Status__c", "Case__c")


def build_pending_documents_query(input_data: dict) -> Select:
    """Pending-signature documents, optionally narrowed by case or client."""
    case_id = input_data.get("caseId")
    if case_id is not None:
        case_id = require_record_id(case_id, "caseId")
    client_filter = name_or_phone(input_data.get("clientName"), input_data.get("phoneNumber"))
    return Select(
        fields=_DOCUMENT_FIELDS,
        sobject=DOCUMENT,
        where=all_of(
            eq("Prep_Status__c", PENDING_SIGNATURES),
            eq("Case__c", case_id) if case_id else None,
            client_in("Case__r.Client__c", client_filter),
        ),
        order_by=newest_first(),
        limit=PENDING_DOCUMENTS_LIMIT,
    )


def build_case_documents(case_id: str, years: list, include_state: bool) -> list[dict]:
    """One IRS return per year, plus one State return per year when requested."""
    agencies = [DocumentAgency.IRS]
    if include_state:
        agencies.append(DocumentAgency.STATE)
    return [
        {
            "Case__c": case_id,
            "Year__c": str(year),
            "Agency__c": agency.value,
            "Prep_Status__c": PENDING_SIGNATURES,
        }
        for year in years
        for agency in agencies
    ]


def returns_email_html(client_name: str, years: str) -> str:
    return (
        f"<p>Dear {escape(client_name)},</p>"
        f"<p>Please find your tax return documents for the following years: {escape(years)}</p>"
        "<p>These documents require your signature. Please review, sign, and return "
        "them at your earliest convenience.</p>"
        "<p>If you have any questions, please don't hesitate to contact us.</p>"
        "<p>Best regards,<br>Tax Preparation Team</p>"
    )


class TaxPrepHandlers:
    """tax-prep profile — pending cases, returns email, mail request, schema, documents."""

    def __init__(
        self, store: RecordStore, messenger: Messenger | None,
        mail_from: str = "", mail_recipient_override: str | None = None,
    ):
        self.store = store
        self.messenger = messenger
        self.mail_from = mail_from
        self.mail_recipient_override = mail_recipient_override

    async def _fetch_case(self, case_id: str) -> dict:
        row = await self._lookup_case(case_id)
        if row is None:
            raise NotFoundError("Case")
        return row

    async def _pending_documents(self, case_id: str) -> list[dict]:
        return await self.store.execute(render(Select(
            fields=_DOCUMENT_FIELDS,
            sobject=DOCUMENT,
            where=all_of(eq("Case__c", case_id), eq("Prep_Status__c", PENDING_SIGNATURES)),
        )))

    async def _lookup_case(self, case_id: str) -> dict | None:
        rows = await self.store.execute(render(
            Select(fields=_CASE_FIELDS, sobject=CASE, where=eq("Id", case_id)),
        ))
        return rows[0] if rows else None

    async def get_pending_signature_cases(self, input_data: dict) -> dict:
        """Cases with documents awaiting signature, grouped per case."""
        documents = await self.store.execute(render(build_pending_documents_query(input_data)))

        by_case: dict[str, list[dict]] = defaultdict(list)
        for doc in documents:
            if doc.get("Case__c"):
                by_case[doc["Case__c"]].append(doc)

        case_ids = list(by_case)
        case_rows = await asyncio.gather(*(self._lookup_case(cid) for cid in case_ids))
        cases = [
            project_pending_case(cid, row, by_case[cid])
            for cid, row in zip(case_ids, case_rows)
        ]
        return text_result(f"Found {len(cases)} cases with pending signatures:", cases)

    async def send_returns_to_client(self, input_data: dict) -> dict:
        """Email the client that their pending returns need signatures."""
        case_id = require_record_id(input_data["caseId"], "caseId")
        case_row = await self._fetch_case(case_id)
        unsigned = await self._pending_documents(case_id)

        recipient = self.mail_recipient_override or related(
            case_row, "Client__r", "PersonEmail", None,
        )
        if not recipient:
            raise ToolValidationError("No email address found for client", "caseId")
        if self.messenger is None:
            raise MessagingError("Messaging is not configured")

        client_name = related(case_row, "Client__r", "Name", None) or case_row.get("Name") or "Client"
        years = ", ".join(str(d.get("Year__c")) for d in unsigned)
        await self.messenger.send(OutboundMessage(
            from_address=self.mail_from,
            to=recipient,
            subject=f"Tax Return Documents - Signature Required ({years})",
            html=returns_email_html(client_name, years),
        ))
        logger.info(f"Sent returns for case {case_id}", extra={"tool_name": "send_returns_to_client"})
        return text_content(
            f"Successfully sent tax returns to {recipient} for years: {years}. "
            f"Total documents: {len(unsigned)}"
        )

    async def create_mail_request(self, input_data: dict) -> dict:
        """Record a request to physically mail the pending documents."""
        case_id = require_record_id(input_data["caseId"], "caseId")
        case_row = await self._fetch_case(case_id)
        unsigned = await self._pending_documents(case_id)
        years = ", ".join(str(d.get("Year__c")) for d in unsigned)
        request_id = f"MR-{int(time.time() * 1000)}"
        return text_content(
            f"Created mail request {request_id} for case {case_id}. "
            f"Will mail {len(unsigned)} documents for years: {years} "
            f"to {case_row.get('Name') or 'Unknown Case'}"
        )

    async def describe_object_fields(self, input_data: dict) -> dict:
        """Field API names, labels and types for one object."""
        object_name = input_data["objectName"]
        if not isinstance(object_name, str) or not _OBJECT_NAME.match(object_name):
            raise ToolValidationError(
                f"objectName must be an object API name, got {object_name!r}", "objectName",
            )
        try:
            description = await self.store.describe_schema(object_name)
        except RecordStoreError as e:
            raise RecordStoreError(
                f"Failed to describe object {object_name}: {e.message}",
                "describe", e.status_code,
            ) from e

        described = description.get("fields", [])
        return text_content(
            f"Object: {description.get('name', object_name)} "
            f"({description.get('label', object_name)})\n\n"
            f"Key Fields:\n{to_json(relevant_fields(described))}\n\n"
            f"Total Fields: {len(described)}"
        )

    async def create_tax_return_documents(self, input_data: dict) -> dict:
        """Create Federal (and State) return documents for each year."""
        case_id = require_record_id(input_data["caseId"], "caseId")
        years = input_data["years"]
        if not years:
            raise ToolValidationError("years must list at least one tax year", "years")
        case_row = await self._fetch_case(case_id)

        documents = build_case_documents(case_id, years, input_data["includeState"])
        results = await self.store.create(DOCUMENT, documents)
        success_count = sum(1 for r in results if r.get("success"))
        failures = [r for r in results if not r.get("success")]
        if failures:
            logger.warning(
                f"{len(failures)} of {len(results)} documents failed to create",
                extra={"tool_name": "create_tax_return_documents", "error_code": "PARTIAL_CREATE"},
            )
            logger.warning(f"Creation errors: {to_json([r.get('errors') for r in failures])}")

        doc_list = "\n".join(f"- {d['Year__c']} {d['Agency__c']} Tax Return" for d in documents)
        outcome = (
            f"{len(failures)} failed to create. Check server logs for details."
            if failures else "All documents ready for signature."
        )
        return text_content(
            f"Created {success_count} of {len(documents)} {DOCUMENT} records for "
            f'{CASE} "{case_row.get("Name")}" ({case_id}):\n\n{doc_list}\n\n{outcome}'
        )

    async def list_case_custom_objects(self, input_data: dict) -> dict:
        """Most recent Case__c records."""
        rows = await self.store.execute(render(Select(
            fields=("Id", "Name", "CaseType__c", "OwnerId", "CreatedDate"),
            sobject=CASE,
            order_by=newest_first(),
            limit=input_data["limit"],
        )))
        return text_result(
            f"Found {len(rows)} {CASE} custom object records:",
            [project_case_summary(r) for r in rows],
        )
