"""Result Projector — maps raw record-store rows to caller-facing envelopes.

Invariants:
    - Pure: no IO, no async, rows are never mutated
    - Every projection of one kind has the same keys for every row
    - Absent relationship fields project to an explicit placeholder, never omitted
    - Phones are formatted for display on the way out (core/phone.py)
    - Tool results are ALWAYS one text content block: summary line + JSON payload

Design Decisions:
    - One function per record kind instead of a generic field map: the caller-facing
      names are a contract and should be greppable
    - JSON indent=2 in the text block: the caller is a voice/LLM agent reading text
"""

import json
from typing import Any

from record_gateway.core.phone import format_phone

UNKNOWN = "Unknown"
UNKNOWN_CLIENT = "Unknown Client"
UNNAMED_REQUEST = "Unnamed Request"

# describe_object_fields hides audit/system fields
_SYSTEM_FIELD_MARKERS = ("CreatedBy", "LastModified", "SystemModstamp")
MAX_DESCRIBED_FIELDS = 15


def related(row: dict, relationship: str, field: str, default: Any = UNKNOWN) -> Any:
    """Read a field through a relationship (e.g. Client__r.Name)."""
    parent = row.get(relationship)
    if not isinstance(parent, dict):
        return default
    value = parent.get(field)
    return default if value is None else value


# ─── Client requests ─────────────────────────────────────────────

def project_client_request(row: dict) -> dict:
    phone = related(row, "Client__r", "Phone", None)
    return {
        "requestId": row.get("Id"),
        "requestName": row.get("Name") or UNNAMED_REQUEST,
        "requestType": row.get("Request_Type__c"),
        "clientName": related(row, "Client__r", "Name", UNKNOWN_CLIENT),
        "clientPhone": format_phone(phone) if phone else UNKNOWN,
        "clientEmail": related(row, "Client__r", "PersonEmail"),
        "informationRequest": row.get("Information_Request__c"),
        "reason": row.get("Reason_For_Request__c"),
        "responded": bool(row.get("Responded__c")),
        "responseText": row.get("Information_Response__c"),
        "createdDate": row.get("CreatedDate"),
        "lastModified": row.get("LastModifiedDate"),
    }


def project_client_request_details(row: dict) -> dict:
    details = project_client_request(row)
    details.pop("responseText")
    details.update({
        "informationResponse": row.get("Information_Response__c"),
        "structuredResponse": row.get("Response__c"),
        "objectApiName": row.get("Object_Api_Name__c"),
        "relatedObjectId": row.get("Related_Object_Id__c"),
        "selectedFields": row.get("Selected_Fields__c"),
        "updatedFields": row.get("Updated_Fields__c"),
        "oldFieldValues": row.get("Old_Field_Values__c"),
        "failedFieldsUpdate": row.get("Failed_Fields_Update__c"),
    })
    return details


def project_client(row: dict) -> dict:
    phone = row.get("Phone")
    mobile = row.get("PersonMobilePhone")
    return {
        "clientId": row.get("Id"),
        "name": row.get("Name"),
        "phone": format_phone(phone) if phone else None,
        "mobilePhone": format_phone(mobile) if mobile else None,
        "email": row.get("PersonEmail"),
        "address": row.get("PersonMailingAddress"),
    }


# ─── Tax prep ────────────────────────────────────────────────────

def project_document(row: dict) -> dict:
    return {
        "name": row.get("Name"),
        "year": row.get("Year__c"),
        "agency": row.get("Agency__c"),
        "status": row.get("Prep_Status__c"),
    }


def project_pending_case(case_id: str, case_row: dict | None, documents: list[dict]) -> dict:
    """One case with its pending documents. case_row may be None (lookup found nothing)."""
    case_row = case_row or {}
    return {
        "caseId": case_id,
        "caseName": case_row.get("Name") or UNKNOWN,
        "caseType": case_row.get("CaseType__c") or UNKNOWN,
        "clientName": related(case_row, "Client__r", "Name", UNKNOWN_CLIENT),
        "pendingYears": [d.get("Year__c") for d in documents],
        "pendingDocuments": [project_document(d) for d in documents],
        "totalPendingDocuments": len(documents),
    }


def project_case_summary(row: dict) -> dict:
    return {
        "caseId": row.get("Id"),
        "caseName": row.get("Name"),
        "caseType": row.get("CaseType__c"),
        "createdDate": row.get("CreatedDate"),
    }


def project_field(desc: dict) -> dict:
    return {
        "name": desc.get("name"),
        "label": desc.get("label"),
        "type": desc.get("type"),
        "required": not desc.get("nillable", True),
        "length": desc.get("length"),
        "relationshipName": desc.get("relationshipName"),
        "referenceTo": desc.get("referenceTo") or [],
    }


def is_system_field(name: str) -> bool:
    return name == "Id" or any(marker in name for marker in _SYSTEM_FIELD_MARKERS)


def relevant_fields(described: list[dict]) -> list[dict]:
    """Non-system fields, first MAX_DESCRIBED_FIELDS."""
    fields = [project_field(f) for f in described]
    return [f for f in fields if not is_system_field(f["name"] or "")][:MAX_DESCRIBED_FIELDS]


# ─── Envelope ────────────────────────────────────────────────────

def to_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


def text_content(text: str) -> dict:
    """The tool result shape: a single text content block."""
    return {"content": [{"type": "text", "text": text}]}


def text_result(summary: str, payload: Any) -> dict:
    """Summary line followed by the serialized envelopes."""
    return text_content(f"{summary}\n\n{to_json(payload)}")
