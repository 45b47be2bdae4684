"""Fake Collaborators — in-memory RecordStore and Messenger for handler and API tests.

Invariants:
    - FakeRecordStore answers a query with the rows of the FIRST rule whose marker
      occurs in the query text; no rule matches -> []
    - Every call is recorded (queries, updates, creates, describes, sent messages)
    - Returned rows are deep copies: handlers cannot mutate fixtures

Design Decisions:
    - Flat fake classes (no inheritance): structural Protocols need none
    - Substring rules over a query parser: tests assert on rendered query text anyway
"""

import copy

from record_gateway.core.errors import MessagingError


class FakeRecordStore:
    """RecordStore fake driven by marker -> rows rules."""

    def __init__(self):
        self._rules: list[tuple[str, list[dict]]] = []
        self.queries: list[str] = []
        self.updates: list[tuple[str, dict]] = []
        self.created: list[tuple[str, list[dict]]] = []
        self.described: list[str] = []
        self.create_results = None
        self.describe_result: dict = {"name": "", "label": "", "fields": []}
        self.fail_with: Exception | None = None

    def on_query(self, marker: str, rows: list[dict]) -> "FakeRecordStore":
        self._rules.append((marker, rows))
        return self

    async def execute(self, query: str) -> list[dict]:
        self.queries.append(query)
        if self.fail_with is not None:
            raise self.fail_with
        for marker, rows in self._rules:
            if marker in query:
                return copy.deepcopy(rows)
        return []

    async def update(self, object_type: str, fields: dict) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.updates.append((object_type, dict(fields)))

    async def create(self, object_type: str, records: list[dict]) -> list[dict]:
        if self.fail_with is not None:
            raise self.fail_with
        self.created.append((object_type, copy.deepcopy(records)))
        if self.create_results is not None:
            return copy.deepcopy(self.create_results)
        return [
            {"id": f"a0D00000000{i:04d}AAA", "success": True, "errors": []}
            for i, _ in enumerate(records)
        ]

    async def describe_schema(self, object_type: str) -> dict:
        self.described.append(object_type)
        if self.fail_with is not None:
            raise self.fail_with
        return copy.deepcopy(self.describe_result)


class FakeMessenger:
    """Messenger fake recording every OutboundMessage."""

    def __init__(self, fail: bool = False):
        self.sent = []
        self.fail = fail

    async def send(self, message) -> None:
        if self.fail:
            raise MessagingError("550 mailbox unavailable")
        self.sent.append(message)
