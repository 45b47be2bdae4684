"""Boundary Protocols — contracts between tool handlers and external collaborators.

Invariants:
    - Handlers depend only on these Protocols, never on httpx or smtplib
    - Every collaborator failure surfaces as a CollaboratorError subclass
    - create() reports per-record outcomes; partial failure is data, not an exception

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO, handlers await them
"""

from dataclasses import dataclass
from typing import Protocol, TypedDict


class CreateResult(TypedDict):
    """Per-record outcome of RecordStore.create()."""
    id: str | None
    success: bool
    errors: list


@dataclass(frozen=True)
class OutboundMessage:
    """An HTML email handed to the Messenger."""
    from_address: str
    to: str | None
    subject: str
    html: str


class RecordStore(Protocol):
    """Contract for the remote record store — implemented in infrastructure/."""
    async def execute(self, query: str) -> list[dict]: ...
    async def update(self, object_type: str, fields: dict) -> None: ...
    async def create(self, object_type: str, records: list[dict]) -> list[CreateResult]: ...
    async def describe_schema(self, object_type: str) -> dict: ...


class Messenger(Protocol):
    """Contract for outbound message delivery — implemented in infrastructure/."""
    async def send(self, message: OutboundMessage) -> None: ...
