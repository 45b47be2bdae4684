"""Pydantic Schemas — JSON-RPC envelope validation.

Invariants:
    - Schemas validate at the system boundary (inbound requests, outbound responses)
"""
