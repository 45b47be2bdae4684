"""Core Layer — pure domain logic, no IO, no async, no network.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core (phone, query rendering, projection) separated from the
      imperative shell that talks to the record store
"""
