"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every endpoint returns JSON; the RPC endpoint always returns a JSON-RPC envelope

Design Decisions:
    - Thin routes delegate to services
"""
