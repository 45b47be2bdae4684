"""Services Layer — tool schemas, tool handlers, tool dispatch, and RPC dispatch.

Invariants:
    - Handlers split by profile (one handler class per tool set)
    - Tool dispatch uses explicit dict mapping (no auto-discovery)

Design Decisions:
    - One define_*_tools.py + handle_*.py pair per profile for locality
"""
