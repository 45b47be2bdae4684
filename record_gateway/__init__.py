"""Record Gateway Package — JSON-RPC tool gateway over a remote record store.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
