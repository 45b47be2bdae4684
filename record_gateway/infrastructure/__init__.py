"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports handler logic from services/
    - All external calls wrapped with timeout and error mapping to CollaboratorError
"""
