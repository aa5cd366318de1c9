"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from api/
    - All external calls wrapped with timeout and error mapping
"""
