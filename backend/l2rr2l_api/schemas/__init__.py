"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (client input, API responses)
    - Wire format is camelCase; Python attributes are snake_case
"""
