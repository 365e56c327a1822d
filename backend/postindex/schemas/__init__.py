"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (query params, stream events, responses)
    - Domain types from core/ used for enum fields
"""
