"""Pydantic Schemas - request validation at the HTTP boundary.

Invariants:
    - Schemas validate user input before any IO happens
    - Schemas are API contracts, models are persistence
"""
