"""Pydantic Schemas: request/response contracts for the HTTP surface.

Invariants:
    - Schemas validate at the system boundary only
    - Conversion to/from the core Employee entity happens here, not in routes
"""
