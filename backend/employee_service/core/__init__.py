"""Core Layer: entity, identifiers, error taxonomy and boundary protocols.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Nothing here performs IO
"""
