"""Infrastructure Layer: storage pool, SQL repository and logging setup.

Invariants:
    - Infrastructure never raises raw SQLAlchemy exceptions past its boundary;
      every driver failure is mapped to core/errors.py
"""
