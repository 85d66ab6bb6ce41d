"""Employee Service package: CRUD over a single employee table.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
