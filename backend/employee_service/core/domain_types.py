"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - EmployeeId wraps the storage-assigned integer key; 0 means "not yet stored"
    - MAX_EMPLOYEE_ID is the largest id a signed 64-bit column can hold
"""

from typing import NewType

EmployeeId = NewType("EmployeeId", int)

UNASSIGNED_ID = EmployeeId(0)
MAX_EMPLOYEE_ID = 2**63 - 1
