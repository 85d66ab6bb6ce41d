"""Boundary Protocols: the record-access contract between application and storage.

Invariants:
    - Zero affected/returned rows raise RecordNotFoundError (get_all excepted,
      which returns an empty list)
    - Every other storage failure raises StorageError or a subclass
    - Implementations provided by infrastructure (SQL) and tests (in-memory fake)

Design Decisions:
    - Protocol over ABC: structural subtyping, the fake needs no base class
"""

from typing import Protocol

from employee_service.core.domain_types import EmployeeId
from employee_service.core.employee import Employee


class EmployeeRepository(Protocol):
    """Record access for the employees table."""

    async def create(self, employee: Employee) -> Employee:
        """Stamp both timestamps, insert, assign the generated id."""
        ...

    async def update(self, employee: Employee) -> Employee:
        """Restamp updated_at and overwrite the row selected by employee.id."""
        ...

    async def get_by_id(self, employee_id: EmployeeId) -> Employee:
        ...

    async def get_all(self) -> list[Employee]:
        """All rows, newest id first."""
        ...

    async def delete(self, employee_id: EmployeeId) -> None:
        ...
