"""Employee Service: existence-check rules on top of the record-access layer.

Invariants:
    - create / list_employees pass storage errors through unchanged
    - get, update and delete report ANY failure of the existence lookup as
      EmployeeNotFoundError; a storage fault during the lookup is not told apart
      from a missing row
    - Failures of the mutation itself (update/delete after a successful lookup)
      propagate unchanged, including RecordNotFoundError when a concurrent delete
      won the race between lookup and mutation
"""

import logging

from employee_service.core.domain_types import EmployeeId
from employee_service.core.employee import Employee
from employee_service.core.errors import EmployeeNotFoundError, EmployeeServiceError
from employee_service.core.repository_protocols import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Application operations over an EmployeeRepository."""

    def __init__(self, repository: EmployeeRepository):
        self._repository = repository

    async def create(self, employee: Employee) -> Employee:
        return await self._repository.create(employee)

    async def update(self, employee: Employee) -> Employee:
        """Overwrite every mutable field of an existing employee.

        The stored created_at is carried over onto the returned entity so the
        caller gets the full record back.
        """
        existing = await self._require(employee.id)
        employee.created_at = existing.created_at
        return await self._repository.update(employee)

    async def get(self, employee_id: EmployeeId) -> Employee:
        return await self._require(employee_id)

    async def list_employees(self) -> list[Employee]:
        return await self._repository.get_all()

    async def delete(self, employee_id: EmployeeId) -> None:
        await self._require(employee_id)
        await self._repository.delete(employee_id)

    async def _require(self, employee_id: EmployeeId) -> Employee:
        try:
            return await self._repository.get_by_id(employee_id)
        except EmployeeServiceError as e:
            logger.info(
                f"Employee #{employee_id} lookup failed: {e.message}",
                extra={"employee_id": employee_id, "error_code": e.code},
            )
            raise EmployeeNotFoundError(employee_id) from e
        except Exception as e:
            logger.warning(
                f"Employee #{employee_id} lookup failed unexpectedly: {e!r}",
                extra={"employee_id": employee_id},
            )
            raise EmployeeNotFoundError(employee_id) from e
