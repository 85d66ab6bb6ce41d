"""Employee Routes: HTTP mapping for the employee CRUD operations.

Invariants:
    - Path ids must be integers in [1, 2^63-1]; anything else is a 400
    - Every route also answers with a trailing slash, the form /api/v1 clients use
    - PUT takes the id from the path, never from the body
    - POST -> 201 + body, GET/PUT -> 200 + body, DELETE -> 204 without body
    - Not-found -> 404, everything else from the service -> its error's status (500 for storage)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status

from employee_service.api.dependencies import get_employee_service
from employee_service.core.domain_types import EmployeeId, MAX_EMPLOYEE_ID
from employee_service.schemas.employee import EmployeeIn, EmployeeOut
from employee_service.services.employee_service import EmployeeService

router = APIRouter(prefix="/employees", tags=["employees"])

EmployeeIdPath = Annotated[
    int, Path(ge=1, le=MAX_EMPLOYEE_ID, description="Employee id"),
]


@router.post(
    "", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED,
)
@router.post(
    "/", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
async def create_employee(
    body: EmployeeIn,
    service: EmployeeService = Depends(get_employee_service),
):
    """Create an employee; id and timestamps are assigned by storage."""
    employee = await service.create(body.to_entity())
    return EmployeeOut.from_entity(employee)


@router.get("", response_model=list[EmployeeOut])
@router.get("/", response_model=list[EmployeeOut], include_in_schema=False)
async def list_employees(
    service: EmployeeService = Depends(get_employee_service),
):
    """All employees, newest first."""
    employees = await service.list_employees()
    return [EmployeeOut.from_entity(e) for e in employees]


@router.get("/{employee_id}", response_model=EmployeeOut)
@router.get("/{employee_id}/", response_model=EmployeeOut, include_in_schema=False)
async def get_employee(
    employee_id: EmployeeIdPath,
    service: EmployeeService = Depends(get_employee_service),
):
    employee = await service.get(EmployeeId(employee_id))
    return EmployeeOut.from_entity(employee)


@router.put("/{employee_id}", response_model=EmployeeOut)
@router.put("/{employee_id}/", response_model=EmployeeOut, include_in_schema=False)
async def update_employee(
    body: EmployeeIn,
    employee_id: EmployeeIdPath,
    service: EmployeeService = Depends(get_employee_service),
):
    """Overwrite every mutable field of an employee."""
    employee = await service.update(body.to_entity(EmployeeId(employee_id)))
    return EmployeeOut.from_entity(employee)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
@router.delete(
    "/{employee_id}/", status_code=status.HTTP_204_NO_CONTENT, include_in_schema=False,
)
async def delete_employee(
    employee_id: EmployeeIdPath,
    service: EmployeeService = Depends(get_employee_service),
):
    await service.delete(EmployeeId(employee_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
