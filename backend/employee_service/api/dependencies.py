"""Request-scoped dependencies resolved from app.state.

Invariants:
    - app.state.employee_service is set by create_app() or by the lifespan
      before the first request is served
"""

from fastapi import Request

from employee_service.services.employee_service import EmployeeService


def get_employee_service(request: Request) -> EmployeeService:
    """FastAPI dependency for the application layer."""
    service = getattr(request.app.state, "employee_service", None)
    if service is None:
        raise RuntimeError("Employee service not initialized")
    return service
