"""Employee Schemas: Pydantic models with field-level validation for API boundaries.

Invariants:
    - EmployeeIn: first_name, last_name, email required (1-255 chars, stripped, non-empty);
      position optional
    - id, created_at, updated_at sent by clients are ignored (server assigns them)
    - EmployeeOut serializes timestamps as RFC3339 UTC
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from employee_service.core.domain_types import EmployeeId, UNASSIGNED_ID
from employee_service.core.employee import Employee


class EmployeeIn(BaseModel):
    """POST /employees and PUT /employees/{id} request body."""
    model_config = ConfigDict(extra="ignore")

    first_name: str = Field(min_length=1, max_length=255)
    last_name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=320)
    position: str | None = Field(None, max_length=255)

    @field_validator("first_name", "last_name", "email")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty or whitespace")
        return v

    def to_entity(self, employee_id: EmployeeId = UNASSIGNED_ID) -> Employee:
        return Employee(
            id=employee_id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            position=self.position,
        )


class EmployeeOut(BaseModel):
    """Response body for a single employee."""
    id: int
    first_name: str
    last_name: str
    email: str
    position: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, employee: Employee) -> "EmployeeOut":
        return cls(
            id=employee.id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email,
            position=employee.position,
            created_at=employee.created_at,
            updated_at=employee.updated_at,
        )
