"""Employee Entity: the transient in-memory copy of one employees row.

Invariants:
    - id is UNASSIGNED_ID until storage assigns it on create
    - created_at is set once by create; updated_at is restamped by every update
    - Timestamps are timezone-aware UTC once they have been stamped
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from employee_service.core.domain_types import EmployeeId, UNASSIGNED_ID


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from drivers that drop tzinfo."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class Employee:
    """One employee record."""
    first_name: str
    last_name: str
    email: str
    position: str | None = None
    id: EmployeeId = UNASSIGNED_ID
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def stamp_created(self, now: datetime) -> None:
        self.created_at = now
        self.updated_at = now

    def stamp_updated(self, now: datetime) -> None:
        self.updated_at = now
