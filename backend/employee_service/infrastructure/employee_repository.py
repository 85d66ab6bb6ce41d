"""SQL Employee Repository: record access for the employees table.

Invariants:
    - One statement per operation, each in its own short session (no multi-statement transactions)
    - Statements are built with SQLAlchemy Core, so user values are always bound parameters
    - Zero rows on update / get_by_id / delete raise RecordNotFoundError;
      get_all returns [] instead
    - Driver failures leave DatabaseSessionManager.session() as StorageError subclasses
"""

import logging

from sqlalchemy import delete, insert, select, update

from employee_service.core.domain_types import EmployeeId
from employee_service.core.employee import Employee, as_utc, utc_now
from employee_service.core.errors import RecordNotFoundError
from employee_service.infrastructure.database import DatabaseSessionManager
from employee_service.models.employee import EmployeeRecord

logger = logging.getLogger(__name__)

employees = EmployeeRecord.__table__
_TABLE = employees.name


def _to_entity(row: EmployeeRecord) -> Employee:
    return Employee(
        id=EmployeeId(row.id),
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        position=row.position,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


class SqlEmployeeRepository:
    """EmployeeRepository backed by a DatabaseSessionManager pool."""

    def __init__(self, db_manager: DatabaseSessionManager):
        self._db = db_manager

    async def create(self, employee: Employee) -> Employee:
        employee.stamp_created(utc_now())
        stmt = insert(employees).values(
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email,
            position=employee.position,
            created_at=employee.created_at,
            updated_at=employee.updated_at,
        )
        async with self._db.session("insert employee") as db:
            result = await db.execute(stmt)
            await db.commit()
        employee.id = EmployeeId(result.inserted_primary_key[0])
        logger.info(
            f"Created employee #{employee.id}",
            extra={"employee_id": employee.id},
        )
        return employee

    async def update(self, employee: Employee) -> Employee:
        employee.stamp_updated(utc_now())
        stmt = (
            update(employees)
            .where(employees.c.id == employee.id)
            .values(
                first_name=employee.first_name,
                last_name=employee.last_name,
                email=employee.email,
                position=employee.position,
                updated_at=employee.updated_at,
            )
        )
        async with self._db.session("update employee") as db:
            result = await db.execute(stmt)
            await db.commit()
        if result.rowcount == 0:
            raise RecordNotFoundError(_TABLE, employee.id, "update")
        logger.info(
            f"Updated employee #{employee.id}",
            extra={"employee_id": employee.id},
        )
        return employee

    async def get_by_id(self, employee_id: EmployeeId) -> Employee:
        async with self._db.session("select employee") as db:
            result = await db.execute(
                select(EmployeeRecord).where(EmployeeRecord.id == employee_id),
            )
            row = result.scalar_one_or_none()
        if row is None:
            raise RecordNotFoundError(_TABLE, employee_id, "select")
        return _to_entity(row)

    async def get_all(self) -> list[Employee]:
        async with self._db.session("select employees") as db:
            result = await db.execute(
                select(EmployeeRecord).order_by(EmployeeRecord.id.desc()),
            )
            rows = result.scalars().all()
        return [_to_entity(r) for r in rows]

    async def delete(self, employee_id: EmployeeId) -> None:
        stmt = delete(employees).where(employees.c.id == employee_id)
        async with self._db.session("delete employee") as db:
            result = await db.execute(stmt)
            await db.commit()
        if result.rowcount == 0:
            raise RecordNotFoundError(_TABLE, employee_id, "delete")
        logger.info(
            f"Deleted employee #{employee_id}",
            extra={"employee_id": employee_id},
        )
