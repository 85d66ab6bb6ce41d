"""ORM Models: SQLAlchemy declarative tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - Importing this package registers every table on Base.metadata,
      which schema bootstrap relies on
"""

from employee_service.models.employee import EmployeeRecord  # noqa: F401
