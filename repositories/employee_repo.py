"""
repositories/employee_repo.py
------------------------------
Data access layer for employee records.
"""

from typing import Optional

from config import EMPLOYEES_INCLUDE_WITHOUT_ORDERS
from db.connection import get_connection, release_connection
from models.employee import Employee
from utils.logger import get_logger

logger = get_logger(__name__)

ALL_EMPLOYEES_COLUMNS = (
    "id",
    "firstname",
    "lastname",
    "region",
    "hiredate",
    "title",
    "reportsto",
)

_LIST_EMPLOYEES_SQL = """
    SELECT {columns},
           count(o.id) AS ordercount
    FROM employee AS e
    {join} customerorder AS o ON e.id = o.employeeid
    GROUP BY e.id
    ORDER BY e.id;
"""


class EmployeeRepository:
    """Repository for read operations on the employee table."""

    def __init__(self, include_without_orders: bool = EMPLOYEES_INCLUDE_WITHOUT_ORDERS):
        self.include_without_orders = include_without_orders

    def get_all_employees(self, include_without_orders: Optional[bool] = None) -> list[Employee]:
        """
        Fetch employees, each annotated with the number of orders they handle.

        By default only employees with at least one order are listed.

        Args:
            include_without_orders: Also list employees without orders
                (with an ordercount of 0). None uses the repository setting.

        Returns:
            List of Employee objects ordered by id.
        """
        if include_without_orders is None:
            include_without_orders = self.include_without_orders
        query = _LIST_EMPLOYEES_SQL.format(
            columns=", ".join(f"e.{column}" for column in ALL_EMPLOYEES_COLUMNS),
            join="LEFT JOIN" if include_without_orders else "INNER JOIN",
        )
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(query)
                return [self._row_to_employee(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        """Fetch a single employee by ID. Returns None if not found."""
        sql = "SELECT * FROM employee WHERE id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (employee_id,))
                row = cur.fetchone()
                return self._row_to_employee(row) if row else None
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_employee(row: dict) -> Employee:
        """Convert a database row to an Employee domain object."""
        return Employee(
            id=row["id"],
            firstname=row["firstname"],
            lastname=row["lastname"],
            region=row.get("region"),
            hiredate=row.get("hiredate"),
            title=row.get("title"),
            reportsto=row.get("reportsto"),
            ordercount=row.get("ordercount"),
        )
