"""
models/employee.py
------------------
Domain model for employees.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class Employee:
    """
    Represents an employee.

    Attributes:
        id: Database primary key.
        firstname / lastname: Employee name.
        region: Sales region, if any.
        hiredate: Date of hire.
        title: Job title.
        reportsto: Id of the employee's manager (None at the top).
        ordercount: Number of orders handled (only set by listings).
    """
    id: int
    firstname: str
    lastname: str
    region: Optional[str] = None
    hiredate: Optional[date] = None
    title: Optional[str] = None
    reportsto: Optional[int] = None
    ordercount: Optional[int] = None

    @property
    def fullname(self) -> str:
        return f"{self.firstname} {self.lastname}"

    def __str__(self) -> str:
        return f"{self.fullname} ({self.title or '-'})"
