"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all SQL queries for a specific domain entity.
Repositories receive raw data from the database and return domain model objects.
"""

from repositories.employee_repo import EmployeeRepository
from repositories.errors import InsertionError, InvalidCollectionOptionError, RepositoryError
from repositories.order_repo import OrderRepository

__all__ = [
    "EmployeeRepository",
    "InsertionError",
    "InvalidCollectionOptionError",
    "OrderRepository",
    "RepositoryError",
]
