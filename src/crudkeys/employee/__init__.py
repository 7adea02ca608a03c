"""
Employee

This module provides data access for employees, whose keys are issued by
an identifier generator.
"""

from crudkeys.employee.repository import EmployeeRepository

__all__ = ["EmployeeRepository"]
