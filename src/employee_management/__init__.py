"""Employee Management System package.

Organized by feature modules (employees, departments, leaves, payroll, ...)
with a thin Flask controller layer over service/repository layers.
"""
from .main import create_app

__all__ = ["create_app"]
