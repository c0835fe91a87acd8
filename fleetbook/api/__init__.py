"""HTTP routers for the ``/api`` surface."""
from __future__ import annotations

from fastapi import APIRouter

from . import backup, drivers, employees, expense_types, expenses, print_templates, settings, users

router = APIRouter(prefix="/api")
router.include_router(drivers.router)
router.include_router(expenses.router)
router.include_router(employees.router)
router.include_router(expense_types.router)
router.include_router(settings.router)
router.include_router(print_templates.router)
router.include_router(users.router)
router.include_router(backup.router)

__all__ = ["router"]
