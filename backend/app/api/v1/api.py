from fastapi import APIRouter

from backend.app.api.v1.endpoints import (
    accounts,
    expense_categories,
    expenses,
    history,
    hourly_work,
    notifications,
    payments,
    platforms,
    projects,
    summary,
    users,
)

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(accounts.router, prefix="/accounts", tags=["accounts"])
api_router.include_router(platforms.router, prefix="/platforms", tags=["platforms"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(hourly_work.router, prefix="/hourly-work", tags=["hourly-work"])
api_router.include_router(payments.router, prefix="/project-payments", tags=["project-payments"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
api_router.include_router(expense_categories.router, prefix="/expense-categories", tags=["expense-categories"])
api_router.include_router(history.router, prefix="/history", tags=["history"])
api_router.include_router(summary.router, prefix="/summary", tags=["summary"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
