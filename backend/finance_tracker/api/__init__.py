from fastapi import APIRouter

from .users import router as users_router
from .sessions import router as sessions_router
from .transactions import router as transactions_router
from .budgets import router as budgets_router
from .imports import router as imports_router
from .reports import router as reports_router
from .settings import router as settings_router

api_router = APIRouter(prefix="/users/{username}")

api_router.include_router(users_router, tags=["users"])
api_router.include_router(sessions_router, prefix="/session", tags=["session"])
api_router.include_router(transactions_router, prefix="/transactions", tags=["transactions"])
api_router.include_router(budgets_router, prefix="/budgets", tags=["budgets"])
api_router.include_router(imports_router, prefix="/import", tags=["import"])
api_router.include_router(reports_router, prefix="/reports", tags=["reports"])
api_router.include_router(settings_router, prefix="/settings", tags=["settings"])
