from fastapi import APIRouter, Depends

from dependencies.auth import get_current_user

from .explain import router as explain_router
from .health import router as health_router
from .quizzes import router as quizzes_router


# Public API router (health)
api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])


# Protected routers: all routes require authentication by default
protected_deps = [Depends(get_current_user)]
api_router.include_router(quizzes_router, dependencies=protected_deps)
api_router.include_router(explain_router, dependencies=protected_deps)
