# This file makes the 'routes' directory a Python package.

from fastapi import APIRouter

from mini_lms.core.config import settings

from .auth_routes import router as auth_router
from .course_routes import router as course_router
from .module_routes import router as module_router
from .progress_routes import router as progress_router
from .enrollment_routes import router as enrollment_router
from .feedback_routes import router as feedback_router
from .notification_routes import router as notification_router
from .analytics_routes import router as analytics_router

api_router_v1 = APIRouter(prefix=settings.API_V1_STR)

api_router_v1.include_router(auth_router)
api_router_v1.include_router(course_router)
api_router_v1.include_router(module_router)
api_router_v1.include_router(progress_router)
api_router_v1.include_router(enrollment_router)
api_router_v1.include_router(feedback_router)
api_router_v1.include_router(notification_router)
api_router_v1.include_router(analytics_router)

__all__ = [
    "api_router_v1"
]
