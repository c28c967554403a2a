from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import logging

from mini_lms.core.config import settings

# Configure logging before the rest of the app creates its loggers
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

from mini_lms.core.database import create_db_and_tables
from mini_lms.core.exceptions import LMSError
from mini_lms.core.firebase_config import initialize_firebase_app
from mini_lms.routes import api_router_v1


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Courses, modules, enrollments, learner progress, feedback and notifications.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router_v1)


@app.on_event("startup")
async def on_startup():
    logger.info(f"Starting {settings.PROJECT_NAME}; CORS origins: {settings.CORS_ALLOWED_ORIGINS}")
    try:
        initialize_firebase_app()
    except Exception as e:
        # The API still starts; token verification fails with 502 until credentials are fixed
        logger.error(f"Firebase initialization failed: {e}", exc_info=True)

    # Dev convenience only; schema changes go through Alembic
    try:
        create_db_and_tables()
    except Exception as e:
        logger.error(f"Could not create database tables: {e}", exc_info=True)


@app.exception_handler(LMSError)
async def handle_lms_error(request: Request, exc: LMSError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {type(exc).__name__}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(f"Unhandled exception for request {request.method} {request.url}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected internal server error occurred."},
    )


@app.get("/", tags=["Root"])
async def read_root():
    return {"name": settings.PROJECT_NAME, "docs": "/docs"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("mini_lms.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
