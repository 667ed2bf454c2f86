import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.config import settings
from taskboard.core.database import DatabaseSessionManager, aget_db
from taskboard.core.errors import (
    ServiceError,
    integrity_error_handler,
    service_error_handler,
    store_error_handler,
)
from taskboard.core.limiter import limiter

from taskboard.api.v1.endpoints.auth import router as auth_router
from taskboard.api.v1.endpoints.projects import router as projects_router
from taskboard.api.v1.endpoints.tasks import router as tasks_router
from taskboard.api.v1.endpoints.subtasks import router as subtasks_router
from taskboard.api.v1.endpoints.meetings import router as meetings_router
from taskboard.api.v1.endpoints.home import router as home_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Async context manager for app lifespan events"""
    session_manager = DatabaseSessionManager()
    try:
        logger.info("🚀 Starting Taskboard application...")
        logger.info("🔌 Initializing database connection pool...")
        await session_manager.init()
        app.state.session_manager = session_manager
        logger.info("✅ Database connection pool ready")
    except Exception as e:
        logger.critical(f"🔥 Application startup failed: {str(e)}")
        raise

    try:
        yield
    finally:
        logger.info("🔌 Closing database connections...")
        await session_manager.close()
        logger.info("👋 Application shutdown complete")


app = FastAPI(
    title="Taskboard API",
    description="Projects, tasks, subtasks and meetings",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(ServiceError, service_error_handler)
app.add_exception_handler(IntegrityError, integrity_error_handler)
app.add_exception_handler(SQLAlchemyError, store_error_handler)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"Request: {request.method} {request.url}")
    response = await call_next(request)
    logger.info(f"Response status: {response.status_code}")
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"Validation Error: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(exc.errors())},
    )

@app.get("/", tags=["Health Check"])
async def health_check(db: AsyncSession = Depends(aget_db)):
    try:
        await db.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "service": "Taskboard API",
            "database": "connected",
        }
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {str(e)}")
        return {
            "status": "unhealthy",
            "service": "Taskboard API",
            "database": "disconnected",
        }


app.include_router(auth_router, prefix="/api/v1", tags=["Authentication"])
app.include_router(projects_router, prefix="/api/v1", tags=["Projects"])
app.include_router(tasks_router, prefix="/api/v1", tags=["Tasks"])
app.include_router(subtasks_router, prefix="/api/v1", tags=["SubTasks"])
app.include_router(meetings_router, prefix="/api/v1", tags=["Meetings"])
app.include_router(home_router, prefix="/api/v1", tags=["Home"])

logger.info(f"✅ Loaded {len(app.routes)} routes")
