import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1.academic.router import router as academic_router
from app.api.v1.announcements.router import router as announcements_router
from app.api.v1.announcements.service import run_publisher
from app.api.v1.auth.router import router as auth_router
from app.api.v1.dashboard.router import router as dashboard_router
from app.api.v1.faculty.router import router as faculty_router
from app.api.v1.marks.router import router as marks_router
from app.api.v1.messages.router import router as messages_router
from app.api.v1.reports.router import router as reports_router
from app.api.v1.requests.router import router as requests_router
from app.api.v1.students.router import router as students_router
from app.api.v1.transport.router import router as transport_router
from app.core.config import settings
from app.core.exceptions import BackendError
from app.db.session import engine

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

STORAGE_FAILURE_MESSAGE = "Internal server error"


@asynccontextmanager
async def lifespan(app: FastAPI):
    publisher = None
    if settings.announcement_publish_interval_seconds > 0:
        publisher = asyncio.create_task(run_publisher(settings.announcement_publish_interval_seconds))
    logger.info("EduGovern admin backend started")
    try:
        yield
    finally:
        if publisher is not None:
            publisher.cancel()
            try:
                await publisher
            except asyncio.CancelledError:
                pass
        await engine.dispose()
        logger.info("EduGovern admin backend stopped")


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    error = BackendError(STORAGE_FAILURE_MESSAGE)
    logger.exception("Unhandled storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=error.status_code, content={"detail": error.message})


def create_app() -> FastAPI:
    app = FastAPI(title="EduGovern Admin Backend", lifespan=lifespan)

    # CORS: admin and staff frontends
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(SQLAlchemyError, storage_error_handler)

    # Routers
    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(academic_router)
    app.include_router(students_router)
    app.include_router(faculty_router)
    app.include_router(transport_router)
    app.include_router(announcements_router)
    app.include_router(messages_router)
    app.include_router(requests_router)
    app.include_router(marks_router)
    app.include_router(reports_router)

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"success": True, "message": "Server is running"}

    return app


app = create_app()
