import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from grade_api.api.routes import router as api_router
from grade_api.core.config import Settings, load_settings
from grade_api.core.database import Database
from grade_api.core.errors import GradeApiError
from grade_api.core.logging import mask_url, setup_logging
from grade_api.schemas.common import HealthResponse
import grade_api.models  # noqa: F401

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings)
    if database is None:
        database = Database(settings.database_url, settings.db_connect_timeout)

    app = FastAPI(title="Student Grade Management API", version="0.1.0")
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    _add_exception_handlers(app)

    @app.on_event("startup")
    def on_startup():
        logger.info("Environment: %s", settings.environment)
        logger.info("Database URL: %s", mask_url(settings.database_url))
        database.init()

    @app.on_event("shutdown")
    def on_shutdown():
        database.dispose()

    @app.get("/", response_model=HealthResponse)
    def health_check():
        return {
            "message": "Student Grade Management API is running!",
            "status": "OK",
            "mongoStatus": "Connected" if database.is_connected() else "Disconnected",
        }

    return app


def _add_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(GradeApiError)
    async def grade_api_error_handler(request: Request, exc: GradeApiError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.error)
        return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            body = {"error": "Route not found"}
        else:
            body = {"error": str(exc.detail)}
        return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "details": str(exc)},
        )
