import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from roombook import __version__
from roombook.config import settings
from roombook.database import check_db_connection, init_db
from roombook.utils.exceptions import AppException
from roombook.middleware.error_handler import (
    app_exception_handler,
    validation_exception_handler,
    http_exception_handler,
    integrity_error_handler,
    operational_error_handler,
    generic_exception_handler,
)
from roombook.middleware.rate_limit import build_rate_limiter, rate_limit_middleware
from roombook.middleware.security_headers import security_headers_middleware

from roombook.api.v1 import devices
from roombook.api.v1 import auditories
from roombook.api.v1 import bookings
from roombook.api.v1 import health

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=__version__,
        description="Device, auditory and booking administration API",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # ─── Middleware ───────────────────────────────────────────────────────────
    # Registered innermost first
    app.middleware("http")(rate_limit_middleware)
    app.middleware("http")(security_headers_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.rate_limiter = build_rate_limiter()

    # ─── Exception Handlers ───────────────────────────────────────────────────
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(OperationalError, operational_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # ─── Routers ──────────────────────────────────────────────────────────────
    PREFIX = "/api"
    app.include_router(devices.router,    prefix=PREFIX, tags=["Devices"])
    app.include_router(auditories.router, prefix=PREFIX, tags=["Auditories"])
    app.include_router(bookings.router,   prefix=PREFIX, tags=["Bookings"])
    app.include_router(health.router,     prefix=PREFIX, tags=["Health"])

    # ─── Startup ──────────────────────────────────────────────────────────────
    @app.on_event("startup")
    def on_startup():
        ok = check_db_connection()
        logger.info("DB connected" if ok else "DB connection FAILED")
        if ok and settings.DATABASE_CREATE_TABLES:
            init_db()

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("roombook.main:app", host=settings.APP_HOST, port=settings.APP_PORT,
                reload=settings.is_development)
