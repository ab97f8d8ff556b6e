import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from motorent.config import settings
from motorent.database import check_db_connection
from motorent.utils.email import close_http_client
from motorent.utils.exceptions import AppException
from motorent.middleware.error_handler import (
    app_exception_handler,
    validation_exception_handler,
    integrity_error_handler,
    generic_exception_handler,
)

from motorent.api.v1 import auth
from motorent.api.v1 import users
from motorent.api.v1 import motorcycles
from motorent.api.v1 import reservations
from motorent.api.v1 import documents
from motorent.api.v1 import notifications
from motorent.api.v1 import transactions
from motorent.api.v1 import contact
from motorent.api.v1 import admin
from motorent.api.v1 import storage

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        description="Motorcycle rental booking, fleet and document verification API",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # ─── CORS ─────────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── Exception Handlers ───────────────────────────────────────────────────
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # ─── Routers ──────────────────────────────────────────────────────────────
    PREFIX = "/api/v1"
    app.include_router(auth.router,          prefix=PREFIX, tags=["Auth"])
    app.include_router(users.router,         prefix=PREFIX, tags=["Users"])
    app.include_router(motorcycles.router,   prefix=PREFIX, tags=["Motorcycles"])
    app.include_router(reservations.router,  prefix=PREFIX, tags=["Reservations"])
    app.include_router(documents.router,     prefix=PREFIX, tags=["Documents"])
    app.include_router(notifications.router, prefix=PREFIX, tags=["Notifications"])
    app.include_router(transactions.router,  prefix=PREFIX, tags=["Transactions"])
    app.include_router(contact.router,       prefix=PREFIX, tags=["Contact"])
    app.include_router(admin.router,         prefix=PREFIX, tags=["Admin"])
    app.include_router(storage.router,       tags=["Storage"])

    # ─── Lifecycle ────────────────────────────────────────────────────────────
    @app.on_event("startup")
    def on_startup():
        ok = check_db_connection()
        logger.info("DB connected" if ok else "DB connection FAILED")

    @app.on_event("shutdown")
    def on_shutdown():
        close_http_client()

    # ─── Health ───────────────────────────────────────────────────────────────
    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok", "app": settings.APP_NAME, "version": "1.0.0"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("motorent.main:app", host=settings.APP_HOST, port=settings.APP_PORT,
                reload=settings.is_development)
