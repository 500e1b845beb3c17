from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from .api import players_router, report_router, seating_charts_router, sessions_router
from .core.config import settings
from .core.db import engine
from .models.db import Base


def configure_logging() -> None:
    """Configure structured logging for the application."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Set specific log levels for third-party libraries
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)
configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")
    yield
    logger.info("Application shutdown")


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """FastAPI's 422 body without the echoed input, which may hold NaN or Infinity."""
    errors = [{k: v for k, v in err.items() if k != "input"} for err in exc.errors()]
    logger.warning(f"Validation error on {request.method} {request.url.path}: {len(errors)} error(s)")
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


def create_app() -> FastAPI:
    app = FastAPI(title="Poker Night Manager", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log incoming requests."""
        logger.info(f"Request: {request.method} {request.url.path}")
        response = await call_next(request)
        logger.info(f"Response: {request.method} {request.url.path} - Status: {response.status_code}")
        return response

    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(players_router)
    app.include_router(sessions_router)
    app.include_router(report_router)
    app.include_router(seating_charts_router)

    @app.get("/")
    def root():
        return {"ok": True, "service": "poker-night-manager", "docs": "/docs"}

    @app.get("/health")
    def health():
        return {"status": "ok", "message": "Poker Night Manager API is running"}

    return app


app = create_app()
