# main.py

"""FastAPI application for the marketplace order API."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings

from . import db as app_db
from .config.validate import validate_on_boot
from .domain import OrderError
from .middlewares import LoggingMiddleware, RequestIdMiddleware
from .obs import init_sentry
from .obs.logging import configure_logging
from .routes_admin_orders import router as admin_orders_router
from .routes_auth import router as auth_router
from .routes_metrics import http_errors_total
from .routes_metrics import router as metrics_router
from .routes_orders import router as orders_router
from .routes_restaurant import router as restaurant_router
from .utils.responses import err

logger = logging.getLogger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level.upper())
    validate_on_boot()
    init_sentry(settings.error_dsn, os.getenv("APP_ENV", "dev"))
    await app_db.create_all()
    if settings.seed_demo_data:
        from .seed import seed

        async with app_db.get_sessionmaker()() as session:
            await seed(session)
    logger.info("api started")
    yield
    await app_db.dispose()


app = FastAPI(title="Marketplace Orders API", lifespan=lifespan)

# The last middleware added runs first; request ids must exist before logging.
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestIdMiddleware)


@app.exception_handler(OrderError)
async def order_error_handler(request: Request, exc: OrderError) -> JSONResponse:
    http_errors_total.labels(code=exc.code).inc()
    return JSONResponse(
        err(exc.code, exc.message, exc.details or None), status_code=exc.status_code
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query")]
        fields[".".join(loc) or "body"] = error.get("msg", "invalid")
    http_errors_total.labels(code="VALIDATION_ERROR").inc()
    return JSONResponse(
        err("VALIDATION_ERROR", "Invalid input", fields), status_code=400
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    code = "NOT_FOUND" if exc.status_code == 404 else f"HTTP_{exc.status_code}"
    http_errors_total.labels(code=code).inc()
    return JSONResponse(
        err(code, str(exc.detail)), status_code=exc.status_code, headers=exc.headers
    )


@app.get("/api/health")
async def health() -> dict:
    return {"status": "healthy", "service": "marketplace-orders"}


app.include_router(auth_router)
app.include_router(orders_router)
app.include_router(admin_orders_router)
app.include_router(restaurant_router)
app.include_router(metrics_router)
