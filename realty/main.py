# realty/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .db import init_db
from .errors import (
    CatalogError,
    ConstraintViolation,
    DuplicateName,
    InvalidRelation,
    NotFound,
    PartialFailure,
    UnsupportedOperation,
)
from .logging_config import configure_logging
from .middleware.request_id import RequestIDMiddleware
from .middleware.structured_logging import StructuredLoggingMiddleware

from .routers.health import router as health_router
from .routers.working_areas import router as working_areas_router
from .routers.properties import router as properties_router
from .routers.units import router as units_router
from .routers.support import router as support_router

log = logging.getLogger("realty.app")

# most specific first; the first isinstance match wins
STATUS_BY_ERROR: tuple[tuple[type[CatalogError], int], ...] = (
    (NotFound, 404),
    (DuplicateName, 409),
    (ConstraintViolation, 409),
    (InvalidRelation, 400),
    (UnsupportedOperation, 405),
    (PartialFailure, 503),
)


def _cors_origins() -> list[str]:
    val = getattr(settings, "cors_allow_origins", ["*"])
    if isinstance(val, str):
        v = val.strip()
        return ["*"] if v == "*" else [x.strip() for x in v.split(",") if x.strip()]
    if isinstance(val, list) and val:
        return val
    return ["*"]


def status_for(exc: CatalogError) -> int:
    for err_type, status in STATUS_BY_ERROR:
        if isinstance(exc, err_type):
            return status
    return 500


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    status = status_for(exc)
    body: dict = {"error": exc.code, "detail": str(exc)}
    if isinstance(exc, PartialFailure):
        body["completed"] = list(exc.completed)
        body["remaining"] = list(exc.remaining)
    if status >= 500:
        log.error("request failed with %s: %s", exc.code, exc)
    return JSONResponse(status_code=status, content=body)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app(*, create_schema: bool | None = None) -> FastAPI:
    configure_logging()
    auto_schema = settings.auto_create_schema if create_schema is None else create_schema

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        # API docs are only served outside prod
        docs_url=None if settings.is_prod else "/swagger",
        redoc_url=None,
        openapi_url=None if settings.is_prod else "/openapi.json",
        lifespan=lifespan if auto_schema else None,
    )

    # Starlette runs the last-added middleware first: request id wraps logging
    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CatalogError, catalog_error_handler)

    prefix = settings.api_prefix
    app.include_router(health_router, prefix=prefix)
    app.include_router(support_router, prefix=prefix)
    app.include_router(working_areas_router, prefix=prefix)
    app.include_router(properties_router, prefix=prefix)
    app.include_router(units_router, prefix=prefix)

    return app


app = create_app()
