# -*- coding: utf-8 -*-
"""
Heart-check API

Spreadsheet import, cardiovascular risk scoring and heart-age estimation.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .app_db import init_app_db
from .assessment.api import router as assessments_router
from .config import settings
from .errors import HeartCheckError

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Heart Check",
    description="Patient spreadsheet import, cardiovascular risk score and heart age",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _startup_init_db() -> None:
    init_app_db(settings.db_path, assessments_table=settings.assessments_table)


# Ensure the app DB exists even when lifespan events are not triggered (e.g. some test clients).
init_app_db(settings.db_path, assessments_table=settings.assessments_table)


@app.exception_handler(HeartCheckError)
async def _heartcheck_error(request: Request, exc: HeartCheckError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc) or "Unknown error"})


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    where = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(status_code=422, content={"error": f"{where}: {message}" if where else message})


@app.exception_handler(Exception)
async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s failed", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc) or "Unknown error"})


app.include_router(assessments_router)


@app.get("/api/health")
def health() -> dict:
    return {"status": "ok"}


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    try:
        port = int(settings.port_raw)
    except ValueError:
        port = 8000

    uvicorn.run("heartcheck.api:app", host=settings.host, port=port, reload=False)
