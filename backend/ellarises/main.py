from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

import ellarises.models  # noqa: F401  registers SQLModel tables

from ellarises.config import get_settings
from ellarises.db import create_db_and_tables
from ellarises.routers import (
    dashboard,
    donations,
    events,
    health,
    milestones,
    participants,
    surveys,
)
from ellarises.services.query_builder import QueryBuilderError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logger.info("Database tables ready")
    yield


app = FastAPI(
    title="Ella Rises",
    description="Participant, event, survey and donation records for Ella Rises",
    version="0.1.0",
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=[f"https://{settings.domain}", *settings.cors_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(QueryBuilderError)
async def query_builder_error_handler(request: Request, exc: QueryBuilderError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Database error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(status_code=500, content={"detail": "Database error"})


app.include_router(health.router)
app.include_router(participants.router)
app.include_router(events.router)
app.include_router(surveys.router)
app.include_router(milestones.router)
app.include_router(donations.router)
app.include_router(dashboard.router)
