from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, text

from ellarises.db import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])

SERVICE_NAME = "ella-rises-backend"


def _check_database(session: Session) -> str:
    try:
        session.exec(text("SELECT 1"))  # type: ignore[call-overload]
    except SQLAlchemyError as exc:
        logger.warning("Database health check failed: %s", exc)
        return f"error: {exc}"
    return "ok"


@router.get("/health")
async def health(session: Session = Depends(get_session)):
    db_status = _check_database(session)
    return {
        "status": "healthy" if db_status == "ok" else "unhealthy",
        "service": SERVICE_NAME,
        "version": "0.1.0",
        "checks": {"database": db_status},
    }


@router.get("/health/ready")
async def readiness(session: Session = Depends(get_session)):
    db_status = _check_database(session)
    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={
                "status": "not ready",
                "service": SERVICE_NAME,
                "error": db_status,
            },
        )

    return {
        "status": "ready",
        "service": SERVICE_NAME,
    }
