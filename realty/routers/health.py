# realty/routers/health.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..schemas import HealthOut

router = APIRouter(tags=["health"])

log = logging.getLogger("realty.health")


@router.get("/health", response_model=HealthOut)
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError:
        log.warning("database ping failed", exc_info=True)
        database = "unavailable"
    return HealthOut(ok=database == "ok", env=settings.app_env, database=database)
