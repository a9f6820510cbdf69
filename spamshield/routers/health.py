# spamshield/routers/health.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from spamshield.db.session import get_db

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger(__name__)


@router.get("")
def health():
    return {"ok": True}


@router.get("/db")
def health_db(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.exception("database health check failed")
        raise HTTPException(status_code=503, detail=f"Database unavailable: {type(e).__name__}")
    return {"ok": True, "database": db.get_bind().dialect.name}
