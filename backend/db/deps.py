import logging

from fastapi import HTTPException

from db.session import SessionLocal, get_engine

logger = logging.getLogger(__name__)


def get_db():
    try:
        get_engine()
    except Exception:
        logger.exception("DB engine unavailable")
        raise HTTPException(status_code=500, detail="Internal server error")

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
