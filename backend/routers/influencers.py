# routers/influencers.py

import logging
import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from db.deps import get_db
from models.influencers import ErrorResponse, InfluencerSummary
from services.analysis_normalizer import normalize_record
from services.influencer_repository import get_influencer, list_influencers

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["influencers"])

NOT_FOUND = {"error": "Influencer not found"}
INTERNAL_ERROR = {"error": "Internal server error"}


def _json_safe(value: Any):
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Decimal) and not value.is_finite():
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _clean_json_row(row: dict) -> dict:
    return {k: _json_safe(v) for k, v in row.items()}


@router.get(
    "/influencers",
    responses={
        200: {"model": list[InfluencerSummary]},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def influencers(
    id: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    Without `id`: every influencer as {id, username}.
    With `id`: the full record, `ai_analysis` unwrapped when fenced.
    """
    if not id:
        try:
            rows = list_influencers(db)
        except Exception:
            logger.exception("Listing influencers failed")
            return JSONResponse(status_code=500, content=INTERNAL_ERROR)
        logger.info("LIST: influencers=%s", len(rows))
        return rows

    try:
        record = get_influencer(db, id)
    except Exception:
        logger.exception("Fetching influencer id=%r failed", id)
        return JSONResponse(status_code=500, content=INTERNAL_ERROR)

    if record is None:
        logger.info("DETAIL: influencer id=%r not found", id)
        return JSONResponse(status_code=404, content=NOT_FOUND)

    return _clean_json_row(normalize_record(record))
