import os
import re

from sqlalchemy import text
from sqlalchemy.orm import Session


DEFAULT_TABLE = "scrapped.instagram_profile_analysis"
_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_INTEGER_ID = re.compile(r"\s*[+-]?[0-9]+\s*")


def _quote_table(name: str) -> str:
    parts = name.strip().split(".")
    if not parts or len(parts) > 2 or not all(_IDENTIFIER.match(p) for p in parts):
        raise ValueError(f"Invalid table name: {name!r}")
    return ".".join(f'"{p}"' for p in parts)


def influencer_table() -> str:
    return _quote_table(os.getenv("INFLUENCER_TABLE", DEFAULT_TABLE))


def _coerce_id(influencer_id) -> int | None:
    if isinstance(influencer_id, bool):
        return None
    if isinstance(influencer_id, int):
        return influencer_id
    if not isinstance(influencer_id, str) or not _INTEGER_ID.fullmatch(influencer_id):
        return None
    return int(influencer_id.strip())


def list_influencers(db: Session) -> list[dict]:
    rows = (
        db.execute(text(f"SELECT id, username FROM {influencer_table()}"))
        .mappings()
        .all()
    )
    return [{"id": row["id"], "username": row["username"]} for row in rows]


def all_influencer_records(db: Session) -> list[dict]:
    rows = db.execute(text(f"SELECT * FROM {influencer_table()}")).mappings().all()
    return [dict(row) for row in rows]


def get_influencer(db: Session, influencer_id) -> dict | None:
    """
    Fetch one full row by id. The id is always bound, never formatted into
    the statement; ids that are not integers cannot match and return None.
    """
    key = _coerce_id(influencer_id)
    if key is None:
        return None

    row = (
        db.execute(
            text(f"SELECT * FROM {influencer_table()} WHERE id = :id"),
            {"id": key},
        )
        .mappings()
        .first()
    )

    if not row:
        return None

    return dict(row)
