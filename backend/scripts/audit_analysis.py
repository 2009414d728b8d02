"""
Report how the stored `ai_analysis` values normalize.

Run from the backend directory:

    python -m scripts.audit_analysis [--details]
"""

import argparse
import logging

import pandas as pd

from db.session import dispose_engine, init_engine, SessionLocal
from services.analysis_normalizer import Parsed, RawText, Unparseable, normalize_analysis
from services.influencer_repository import all_influencer_records
from services.profile_view import (
    format_number,
    format_score,
    risk_color,
    safe_get,
    score_category,
    score_color,
)

FOLLOWERS_PATH = "ai_analysis.profile_analysis.profile_summary.follower_count"


def classify(value) -> tuple[str, object]:
    result = normalize_analysis(value)
    if isinstance(result, Parsed):
        return "parsed", result.document
    if isinstance(result, Unparseable):
        return "unparseable", result.text
    if isinstance(result, RawText) and result.value in (None, ""):
        return "missing", result.value
    return "raw", result.value


def build_report(records: list[dict]) -> pd.DataFrame:
    rows = []
    for record in records:
        outcome, analysis = classify(record.get("ai_analysis"))
        view = {**record, "ai_analysis": analysis}
        credibility = safe_get(view, "credibility_score.value")
        rows.append(
            {
                "id": record.get("id"),
                "username": record.get("username"),
                "outcome": outcome,
                "risk_level": record.get("risk_level") or "Unknown",
                "risk_color": risk_color(record.get("risk_level")),
                "followers": format_number(safe_get(view, FOLLOWERS_PATH)),
                "credibility": format_score(credibility),
                "credibility_category": score_category(credibility),
                "credibility_color": score_color(credibility),
            }
        )

    return pd.DataFrame(
        rows,
        columns=[
            "id",
            "username",
            "outcome",
            "risk_level",
            "risk_color",
            "followers",
            "credibility",
            "credibility_category",
            "credibility_color",
        ],
    )


def summarize(report: pd.DataFrame) -> dict[str, pd.Series]:
    if report.empty:
        empty = pd.Series(dtype="int64")
        return {"outcome": empty, "risk_level": empty}
    return {
        "outcome": report["outcome"].value_counts().sort_index(),
        "risk_level": report["risk_level"].value_counts().sort_index(),
    }


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--details", action="store_true", help="print one line per record")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    init_engine()
    db = SessionLocal()
    try:
        records = all_influencer_records(db)
    finally:
        db.close()
        dispose_engine()

    report = build_report(records)
    summary = summarize(report)

    print(f"records={len(report)}")
    print("\nai_analysis outcome:")
    print(summary["outcome"].to_string())
    print("\nrisk level:")
    print(summary["risk_level"].to_string())
    if args.details:
        print()
        print(report.to_string(index=False))


if __name__ == "__main__":
    main()
