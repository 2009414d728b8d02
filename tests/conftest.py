import json

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db.deps import get_db
from main import app


FENCED_ANALYSIS = "```json\n" + json.dumps(
    {
        "profile_analysis": {
            "profile_summary": {"follower_count": 125000, "is_verified": True},
            "brand_safety": {"risk_level": {"explanation": "No concerns found"}},
        },
        "executive_summary": {"value_proposition": "Travel storyteller"},
    }
) + "\n```"

SEED_ROWS = [
    {
        "id": 1,
        "username": "wanderlust.amy",
        "ai_analysis": FENCED_ANALYSIS,
        "engagement_rate": 4.2,
        "risk_level": "Low",
    },
    {
        "id": 2,
        "username": "plain.json",
        "ai_analysis": '{"a":1}',
        "engagement_rate": 1.5,
        "risk_level": "Medium",
    },
    {
        "id": 3,
        "username": "broken.fence",
        "ai_analysis": "```json\n{invalid}\n```",
        "engagement_rate": None,
        "risk_level": "High",
    },
    {
        "id": 4,
        "username": "no.analysis",
        "ai_analysis": None,
        "engagement_rate": 0.0,
        "risk_level": None,
    },
]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _attach_schema(dbapi_connection, _record):
        dbapi_connection.execute("ATTACH DATABASE ':memory:' AS scrapped")

    with engine.begin() as conn:
        conn.execute(
            text(
                """
                CREATE TABLE scrapped.instagram_profile_analysis (
                    id INTEGER PRIMARY KEY,
                    username TEXT,
                    ai_analysis TEXT,
                    engagement_rate REAL,
                    risk_level TEXT
                )
                """
            )
        )
        conn.execute(
            text(
                """
                INSERT INTO scrapped.instagram_profile_analysis
                    (id, username, ai_analysis, engagement_rate, risk_level)
                VALUES (:id, :username, :ai_analysis, :engagement_rate, :risk_level)
                """
            ),
            SEED_ROWS,
        )

    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine, monkeypatch):
    monkeypatch.delenv("INFLUENCER_TABLE", raising=False)
    testing_session = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def _get_test_db():
        db = testing_session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)
