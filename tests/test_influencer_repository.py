import pytest

from services.influencer_repository import (
    all_influencer_records,
    get_influencer,
    influencer_table,
    list_influencers,
)
from tests.conftest import SEED_ROWS


def test_default_table_is_quoted(monkeypatch):
    monkeypatch.delenv("INFLUENCER_TABLE", raising=False)

    assert influencer_table() == '"scrapped"."instagram_profile_analysis"'


@pytest.mark.parametrize(
    "name",
    [
        "profiles; DROP TABLE x",
        "a.b.c",
        "",
        'scrapped."profiles"',
    ],
)
def test_invalid_table_names_are_rejected(monkeypatch, name):
    monkeypatch.setenv("INFLUENCER_TABLE", name)

    with pytest.raises(ValueError):
        influencer_table()


def test_list_influencers(db_session):
    rows = list_influencers(db_session)

    assert rows == [{"id": r["id"], "username": r["username"]} for r in SEED_ROWS]


def test_get_influencer_returns_raw_row(db_session):
    row = get_influencer(db_session, "1")

    assert row["id"] == 1
    assert row["ai_analysis"] == SEED_ROWS[0]["ai_analysis"]


def test_get_influencer_accepts_int(db_session):
    assert get_influencer(db_session, 2)["username"] == "plain.json"


@pytest.mark.parametrize(
    "value",
    ["999", "abc", "1; DROP TABLE x;", "1.5", True, "0_1", "\u0661", "1e0", None],
)
def test_get_influencer_no_match(db_session, value):
    assert get_influencer(db_session, value) is None


def test_all_influencer_records(db_session):
    records = all_influencer_records(db_session)

    assert [r["username"] for r in records] == [r["username"] for r in SEED_ROWS]
    assert set(records[0]) == set(SEED_ROWS[0])


@pytest.mark.parametrize("value", [" 1 ", "+1", "01"])
def test_get_influencer_accepts_plain_integer_text(db_session, value):
    assert get_influencer(db_session, value)["id"] == 1
