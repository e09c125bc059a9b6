"""Tests for member score persistence."""

from member_score import store
from member_score.core.models import MemberScoreEntry


def entry(email, score):
    return MemberScoreEntry(email=email, score=score)


async def test_insert_and_read(db):
    assert await store.upsert_scores([entry("ann@example.com", 3), entry("bob@example.com", 5)]) == 2
    assert await store.count_scores() == 2
    assert await store.get_score("ANN@example.com ") == 3.0


async def test_update_existing(db):
    await store.upsert_scores([entry("ann@example.com", 3)])
    await store.upsert_scores([entry("ann@example.com", 9)])
    assert await store.count_scores() == 1
    assert await store.get_score("ann@example.com") == 9.0


async def test_last_entry_wins_within_call(db):
    written = await store.upsert_scores([entry("ann@example.com", 1), entry("Ann@example.com", 2)])
    assert written == 1
    assert await store.get_score("ann@example.com") == 2.0


async def test_empty_upsert(db):
    assert await store.upsert_scores([]) == 0


async def test_list_entries_by_email(db):
    await store.upsert_scores([entry("cy@example.com", 1), entry("ann@example.com", 2)])
    assert [e.email for e in await store.list_entries()] == ["ann@example.com", "cy@example.com"]


async def test_list_scores_highest_first(db):
    await store.upsert_scores([
        entry("ann@example.com", 1),
        entry("bob@example.com", 8),
        entry("cy@example.com", 5),
    ])
    scores = await store.list_scores(limit=2)
    assert [s["email"] for s in scores] == ["bob@example.com", "cy@example.com"]
    assert [s["email"] for s in await store.list_scores(limit=2, offset=2)] == ["ann@example.com"]


async def test_unknown_member(db):
    assert await store.get_score("nobody@example.com") is None


async def test_meta_roundtrip(db):
    assert await store.get_meta("last_import") is None
    await store.set_meta("last_import", "one")
    await store.set_meta("last_import", "two")
    assert await store.get_meta("last_import") == "two"
