"""
Test analysis history persistence
"""

from datetime import datetime, timedelta, timezone

import pytest

from lexi_simplify.models.schemas import AnalysisResult
from lexi_simplify.services import history_service

from tests.fakes import ANALYSIS_JSON


@pytest.fixture
def result():
    return AnalysisResult.model_validate(ANALYSIS_JSON)


@pytest.fixture
def ticking_clock(monkeypatch):
    """Make utcnow advance one second per call."""
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    ticks = iter(range(10_000))
    monkeypatch.setattr(history_service, "utcnow", lambda: start + timedelta(seconds=next(ticks)))


class TestHistoryService:
    """Test HistoryService against a fake collection."""

    async def test_save_assigns_id_and_timestamp(self, history, collection, result):
        record = await history.save("alice", "lease.pdf", result)

        assert record.id.startswith("analysis_")
        assert record.file_name == "lease.pdf"
        assert record.created_at.tzinfo is not None
        assert record.summary == result.summary

        stored = collection.docs[0]
        assert stored["_id"] == record.id
        assert stored["user_id"] == "alice"
        assert "id" not in stored

    async def test_list_newest_first(self, history, result, ticking_clock):
        saved = [await history.save("alice", f"doc{i}.pdf", result) for i in range(5)]

        records = await history.list("alice")

        assert [r.id for r in records] == [r.id for r in reversed(saved)]
        assert len({r.id for r in records}) == 5

    async def test_list_is_scoped_to_user(self, history, result):
        await history.save("alice", "a.pdf", result)
        await history.save("bob", "b.pdf", result)

        records = await history.list("alice")

        assert [r.file_name for r in records] == ["a.pdf"]

    async def test_clear_then_list_is_empty(self, history, result, ticking_clock):
        for i in range(3):
            await history.save("alice", f"doc{i}.pdf", result)
        await history.save("bob", "b.pdf", result)

        deleted = await history.clear("alice")

        assert deleted == 3
        assert await history.list("alice") == []
        assert len(await history.list("bob")) == 1

    async def test_clear_keeps_records_saved_after_it(self, history, collection, result, monkeypatch):
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        monkeypatch.setattr(history_service, "utcnow", lambda: base)
        await history.save("alice", "old.pdf", result)

        # A save that commits with a later timestamp than the clear
        late = await history.save("alice", "late.pdf", result)
        collection.docs[-1]["created_at"] = base + timedelta(seconds=5)

        deleted = await history.clear("alice")

        assert deleted == 1
        assert [r.id for r in await history.list("alice")] == [late.id]

    async def test_get(self, history, result):
        record = await history.save("alice", "lease.pdf", result)

        assert (await history.get("alice", record.id)).id == record.id
        assert await history.get("bob", record.id) is None
        assert await history.get("alice", "analysis_missing") is None

    async def test_ensure_indexes(self, history, collection):
        await history.ensure_indexes()

        assert collection.indexes
