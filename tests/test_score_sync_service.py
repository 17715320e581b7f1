"""
Tests for `services/score_sync_service.py`.

Covers:
- Only prospects whose computed score differs are written.
- A second pass over unchanged data writes nothing.
- A failed write is reported and does not stop the pass.
- Overlapping passes are refused.
"""
import asyncio
from datetime import timedelta

import pytest

from estate_crm.core.exceptions import SyncInProgressError
from estate_crm.models.prospect import Prospect
from estate_crm.services.score_sync_service import ScoreSynchronizer
from estate_crm.services.scoring_service import calculate_score

from conftest import NOW


class InMemoryStore:
    """Prospect store backed by a dict."""

    def __init__(self, prospects, failing_ids=()):
        self.prospects = {p.id: p for p in prospects}
        self.failing_ids = set(failing_ids)
        self.writes = []

    async def list_all(self):
        return list(self.prospects.values())

    async def update_score(self, prospect_id, score):
        if prospect_id in self.failing_ids:
            raise RuntimeError("connection lost")
        prospect = self.prospects.get(prospect_id)
        if prospect is None:
            return False
        prospect.score = score
        self.writes.append(prospect_id)
        return True


class VanishingStore(InMemoryStore):
    """Lists prospects that are gone by the time they are written."""

    async def list_all(self):
        prospects = list(self.prospects.values())
        self.prospects.clear()
        return prospects


class BlockingStore(InMemoryStore):
    """Holds the pass open until released."""

    def __init__(self, prospects):
        super().__init__(prospects)
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def list_all(self):
        self.entered.set()
        await self.release.wait()
        return await super().list_all()


def make_prospect(**fields) -> Prospect:
    return Prospect(full_name="Test Prospect", **fields)


def fresh(prospect: Prospect) -> Prospect:
    prospect.score = calculate_score(prospect, now=NOW)
    return prospect


def test_only_changed_scores_are_written(clock) -> None:
    current = fresh(make_prospect(status="qualified"))
    stale = make_prospect(status="won", is_hot_lead=True, score=50)
    store = InMemoryStore([current, stale])

    report = asyncio.run(ScoreSynchronizer(store, clock).run())

    assert report.scanned == 2
    assert report.updated == 1
    assert report.failed == []
    assert report.started_at == NOW
    assert store.writes == [stale.id]
    assert stale.score == calculate_score(stale, now=NOW)


def test_second_pass_updates_nothing(clock) -> None:
    store = InMemoryStore([
        make_prospect(status="new", score=0),
        make_prospect(status="contacted", source="referral", score=0),
        make_prospect(status="lost", last_contact_at=(NOW - timedelta(days=60)).replace(tzinfo=None), score=0),
    ])
    synchronizer = ScoreSynchronizer(store, clock)

    first = asyncio.run(synchronizer.run())
    second = asyncio.run(synchronizer.run())

    assert first.updated == 3
    assert second.scanned == 3
    assert second.updated == 0
    assert len(store.writes) == 3


def test_clock_moving_forward_changes_recency_scores(clock) -> None:
    prospect = fresh(make_prospect(status="contacted", last_contact_at=NOW.replace(tzinfo=None)))
    store = InMemoryStore([prospect])

    clock.advance(days=45)
    report = asyncio.run(ScoreSynchronizer(store, clock).run())

    assert report.updated == 1
    assert prospect.score == 30 + 20 + 7 - 10


def test_failed_write_does_not_abort_the_pass(clock) -> None:
    broken = make_prospect(status="won", score=0)
    healthy = make_prospect(status="won", score=0)
    store = InMemoryStore([broken, healthy], failing_ids=[broken.id])

    report = asyncio.run(ScoreSynchronizer(store, clock).run())

    assert report.scanned == 2
    assert report.updated == 1
    assert len(report.failed) == 1
    assert report.failed[0].prospect_id == str(broken.id)
    assert report.failed[0].error == "connection lost"
    assert broken.score == 0
    assert healthy.score == calculate_score(healthy, now=NOW)


def test_missing_record_is_reported(clock) -> None:
    prospect = make_prospect(status="won", score=0)
    store = VanishingStore([prospect])

    report = asyncio.run(ScoreSynchronizer(store, clock).run())

    assert report.updated == 0
    assert [f.error for f in report.failed] == ["Prospect not found"]


def test_empty_store(clock) -> None:
    report = asyncio.run(ScoreSynchronizer(InMemoryStore([]), clock).run())
    assert (report.scanned, report.updated, report.failed) == (0, 0, [])


def test_overlapping_pass_is_refused(clock) -> None:
    async def scenario():
        store = BlockingStore([make_prospect(status="won", score=0)])
        first = asyncio.create_task(ScoreSynchronizer(store, clock).run())
        await store.entered.wait()

        with pytest.raises(SyncInProgressError):
            await ScoreSynchronizer(store, clock).run()

        store.release.set()
        return await first

    report = asyncio.run(scenario())
    assert report.updated == 1


def test_lock_released_after_failure(clock) -> None:
    class ExplodingStore(InMemoryStore):
        async def list_all(self):
            raise RuntimeError("database unavailable")

    with pytest.raises(RuntimeError):
        asyncio.run(ScoreSynchronizer(ExplodingStore([]), clock).run())

    report = asyncio.run(ScoreSynchronizer(InMemoryStore([]), clock).run())
    assert report.scanned == 0
