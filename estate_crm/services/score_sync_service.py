"""
Score synchronization - batch recomputation of cached prospect scores.
"""
import asyncio
import logging
import uuid
from typing import Any, List, Optional, Protocol, Sequence, Tuple

from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.core.clock import Clock, system_clock
from estate_crm.core.exceptions import SyncInProgressError
from estate_crm.repositories.prospect_repo import ProspectRepository
from estate_crm.schemas.scoring import ScoreSyncResponse, SyncFailure
from estate_crm.services.scoring_service import calculate_score

logger = logging.getLogger(__name__)

# One pass at a time per process
_sync_lock = asyncio.Lock()


class ProspectStore(Protocol):
    """Persistence the synchronizer needs."""

    async def list_all(self) -> Sequence[Any]:
        ...

    async def update_score(self, prospect_id: uuid.UUID, score: int) -> bool:
        ...


class ScoreSynchronizer:
    """
    Recompute every prospect's score and write back the ones that changed.

    The pass reads everything first, then writes. A failed write is recorded
    in the report and the pass continues with the next prospect. Re-running
    with unchanged data and the same clock reading updates nothing.
    """

    def __init__(self, store: ProspectStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or system_clock

    async def run(self) -> ScoreSyncResponse:
        """Run one pass. Raises SyncInProgressError if a pass is already running."""
        if _sync_lock.locked():
            raise SyncInProgressError()
        async with _sync_lock:
            return await self._run()

    async def _run(self) -> ScoreSyncResponse:
        started_at = self.clock.now()
        prospects = await self.store.list_all()
        logger.info(f"Recomputing scores for {len(prospects)} prospects")

        # Scan: every prospect is scored against the same instant
        changes: List[Tuple[Any, int, int]] = []
        for prospect in prospects:
            new_score = calculate_score(prospect, now=started_at)
            if new_score != prospect.score:
                changes.append((prospect.id, prospect.score, new_score))

        report = ScoreSyncResponse(scanned=len(prospects), started_at=started_at)

        # Write: each update stands alone
        for prospect_id, old_score, new_score in changes:
            try:
                ok = await self.store.update_score(prospect_id, new_score)
            except Exception as e:
                logger.error(f"Score update failed for prospect {prospect_id}: {e}")
                report.failed.append(SyncFailure(prospect_id=str(prospect_id), error=str(e)))
                continue

            if not ok:
                logger.error(f"Score update failed for prospect {prospect_id}: not found")
                report.failed.append(SyncFailure(prospect_id=str(prospect_id), error="Prospect not found"))
                continue

            report.updated += 1
            logger.info(f"Updated prospect {prospect_id}: {old_score} -> {new_score}")

        logger.info(
            f"Score sync finished: scanned={report.scanned} "
            f"updated={report.updated} failed={len(report.failed)}"
        )
        return report


async def run_score_sync(session: AsyncSession, clock: Optional[Clock] = None) -> ScoreSyncResponse:
    """Run a synchronization pass against the database."""
    return await ScoreSynchronizer(ProspectRepository(session), clock).run()
